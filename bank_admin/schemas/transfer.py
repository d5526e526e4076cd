"""
Pydantic schemas for transfers.

Every field of TransferRequest is optional at the schema level
so that a missing field is reported by the transfer service as
MISSING_FIELDS, in its place in the validation order, rather
than as a generic request-shape error.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class TransferRequest(BaseModel):
    transferred_at: datetime | None = None
    amount: Decimal | None = Field(default=None, decimal_places=2)
    source_account_id: int | None = None
    destination_account_id: int | None = None
    authorizing_user_id: int | None = None


class TransferResponse(BaseModel):
    id: int
    transferred_at: datetime
    amount: Decimal
    source_account_id: int
    destination_account_id: int
    authorizing_user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TransferResult(BaseModel):
    """Success envelope returned by the transfer endpoint."""
    success: bool = True
    message: str
    transfer: TransferResponse
