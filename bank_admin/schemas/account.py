"""
Pydantic schemas for accounts and account types.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# --- Account Type Schemas ---

class AccountTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class AccountTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class AccountTypeResponse(BaseModel):
    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


# --- Account Schemas ---

class AccountOpen(BaseModel):
    """Request to open a new account."""
    account_number: str = Field(min_length=1, max_length=30)
    client_id: int
    account_type_id: int
    balance: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    is_active: bool = True


class AccountUpdate(BaseModel):
    """
    Editable account attributes.

    The balance is deliberately absent: it only changes through
    transfers and service payments.
    """
    account_number: str | None = Field(default=None, min_length=1, max_length=30)
    client_id: int | None = None
    account_type_id: int | None = None


class AccountResponse(BaseModel):
    id: int
    account_number: str
    client_id: int
    account_type_id: int
    balance: Decimal
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountSummary(BaseModel):
    """Account row as shown in listings, with display names resolved."""
    id: int
    account_number: str
    client_name: str
    account_type_name: str
    balance: Decimal
    is_active: bool
