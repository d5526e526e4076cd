"""
Pydantic schemas for service types and service payments.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# --- Service Type Schemas ---

class ServiceTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class ServiceTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class ServiceTypeResponse(BaseModel):
    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


# --- Service Payment Schemas ---

class PaymentCreate(BaseModel):
    """
    Request to pay for a service.

    The paying account is given either directly or through the
    number of an active RFID card bound to it.
    """
    paid_at: date
    amount: Decimal = Field(decimal_places=2)
    service_type_id: int
    account_id: int | None = None
    card_number: str | None = Field(default=None, max_length=50)


class PaymentUpdate(BaseModel):
    paid_at: date | None = None
    service_type_id: int | None = None


class PaymentResponse(BaseModel):
    id: int
    paid_at: date
    amount: Decimal
    account_id: int
    service_type_id: int
    card_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
