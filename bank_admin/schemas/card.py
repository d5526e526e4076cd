"""
Pydantic schemas for RFID cards.
"""

from datetime import date

from pydantic import BaseModel, Field


class CardCreate(BaseModel):
    card_number: str = Field(min_length=1, max_length=50)
    account_id: int
    assigned_at: date


class CardUpdate(BaseModel):
    card_number: str | None = Field(default=None, min_length=1, max_length=50)
    account_id: int | None = None
    assigned_at: date | None = None


class CardResponse(BaseModel):
    id: int
    card_number: str
    account_id: int
    assigned_at: date
    is_active: bool

    model_config = {"from_attributes": True}
