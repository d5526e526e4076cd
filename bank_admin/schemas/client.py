"""
Pydantic schemas for client operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ClientCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    email: str = Field(min_length=5, max_length=255)
    profile: str | None = Field(default=None, max_length=50)


class ClientUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    email: str | None = Field(default=None, min_length=5, max_length=255)
    profile: str | None = Field(default=None, max_length=50)


class ClientResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    address: str | None
    phone: str | None
    email: str
    profile: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
