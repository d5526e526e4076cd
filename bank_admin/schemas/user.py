"""
Pydantic schemas for roles, users and login.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from bank_admin.models.user import MAX_PASSWORD_BYTES


# --- Role Schemas ---

class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=255)


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=255)


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


# --- User Schemas ---

def _fits_bcrypt(password: str | None) -> str | None:
    """max_length counts characters; bcrypt limits the UTF-8 bytes."""
    if password is not None and len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(
            f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
        )
    return password


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=MAX_PASSWORD_BYTES)
    role_id: int

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return _fits_bcrypt(value)


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    password: str | None = Field(
        default=None, min_length=6, max_length=MAX_PASSWORD_BYTES
    )
    role_id: int | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return _fits_bcrypt(value)


class UserResponse(BaseModel):
    id: int
    username: str
    role_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)
