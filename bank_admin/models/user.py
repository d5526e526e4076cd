"""
Staff user model.

Users authorize transfers and are the actors recorded in
the audit log. Only the bcrypt hash of the password is stored.
"""

from datetime import datetime

import bcrypt
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_admin.models.base import Base

# bcrypt only hashes the first 72 bytes and newer releases reject more
MAX_PASSWORD_BYTES = 72


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    role: Mapped["Role"] = relationship()

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt()
        ).decode("utf-8")

    def check_password(self, password: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Such a password can never have been stored
            return False
        return bcrypt.checkpw(
            encoded, self.password_hash.encode("utf-8")
        )

    def __repr__(self) -> str:
        return f"<User {self.username}>"
