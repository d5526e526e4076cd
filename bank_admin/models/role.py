"""
User role model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from bank_admin.models.base import Base


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
