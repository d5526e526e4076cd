"""
RFID card model.

A card is bound to one account and lets a client pay for
services by presenting it at the reader.
"""

from datetime import date

from sqlalchemy import String, Boolean, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_admin.models.base import Base


class RfidCard(Base):
    __tablename__ = "rfid_cards"

    id: Mapped[int] = mapped_column(primary_key=True)
    card_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    assigned_at: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return f"<RfidCard {self.card_number} -> account {self.account_id}>"
