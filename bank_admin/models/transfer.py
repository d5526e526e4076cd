"""
Transfer model.

One row per successful transfer request. Transfers are
immutable: there is no update and no delete.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_admin.models.base import Base


class Transfer(Base):
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
        CheckConstraint(
            "source_account_id <> destination_account_id",
            name="ck_transfers_distinct_accounts",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    # Timestamp supplied by the caller
    transferred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    source_account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    destination_account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    authorizing_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    source_account: Mapped["Account"] = relationship(
        foreign_keys=[source_account_id]
    )
    destination_account: Mapped["Account"] = relationship(
        foreign_keys=[destination_account_id]
    )

    def __repr__(self) -> str:
        return (
            f"<Transfer {self.amount} "
            f"{self.source_account_id} -> {self.destination_account_id}>"
        )
