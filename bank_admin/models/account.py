"""
Account model.

The account stores its balance directly. The balance only
moves through transfers and service payments, and the
database refuses to store a negative value.

Accounts are deactivated, never deleted: transfers, payments
and cards keep pointing at them.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Numeric, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_admin.models.base import Base


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_number: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False
    )
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id"), nullable=False, index=True
    )
    account_type_id: Mapped[int] = mapped_column(
        ForeignKey("account_types.id"), nullable=False, index=True
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0.00")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    client: Mapped["Client"] = relationship(back_populates="accounts")
    account_type: Mapped["AccountType"] = relationship()

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<Account {self.account_number} {self.balance} ({state})>"
