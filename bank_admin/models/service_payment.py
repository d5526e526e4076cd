"""
Service payment model.

A payment debits the paying account when it is recorded and
credits it back when the payment is deleted.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_admin.models.base import Base


class ServicePayment(Base):
    __tablename__ = "service_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_service_payments_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    paid_at: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    service_type_id: Mapped[int] = mapped_column(
        ForeignKey("service_types.id"), nullable=False, index=True
    )
    card_id: Mapped[int | None] = mapped_column(
        ForeignKey("rfid_cards.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    account: Mapped["Account"] = relationship()
    service_type: Mapped["ServiceType"] = relationship()

    def __repr__(self) -> str:
        return f"<ServicePayment {self.amount} from account {self.account_id}>"
