"""
Payment service: service types and service payments.

Recording a payment debits the paying account. The account is
locked, checked and debited in one SAVEPOINT, the same way a
transfer handles its source account. Deleting a payment credits
the amount back.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_admin.errors import (
    AccountNotFoundError,
    ConflictError,
    InactiveAccountError,
    InsufficientFundsError,
    InvalidAmountError,
    MissingFieldsError,
    NotFoundError,
    PersistenceError,
)
from bank_admin.models.enums import AuditAction
from bank_admin.models.rfid_card import RfidCard
from bank_admin.models.service_payment import ServicePayment
from bank_admin.models.service_type import ServiceType
from bank_admin.schemas.payment import (
    PaymentCreate,
    PaymentUpdate,
    ServiceTypeCreate,
    ServiceTypeUpdate,
)
from bank_admin.services.account_store import AccountStore
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(
        self,
        db: Session,
        account_store: AccountStore | None = None,
        audit: AuditRecorder | None = None,
    ):
        self.db = db
        self.account_store = account_store or AccountStore(db)
        self.audit = audit or AuditRecorder(db)

    # --- Service types ---

    def _ensure_type_name_free(self, name: str, type_id: int | None = None) -> None:
        existing = self.db.execute(
            select(ServiceType).where(ServiceType.name == name)
        ).scalar_one_or_none()
        if existing and existing.id != type_id:
            raise ConflictError(f"Service type '{name}' already exists")

    def create_service_type(
        self, request: ServiceTypeCreate, user_id: int | None
    ) -> ServiceType:
        self._ensure_type_name_free(request.name)

        service_type = ServiceType(
            name=request.name,
            description=request.description,
        )
        self.db.add(service_type)
        self.db.flush()

        self.audit.append(
            AuditAction.CREATE, "ServiceType", service_type.id, user_id
        )
        return service_type

    def update_service_type(
        self, type_id: int, request: ServiceTypeUpdate, user_id: int | None
    ) -> ServiceType:
        service_type = self.get_service_type(type_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_type_name_free(changes["name"], service_type.id)

        for field, value in changes.items():
            setattr(service_type, field, value)
        self.db.flush()

        self.audit.append(
            AuditAction.UPDATE, "ServiceType", service_type.id, user_id
        )
        return service_type

    def delete_service_type(self, type_id: int, user_id: int | None) -> None:
        service_type = self.get_service_type(type_id)
        in_use = self.db.execute(
            select(ServicePayment.id)
            .where(ServicePayment.service_type_id == type_id)
            .limit(1)
        ).first()
        if in_use:
            raise ConflictError(f"Service type {type_id} has recorded payments")

        self.db.delete(service_type)
        self.db.flush()
        self.audit.append(AuditAction.DELETE, "ServiceType", type_id, user_id)

    def get_service_type(self, type_id: int) -> ServiceType:
        service_type = self.db.get(ServiceType, type_id)
        if not service_type:
            raise NotFoundError(f"Service type {type_id} not found")
        return service_type

    def list_service_types(self) -> list[ServiceType]:
        return list(
            self.db.execute(
                select(ServiceType).order_by(ServiceType.id)
            ).scalars().all()
        )

    # --- Payments ---

    def _resolve_payer(self, request: PaymentCreate) -> tuple[int, int | None]:
        """Return (account_id, card_id) for the payment."""
        if request.card_number is not None:
            card = self.db.execute(
                select(RfidCard).where(RfidCard.card_number == request.card_number)
            ).scalar_one_or_none()
            if not card:
                raise NotFoundError(f"Card '{request.card_number}' not found")
            if not card.is_active:
                raise ConflictError(f"Card '{request.card_number}' is not active")
            if request.account_id is not None and request.account_id != card.account_id:
                raise ConflictError(
                    f"Card '{request.card_number}' is not bound to "
                    f"account {request.account_id}"
                )
            return card.account_id, card.id

        if request.account_id is None:
            raise MissingFieldsError("Either account_id or card_number is required")
        return request.account_id, None

    def create_payment(self, request: PaymentCreate, user_id: int | None) -> ServicePayment:
        account_id, card_id = self._resolve_payer(request)
        self.get_service_type(request.service_type_id)

        try:
            with self.db.begin_nested():
                payment = self._debit_and_record(request, account_id, card_id)
                self.audit.append(
                    AuditAction.CREATE, "ServicePayment", payment.id, user_id
                )
        except SQLAlchemyError as e:
            logger.exception("Payment from account %s rolled back", account_id)
            raise PersistenceError.from_db_error(
                "Payment could not be recorded", e
            ) from e

        logger.info(
            "Payment %s of %s recorded for account %s",
            payment.id, payment.amount, account_id,
        )
        return payment

    def _debit_and_record(
        self, request: PaymentCreate, account_id: int, card_id: int | None
    ) -> ServicePayment:
        account = self.account_store.lock([account_id]).get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")

        amount: Decimal = request.amount
        if amount <= 0:
            raise InvalidAmountError("Payment amount must be greater than zero")
        if not account.is_active:
            raise InactiveAccountError(f"Account {account_id} is not active")
        if account.balance < amount:
            logger.warning(
                "Payment rejected - insufficient funds account=%s "
                "balance=%s amount=%s",
                account_id, account.balance, amount,
            )
            raise InsufficientFundsError(
                f"Insufficient funds: available={account.balance}, "
                f"requested={amount}"
            )

        self.account_store.apply_delta(account_id, -amount)

        payment = ServicePayment(
            paid_at=request.paid_at,
            amount=amount,
            account_id=account_id,
            service_type_id=request.service_type_id,
            card_id=card_id,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def update_payment(
        self, payment_id: int, request: PaymentUpdate, user_id: int | None
    ) -> ServicePayment:
        """Only the date and the service type can change; the amount is settled."""
        payment = self.get_payment(payment_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "service_type_id" in changes:
            self.get_service_type(changes["service_type_id"])

        for field, value in changes.items():
            setattr(payment, field, value)
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "ServicePayment", payment.id, user_id)
        return payment

    def delete_payment(self, payment_id: int, user_id: int | None) -> None:
        """Remove a payment and refund its amount to the paying account."""
        payment = self.get_payment(payment_id)

        try:
            with self.db.begin_nested():
                self.account_store.lock([payment.account_id])
                self.account_store.apply_delta(payment.account_id, payment.amount)
                self.db.delete(payment)
                self.db.flush()
                self.audit.append(
                    AuditAction.DELETE, "ServicePayment", payment_id, user_id
                )
        except SQLAlchemyError as e:
            logger.exception("Refund of payment %s rolled back", payment_id)
            raise PersistenceError.from_db_error(
                "Payment could not be deleted", e
            ) from e

        logger.info("Payment %s deleted and refunded", payment_id)

    def get_payment(self, payment_id: int) -> ServicePayment:
        payment = self.db.get(ServicePayment, payment_id)
        if not payment:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    def list_payments(self, account_id: int | None = None) -> list[ServicePayment]:
        stmt = select(ServicePayment)
        if account_id is not None:
            stmt = stmt.where(ServicePayment.account_id == account_id)
        return list(
            self.db.execute(stmt.order_by(ServicePayment.id.desc())).scalars().all()
        )
