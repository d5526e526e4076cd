"""
Transfer service: moves money between two accounts.

A transfer request is checked in a fixed order, and the first
failing check decides the rejection:

1. every field is present
2. source and destination differ
3. both accounts exist
4. the amount is positive
5. both accounts are active
6. the source balance covers the amount

Then, as one unit: debit the source, credit the destination,
insert the Transfer row and append a CREATE audit entry.

The unit runs inside a SAVEPOINT. If any step fails the
savepoint is rolled back, so neither balance moves and no row
is left behind even before the caller rolls back. The caller
controls the final commit.
"""

import logging
from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_admin.errors import (
    AccountNotFoundError,
    InactiveAccountError,
    InsufficientFundsError,
    InvalidAmountError,
    MissingFieldsError,
    NotFoundError,
    PersistenceError,
    SameAccountError,
)
from bank_admin.models.enums import AuditAction
from bank_admin.models.transfer import Transfer
from bank_admin.schemas.transfer import TransferRequest
from bank_admin.services.account_store import AccountStore
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "transferred_at",
    "amount",
    "source_account_id",
    "destination_account_id",
    "authorizing_user_id",
)


class TransferService:
    """
    The collaborators are injected so tests can substitute a
    failing store or recorder. By default both share the
    service's session, and therefore its transaction.
    """

    def __init__(
        self,
        db: Session,
        account_store: AccountStore | None = None,
        audit: AuditRecorder | None = None,
    ):
        self.db = db
        self.account_store = account_store or AccountStore(db)
        self.audit = audit or AuditRecorder(db)

    def transfer(self, request: TransferRequest) -> Transfer:
        missing = [
            name for name in REQUIRED_FIELDS
            if getattr(request, name) is None
        ]
        if missing:
            raise MissingFieldsError(
                f"Missing required fields: {', '.join(missing)}"
            )

        source_id = request.source_account_id
        destination_id = request.destination_account_id
        amount = request.amount

        if source_id == destination_id:
            raise SameAccountError("Cannot transfer to the same account")

        try:
            with self.db.begin_nested():
                transfer = self._execute(request, source_id, destination_id, amount)
        except SQLAlchemyError as e:
            logger.exception(
                "Transfer %s -> %s of %s rolled back",
                source_id, destination_id, amount,
            )
            raise PersistenceError.from_db_error(
                "Transfer could not be completed", e
            ) from e

        logger.info(
            "Transfer %s completed: %s from account %s to account %s "
            "authorized by user %s",
            transfer.id, amount, source_id, destination_id,
            request.authorizing_user_id,
        )
        return transfer

    def _execute(
        self,
        request: TransferRequest,
        source_id: int,
        destination_id: int,
        amount: Decimal,
    ) -> Transfer:
        # Both rows stay locked until the outer transaction ends,
        # so the balance check below cannot go stale.
        accounts = self.account_store.lock([source_id, destination_id])
        source = accounts.get(source_id)
        destination = accounts.get(destination_id)

        if source is None:
            raise AccountNotFoundError(f"Source account {source_id} not found")
        if destination is None:
            raise AccountNotFoundError(
                f"Destination account {destination_id} not found"
            )

        if amount <= 0:
            raise InvalidAmountError("Transfer amount must be greater than zero")

        if not source.is_active:
            raise InactiveAccountError(f"Source account {source_id} is not active")
        if not destination.is_active:
            raise InactiveAccountError(
                f"Destination account {destination_id} is not active"
            )

        if source.balance < amount:
            logger.warning(
                "Transfer rejected - insufficient funds account=%s "
                "balance=%s amount=%s",
                source_id, source.balance, amount,
            )
            raise InsufficientFundsError(
                f"Insufficient funds: available={source.balance}, "
                f"requested={amount}"
            )

        self.account_store.apply_delta(source_id, -amount)
        self.account_store.apply_delta(destination_id, amount)

        transfer = Transfer(
            transferred_at=request.transferred_at,
            amount=amount,
            source_account_id=source_id,
            destination_account_id=destination_id,
            authorizing_user_id=request.authorizing_user_id,
        )
        self.db.add(transfer)
        self.db.flush()

        self.audit.append(
            AuditAction.CREATE,
            "Transfer",
            transfer.id,
            request.authorizing_user_id,
        )
        return transfer

    def get_transfer(self, transfer_id: int) -> Transfer:
        transfer = self.db.get(Transfer, transfer_id)
        if not transfer:
            raise NotFoundError(f"Transfer {transfer_id} not found")
        return transfer

    def list_transfers(self, account_id: int | None = None) -> list[Transfer]:
        """Transfers newest first, optionally those touching one account."""
        stmt = select(Transfer)
        if account_id is not None:
            stmt = stmt.where(or_(
                Transfer.source_account_id == account_id,
                Transfer.destination_account_id == account_id,
            ))
        stmt = stmt.order_by(Transfer.id.desc())
        return list(self.db.execute(stmt).scalars().all())
