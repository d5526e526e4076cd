"""
Tests for the TransferService.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from bank_admin.errors import (
    AccountNotFoundError,
    ErrorKind,
    InactiveAccountError,
    InsufficientFundsError,
    InvalidAmountError,
    MissingFieldsError,
    PersistenceError,
    SameAccountError,
)
from bank_admin.models.account import Account
from bank_admin.models.audit_log import AuditLog
from bank_admin.models.enums import AuditAction
from bank_admin.models.transfer import Transfer
from bank_admin.schemas.transfer import TransferRequest
from bank_admin.services.account_store import AccountStore
from bank_admin.services.audit_service import AuditRecorder
from bank_admin.services.transfer_service import TransferService


def make_request(source, destination, amount, user):
    return TransferRequest(
        transferred_at=datetime(2024, 5, 1, 10, 30),
        amount=Decimal(amount),
        source_account_id=source.id if hasattr(source, "id") else source,
        destination_account_id=(
            destination.id if hasattr(destination, "id") else destination
        ),
        authorizing_user_id=user.id,
    )


def balance_of(db_session, account_id):
    db_session.expire_all()
    return db_session.get(Account, account_id).balance


def count_rows(db_session, model, *criteria):
    return db_session.execute(
        select(func.count()).select_from(model).where(*criteria)
    ).scalar_one()


def transfer_audit_count(db_session):
    return count_rows(db_session, AuditLog, AuditLog.entity_name == "Transfer")


class TestSuccessfulTransfer:

    def test_moves_funds_between_accounts(self, db_session, staff_user, open_account):
        source = open_account("1000.50")
        destination = open_account("200.00")

        TransferService(db_session).transfer(
            make_request(source, destination, "300.00", staff_user)
        )
        db_session.commit()

        assert balance_of(db_session, source.id) == Decimal("700.50")
        assert balance_of(db_session, destination.id) == Decimal("500.00")

    def test_creates_one_transfer_row(self, db_session, staff_user, open_account):
        source = open_account("1000.50")
        destination = open_account("200.00")

        transfer = TransferService(db_session).transfer(
            make_request(source, destination, "300.00", staff_user)
        )
        db_session.commit()

        assert count_rows(db_session, Transfer) == 1
        assert transfer.amount == Decimal("300.00")
        assert transfer.source_account_id == source.id
        assert transfer.destination_account_id == destination.id
        assert transfer.authorizing_user_id == staff_user.id
        assert transfer.transferred_at == datetime(2024, 5, 1, 10, 30)

    def test_appends_create_audit_entry(self, db_session, staff_user, open_account):
        source = open_account("1000.50")
        destination = open_account("200.00")

        transfer = TransferService(db_session).transfer(
            make_request(source, destination, "300.00", staff_user)
        )
        db_session.commit()

        entries = db_session.execute(
            select(AuditLog).where(AuditLog.entity_name == "Transfer")
        ).scalars().all()
        assert len(entries) == 1
        assert entries[0].action == AuditAction.CREATE
        assert entries[0].entity_id == transfer.id
        assert entries[0].user_id == staff_user.id

    def test_can_drain_source_to_zero(self, db_session, staff_user, open_account):
        source = open_account("50.00")
        destination = open_account("0.00")

        TransferService(db_session).transfer(
            make_request(source, destination, "50.00", staff_user)
        )
        db_session.commit()

        assert balance_of(db_session, source.id) == Decimal("0.00")
        assert balance_of(db_session, destination.id) == Decimal("50.00")


class TestRejections:

    def test_insufficient_funds(self, db_session, staff_user, open_account):
        source = open_account("50.00")
        destination = open_account("200.00")
        service = TransferService(db_session)

        with pytest.raises(InsufficientFundsError) as exc_info:
            service.transfer(make_request(source, destination, "100.00", staff_user))
        db_session.rollback()

        assert exc_info.value.kind == ErrorKind.INSUFFICIENT_FUNDS
        assert balance_of(db_session, source.id) == Decimal("50.00")
        assert balance_of(db_session, destination.id) == Decimal("200.00")
        assert count_rows(db_session, Transfer) == 0
        assert transfer_audit_count(db_session) == 0

    def test_same_account_rejected_regardless_of_balance(
        self, db_session, staff_user, open_account
    ):
        account = open_account("5000.00")

        with pytest.raises(SameAccountError):
            TransferService(db_session).transfer(
                make_request(account, account, "10.00", staff_user)
            )

    @pytest.mark.parametrize("amount", ["0", "-25.00"])
    def test_non_positive_amount_rejected(
        self, db_session, staff_user, open_account, amount
    ):
        source = open_account("1000.00")
        destination = open_account("0.00")

        with pytest.raises(InvalidAmountError):
            TransferService(db_session).transfer(
                make_request(source, destination, amount, staff_user)
            )
        db_session.rollback()
        assert balance_of(db_session, source.id) == Decimal("1000.00")

    def test_inactive_source_rejected(self, db_session, staff_user, open_account):
        source = open_account("1000.00", active=False)
        destination = open_account("0.00")

        with pytest.raises(InactiveAccountError, match="Source"):
            TransferService(db_session).transfer(
                make_request(source, destination, "10.00", staff_user)
            )

    def test_inactive_destination_rejected(self, db_session, staff_user, open_account):
        source = open_account("1000.00")
        destination = open_account("0.00", active=False)

        with pytest.raises(InactiveAccountError, match="Destination"):
            TransferService(db_session).transfer(
                make_request(source, destination, "10.00", staff_user)
            )

    def test_unknown_account_rejected(self, db_session, staff_user, open_account):
        source = open_account("1000.00")

        with pytest.raises(AccountNotFoundError):
            TransferService(db_session).transfer(
                make_request(source, 999, "10.00", staff_user)
            )

    def test_missing_fields_rejected(self, db_session, staff_user, open_account):
        source = open_account("1000.00")

        with pytest.raises(MissingFieldsError) as exc_info:
            TransferService(db_session).transfer(TransferRequest(
                source_account_id=source.id,
                authorizing_user_id=staff_user.id,
            ))

        assert "amount" in exc_info.value.message
        assert "destination_account_id" in exc_info.value.message


class TestValidationOrder:
    """The first failing check decides the error kind."""

    def test_missing_fields_before_same_account(self, db_session):
        with pytest.raises(MissingFieldsError):
            TransferService(db_session).transfer(TransferRequest(
                source_account_id=1, destination_account_id=1,
            ))

    def test_same_account_before_existence(self, db_session, staff_user):
        with pytest.raises(SameAccountError):
            TransferService(db_session).transfer(
                make_request(404, 404, "10.00", staff_user)
            )

    def test_existence_before_amount(self, db_session, staff_user, open_account):
        source = open_account("100.00")
        with pytest.raises(AccountNotFoundError):
            TransferService(db_session).transfer(
                make_request(source, 404, "0", staff_user)
            )

    def test_amount_before_active_state(self, db_session, staff_user, open_account):
        source = open_account("100.00", active=False)
        destination = open_account("0.00")
        with pytest.raises(InvalidAmountError):
            TransferService(db_session).transfer(
                make_request(source, destination, "-1.00", staff_user)
            )

    def test_active_state_before_balance(self, db_session, staff_user, open_account):
        source = open_account("1.00")
        destination = open_account("0.00", active=False)
        with pytest.raises(InactiveAccountError):
            TransferService(db_session).transfer(
                make_request(source, destination, "500.00", staff_user)
            )


# --- Atomicity ---

class CreditFailingStore(AccountStore):
    """Debits succeed, credits hit a database failure."""

    def apply_delta(self, account_id, amount):
        if amount > 0:
            raise OperationalError(
                "UPDATE accounts", {}, Exception("database unavailable")
            )
        super().apply_delta(account_id, amount)


class BrokenAuditRecorder(AuditRecorder):
    """Writes entries the database refuses (entity_name is NOT NULL)."""

    def append(self, action, entity_name, entity_id, user_id):
        return super().append(action, None, entity_id, user_id)


class TestAtomicity:

    def test_failed_credit_rolls_back_debit(self, db_session, staff_user, open_account):
        source = open_account("1000.00")
        destination = open_account("200.00")
        service = TransferService(
            db_session, account_store=CreditFailingStore(db_session)
        )

        with pytest.raises(PersistenceError) as exc_info:
            service.transfer(make_request(source, destination, "300.00", staff_user))
        db_session.rollback()

        assert exc_info.value.status_code == 503
        assert balance_of(db_session, source.id) == Decimal("1000.00")
        assert balance_of(db_session, destination.id) == Decimal("200.00")
        assert count_rows(db_session, Transfer) == 0
        assert transfer_audit_count(db_session) == 0

    def test_savepoint_discards_partial_work_before_caller_rollback(
        self, db_session, staff_user, open_account
    ):
        source = open_account("1000.00")
        destination = open_account("200.00")
        service = TransferService(
            db_session, account_store=CreditFailingStore(db_session)
        )

        with pytest.raises(PersistenceError):
            service.transfer(make_request(source, destination, "300.00", staff_user))
        db_session.commit()

        assert balance_of(db_session, source.id) == Decimal("1000.00")
        assert count_rows(db_session, Transfer) == 0

    def test_audit_failure_does_not_undo_transfer(
        self, db_session, staff_user, open_account
    ):
        source = open_account("1000.00")
        destination = open_account("200.00")
        service = TransferService(
            db_session, audit=BrokenAuditRecorder(db_session)
        )

        service.transfer(make_request(source, destination, "300.00", staff_user))
        db_session.commit()

        assert balance_of(db_session, source.id) == Decimal("700.00")
        assert balance_of(db_session, destination.id) == Decimal("500.00")
        assert count_rows(db_session, Transfer) == 1
        assert transfer_audit_count(db_session) == 0

    def test_unknown_authorizing_user_rolls_back_as_conflict(
        self, db_session, open_account
    ):
        source = open_account("100.00")
        destination = open_account("0.00")

        with pytest.raises(PersistenceError) as exc_info:
            TransferService(db_session).transfer(TransferRequest(
                transferred_at=datetime(2024, 5, 1, 10, 30),
                amount=Decimal("10.00"),
                source_account_id=source.id,
                destination_account_id=destination.id,
                authorizing_user_id=404,
            ))
        db_session.rollback()

        assert exc_info.value.status_code == 409
        assert balance_of(db_session, source.id) == Decimal("100.00")
        assert count_rows(db_session, Transfer) == 0


class TestConcurrentChanges:

    def test_balance_check_sees_debit_committed_elsewhere(
        self, db_session, staff_user, open_account
    ):
        source_id = open_account("100.00").id
        destination_id = open_account("0.00").id
        user_id = staff_user.id
        # SQLite writers wait on open readers
        db_session.commit()

        engine = db_session.get_bind()
        with Session(engine, expire_on_commit=False) as teller, Session(engine) as other:
            # The teller's session holds both accounts from an earlier read
            teller.get(Account, source_id)
            teller.get(Account, destination_id)
            teller.commit()

            other.execute(
                update(Account)
                .where(Account.id == source_id)
                .values(balance=Decimal("10.00"))
            )
            other.commit()

            with pytest.raises(InsufficientFundsError, match="available=10.00"):
                TransferService(teller).transfer(TransferRequest(
                    transferred_at=datetime(2024, 5, 1, 10, 30),
                    amount=Decimal("50.00"),
                    source_account_id=source_id,
                    destination_account_id=destination_id,
                    authorizing_user_id=user_id,
                ))
            teller.rollback()

        assert balance_of(db_session, source_id) == Decimal("10.00")
        assert count_rows(db_session, Transfer) == 0


class TestHistory:

    def test_list_newest_first_and_filter_by_account(
        self, db_session, staff_user, open_account
    ):
        a = open_account("1000.00")
        b = open_account("1000.00")
        c = open_account("1000.00")
        service = TransferService(db_session)

        first = service.transfer(make_request(a, b, "10.00", staff_user))
        second = service.transfer(make_request(b, c, "20.00", staff_user))
        db_session.commit()

        assert [t.id for t in service.list_transfers()] == [second.id, first.id]
        assert [t.id for t in service.list_transfers(account_id=a.id)] == [first.id]
        assert len(service.list_transfers(account_id=b.id)) == 2
