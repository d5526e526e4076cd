"""
Account service: account types and the account lifecycle.

Opening an account sets its starting balance. After that the
balance is owned by the transfer and payment services; nothing
here writes it.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from bank_admin.errors import ConflictError, NotFoundError
from bank_admin.models.account import Account
from bank_admin.models.account_type import AccountType
from bank_admin.models.client import Client
from bank_admin.models.enums import AuditAction
from bank_admin.schemas.account import (
    AccountOpen,
    AccountSummary,
    AccountTypeCreate,
    AccountTypeUpdate,
    AccountUpdate,
)
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session, audit: AuditRecorder | None = None):
        self.db = db
        self.audit = audit or AuditRecorder(db)

    # --- Account types ---

    def _ensure_type_name_free(self, name: str, type_id: int | None = None) -> None:
        existing = self.db.execute(
            select(AccountType).where(AccountType.name == name)
        ).scalar_one_or_none()
        if existing and existing.id != type_id:
            raise ConflictError(f"Account type '{name}' already exists")

    def create_account_type(
        self, request: AccountTypeCreate, user_id: int | None
    ) -> AccountType:
        self._ensure_type_name_free(request.name)

        account_type = AccountType(
            name=request.name,
            description=request.description,
        )
        self.db.add(account_type)
        self.db.flush()

        self.audit.append(
            AuditAction.CREATE, "AccountType", account_type.id, user_id
        )
        return account_type

    def update_account_type(
        self, type_id: int, request: AccountTypeUpdate, user_id: int | None
    ) -> AccountType:
        account_type = self.get_account_type(type_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_type_name_free(changes["name"], account_type.id)

        for field, value in changes.items():
            setattr(account_type, field, value)
        self.db.flush()

        self.audit.append(
            AuditAction.UPDATE, "AccountType", account_type.id, user_id
        )
        return account_type

    def delete_account_type(self, type_id: int, user_id: int | None) -> None:
        account_type = self.get_account_type(type_id)
        in_use = self.db.execute(
            select(Account.id).where(Account.account_type_id == type_id).limit(1)
        ).first()
        if in_use:
            raise ConflictError(
                f"Account type {type_id} is used by existing accounts"
            )

        self.db.delete(account_type)
        self.db.flush()
        self.audit.append(AuditAction.DELETE, "AccountType", type_id, user_id)

    def get_account_type(self, type_id: int) -> AccountType:
        account_type = self.db.get(AccountType, type_id)
        if not account_type:
            raise NotFoundError(f"Account type {type_id} not found")
        return account_type

    def list_account_types(self) -> list[AccountType]:
        return list(
            self.db.execute(
                select(AccountType).order_by(AccountType.id)
            ).scalars().all()
        )

    # --- Accounts ---

    def _ensure_number_free(
        self, account_number: str, account_id: int | None = None
    ) -> None:
        existing = self.db.execute(
            select(Account).where(Account.account_number == account_number)
        ).scalar_one_or_none()
        if existing and existing.id != account_id:
            raise ConflictError(f"Account number '{account_number}' already exists")

    def _validate_owner(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")
        if not client.is_active:
            raise ConflictError(f"Client {client_id} is not active")
        return client

    def open_account(self, request: AccountOpen, user_id: int | None) -> Account:
        """
        Open a new account for an active client.

        The account number must be unique and the opening
        balance must not be negative.
        """
        self._validate_owner(request.client_id)
        self.get_account_type(request.account_type_id)
        self._ensure_number_free(request.account_number)

        account = Account(
            account_number=request.account_number,
            client_id=request.client_id,
            account_type_id=request.account_type_id,
            balance=request.balance,
            is_active=request.is_active,
        )
        self.db.add(account)
        self.db.flush()

        self.audit.append(AuditAction.CREATE, "Account", account.id, user_id)
        logger.info(
            "Account %s opened for client %s with balance %s",
            account.account_number, account.client_id, account.balance,
        )
        return account

    def update_account(
        self, account_id: int, request: AccountUpdate, user_id: int | None
    ) -> Account:
        account = self.get_account(account_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        if "account_number" in changes:
            self._ensure_number_free(changes["account_number"], account.id)
        if "client_id" in changes:
            self._validate_owner(changes["client_id"])
        if "account_type_id" in changes:
            self.get_account_type(changes["account_type_id"])

        for field, value in changes.items():
            setattr(account, field, value)
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "Account", account.id, user_id)
        return account

    def set_active(
        self, account_id: int, active: bool, user_id: int | None
    ) -> Account:
        """
        Activate or deactivate an account.

        Inactive accounts can neither send nor receive transfers
        and cannot pay for services.
        """
        account = self.get_account(account_id)
        account.is_active = active
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "Account", account.id, user_id)
        logger.info(
            "Account %s %s", account.id, "activated" if active else "deactivated"
        )
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def list_accounts(self, active_only: bool = False) -> list[AccountSummary]:
        """Accounts with the owner's name and the type name resolved."""
        stmt = select(Account).options(
            joinedload(Account.client),
            joinedload(Account.account_type),
        )
        if active_only:
            stmt = stmt.where(Account.is_active.is_(True))
        accounts = self.db.execute(stmt.order_by(Account.id)).scalars().all()

        return [
            AccountSummary(
                id=account.id,
                account_number=account.account_number,
                client_name=account.client.full_name,
                account_type_name=account.account_type.name,
                balance=account.balance,
                is_active=account.is_active,
            )
            for account in accounts
        ]

    def get_client_accounts(self, client_id: int) -> list[Account]:
        """Get all accounts for a client."""
        accounts = self.db.execute(
            select(Account).where(Account.client_id == client_id)
        ).scalars().all()
        return list(accounts)
