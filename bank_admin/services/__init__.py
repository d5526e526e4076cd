"""Business logic services."""

from bank_admin.services.audit_service import AuditRecorder
from bank_admin.services.account_store import AccountStore
from bank_admin.services.client_service import ClientService
from bank_admin.services.account_service import AccountService
from bank_admin.services.card_service import CardService
from bank_admin.services.payment_service import PaymentService
from bank_admin.services.transfer_service import TransferService
from bank_admin.services.user_service import UserService

__all__ = [
    "AuditRecorder",
    "AccountStore",
    "ClientService",
    "AccountService",
    "CardService",
    "PaymentService",
    "TransferService",
    "UserService",
]
