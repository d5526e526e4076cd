"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from bank_admin.models.base import Base
from bank_admin.models.enums import AuditAction
from bank_admin.models.audit_log import AuditLog
from bank_admin.models.client import Client
from bank_admin.models.account_type import AccountType
from bank_admin.models.account import Account
from bank_admin.models.rfid_card import RfidCard
from bank_admin.models.service_type import ServiceType
from bank_admin.models.service_payment import ServicePayment
from bank_admin.models.role import Role
from bank_admin.models.user import User
from bank_admin.models.transfer import Transfer

__all__ = [
    "Base",
    "AuditAction",
    "AuditLog",
    "Client",
    "AccountType",
    "Account",
    "RfidCard",
    "ServiceType",
    "ServicePayment",
    "Role",
    "User",
    "Transfer",
]
