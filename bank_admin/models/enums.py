"""
Shared enumerations for database models.
"""

import enum


class AuditAction(str, enum.Enum):
    """Kind of mutation recorded in the audit log."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
