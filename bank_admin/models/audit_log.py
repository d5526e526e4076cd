"""
Audit log model.

Every mutating operation in the system appends one entry here.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from bank_admin.models.base import Base
from bank_admin.models.enums import AuditAction


class AuditLog(Base):
    """
    Immutable record of a mutation.

    Audit entries are append-only. user_id is a plain integer
    rather than a foreign key so the trail outlives the user.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    action: Mapped[AuditAction] = mapped_column(
        SAEnum(AuditAction, name="audit_action_enum", create_constraint=True),
        nullable=False,
    )
    entity_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entity_id: Mapped[int] = mapped_column(nullable=False)
    user_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog {self.action.value} {self.entity_name}#{self.entity_id}>"
        )
