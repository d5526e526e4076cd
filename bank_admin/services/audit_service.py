"""
Audit recorder: the append-only trail of mutations.

Every service that changes data calls append() once per
mutation, inside the caller's unit of work.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_admin.models.audit_log import AuditLog
from bank_admin.models.enums import AuditAction

logger = logging.getLogger(__name__)

MAX_AUDIT_PAGE = 1000


class AuditRecorder:
    """
    Appends audit entries within the caller's transaction.

    The entry is written inside a SAVEPOINT. If the insert fails
    the savepoint is rolled back, the failure is logged and the
    surrounding operation carries on: the trail is best-effort.
    If the surrounding operation is rolled back, its entries go
    with it.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        action: AuditAction,
        entity_name: str,
        entity_id: int,
        user_id: int | None,
    ) -> AuditLog | None:
        entry = AuditLog(
            action=action,
            entity_name=entity_name,
            entity_id=entity_id,
            user_id=user_id,
        )
        try:
            with self.db.begin_nested():
                self.db.add(entry)
        except SQLAlchemyError:
            logger.exception(
                "Failed to record audit entry action=%s entity=%s id=%s user=%s",
                action.value, entity_name, entity_id, user_id,
            )
            return None

        logger.info(
            "Audit %s %s#%s by user %s",
            action.value, entity_name, entity_id, user_id,
        )
        return entry

    def list_entries(
        self,
        entity_name: str | None = None,
        user_id: int | None = None,
        limit: int = 100,
    ) -> list[AuditLog]:
        """Audit entries, newest first."""
        stmt = select(AuditLog)
        if entity_name is not None:
            stmt = stmt.where(AuditLog.entity_name == entity_name)
        if user_id is not None:
            stmt = stmt.where(AuditLog.user_id == user_id)
        stmt = stmt.order_by(AuditLog.id.desc()).limit(min(limit, MAX_AUDIT_PAGE))
        return list(self.db.execute(stmt).scalars().all())
