"""
Audit log API endpoint. Read-only.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bank_admin.models.base import get_db
from bank_admin.services.audit_service import AuditRecorder, MAX_AUDIT_PAGE
from bank_admin.schemas.audit import AuditEntryResponse

router = APIRouter(prefix="/audit-log", tags=["Audit"])


@router.get("", response_model=list[AuditEntryResponse])
def list_audit_entries(
    entity_name: str | None = None,
    user_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=MAX_AUDIT_PAGE),
    db: Session = Depends(get_db),
):
    """Audit entries, newest first."""
    return AuditRecorder(db).list_entries(entity_name, user_id, limit)
