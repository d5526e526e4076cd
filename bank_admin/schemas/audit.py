"""
Pydantic schemas for the audit log.
"""

from datetime import datetime

from pydantic import BaseModel

from bank_admin.models.enums import AuditAction


class AuditEntryResponse(BaseModel):
    id: int
    action: AuditAction
    entity_name: str
    entity_id: int
    user_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
