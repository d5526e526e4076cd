"""
Client service: registers account holders and manages their state.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bank_admin.errors import ConflictError, NotFoundError
from bank_admin.models.client import Client
from bank_admin.models.enums import AuditAction
from bank_admin.schemas.client import ClientCreate, ClientUpdate
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


class ClientService:

    def __init__(self, db: Session, audit: AuditRecorder | None = None):
        self.db = db
        self.audit = audit or AuditRecorder(db)

    def _ensure_email_free(self, email: str, client_id: int | None = None) -> None:
        existing = self.db.execute(
            select(Client).where(Client.email == email)
        ).scalar_one_or_none()
        if existing and existing.id != client_id:
            raise ConflictError(f"Client with email '{email}' already exists")

    def create_client(self, request: ClientCreate, user_id: int | None) -> Client:
        self._ensure_email_free(request.email)

        client = Client(**request.model_dump())
        self.db.add(client)
        self.db.flush()

        self.audit.append(AuditAction.CREATE, "Client", client.id, user_id)
        logger.info("Client %s registered", client.id)
        return client

    def update_client(
        self, client_id: int, request: ClientUpdate, user_id: int | None
    ) -> Client:
        client = self.get_client(client_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes:
            self._ensure_email_free(changes["email"], client.id)

        for field, value in changes.items():
            setattr(client, field, value)
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "Client", client.id, user_id)
        return client

    def set_active(
        self, client_id: int, active: bool, user_id: int | None
    ) -> Client:
        """Activate or deactivate a client. Clients are never deleted."""
        client = self.get_client(client_id)
        client.is_active = active
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "Client", client.id, user_id)
        logger.info(
            "Client %s %s", client.id, "activated" if active else "deactivated"
        )
        return client

    def get_client(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")
        return client

    def list_clients(self) -> list[Client]:
        return list(
            self.db.execute(select(Client).order_by(Client.id)).scalars().all()
        )
