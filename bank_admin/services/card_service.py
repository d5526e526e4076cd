"""
RFID card service: assigns cards to accounts.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bank_admin.errors import ConflictError, NotFoundError
from bank_admin.models.account import Account
from bank_admin.models.enums import AuditAction
from bank_admin.models.rfid_card import RfidCard
from bank_admin.schemas.card import CardCreate, CardUpdate
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


class CardService:

    def __init__(self, db: Session, audit: AuditRecorder | None = None):
        self.db = db
        self.audit = audit or AuditRecorder(db)

    def _ensure_number_free(self, card_number: str, card_id: int | None = None) -> None:
        existing = self.db.execute(
            select(RfidCard).where(RfidCard.card_number == card_number)
        ).scalar_one_or_none()
        if existing and existing.id != card_id:
            raise ConflictError(f"Card '{card_number}' is already assigned")

    def _ensure_account_exists(self, account_id: int) -> None:
        if not self.db.get(Account, account_id):
            raise NotFoundError(f"Account {account_id} not found")

    def assign_card(self, request: CardCreate, user_id: int | None) -> RfidCard:
        self._ensure_account_exists(request.account_id)
        self._ensure_number_free(request.card_number)

        card = RfidCard(
            card_number=request.card_number,
            account_id=request.account_id,
            assigned_at=request.assigned_at,
        )
        self.db.add(card)
        self.db.flush()

        self.audit.append(AuditAction.CREATE, "RfidCard", card.id, user_id)
        logger.info("Card %s assigned to account %s", card.card_number, card.account_id)
        return card

    def update_card(
        self, card_id: int, request: CardUpdate, user_id: int | None
    ) -> RfidCard:
        card = self.get_card(card_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "card_number" in changes:
            self._ensure_number_free(changes["card_number"], card.id)
        if "account_id" in changes:
            self._ensure_account_exists(changes["account_id"])

        for field, value in changes.items():
            setattr(card, field, value)
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "RfidCard", card.id, user_id)
        return card

    def deactivate_card(self, card_id: int, user_id: int | None) -> RfidCard:
        card = self.get_card(card_id)
        card.is_active = False
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "RfidCard", card.id, user_id)
        logger.info("Card %s deactivated", card.card_number)
        return card

    def get_card(self, card_id: int) -> RfidCard:
        card = self.db.get(RfidCard, card_id)
        if not card:
            raise NotFoundError(f"Card {card_id} not found")
        return card

    def get_by_number(self, card_number: str) -> RfidCard:
        """Resolve the card presented at the reader."""
        card = self.db.execute(
            select(RfidCard).where(RfidCard.card_number == card_number)
        ).scalar_one_or_none()
        if not card:
            raise NotFoundError(f"Card '{card_number}' not found")
        return card

    def list_cards(self) -> list[RfidCard]:
        return list(
            self.db.execute(select(RfidCard).order_by(RfidCard.id)).scalars().all()
        )
