"""
RFID card API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_admin.api.deps import get_acting_user_id, unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.card_service import CardService
from bank_admin.schemas.card import CardCreate, CardResponse, CardUpdate

router = APIRouter(prefix="/cards", tags=["RFID Cards"])


@router.get("", response_model=list[CardResponse])
def list_cards(db: Session = Depends(get_db)):
    return CardService(db).list_cards()


@router.post("", response_model=CardResponse, status_code=201)
def assign_card(
    request: CardCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """Bind a new RFID card to an account."""
    with unit_of_work(db):
        card = CardService(db).assign_card(request, user_id)
    return card


@router.get("/by-number/{card_number}", response_model=CardResponse)
def get_card_by_number(card_number: str, db: Session = Depends(get_db)):
    """Look up the card read by the RFID scanner."""
    return CardService(db).get_by_number(card_number)


@router.get("/{card_id}", response_model=CardResponse)
def get_card(card_id: int, db: Session = Depends(get_db)):
    return CardService(db).get_card(card_id)


@router.put("/{card_id}", response_model=CardResponse)
def update_card(
    card_id: int,
    request: CardUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        card = CardService(db).update_card(card_id, request, user_id)
    return card


@router.put("/{card_id}/deactivate", response_model=CardResponse)
def deactivate_card(
    card_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        card = CardService(db).deactivate_card(card_id, user_id)
    return card
