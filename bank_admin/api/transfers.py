"""
Transfer API endpoints.

Transfers can be created and read. They are never updated
or deleted.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_admin.api.deps import unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.transfer_service import TransferService
from bank_admin.schemas.transfer import (
    TransferRequest,
    TransferResponse,
    TransferResult,
)

router = APIRouter(prefix="/transfers", tags=["Transfers"])


@router.post("", response_model=TransferResult, status_code=201)
def create_transfer(
    request: TransferRequest,
    db: Session = Depends(get_db),
):
    """
    Transfer money between two accounts.

    Rejections come back as {"success": false, "error": <kind>,
    "message": ...}; nothing is changed in that case. The audit
    entry is attributed to the authorizing user in the body.
    """
    with unit_of_work(db):
        transfer = TransferService(db).transfer(request)

    return TransferResult(
        message="Transfer completed",
        transfer=TransferResponse.model_validate(transfer),
    )


@router.get("", response_model=list[TransferResponse])
def list_transfers(
    account_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Transfer history, newest first."""
    return TransferService(db).list_transfers(account_id)


@router.get("/{transfer_id}", response_model=TransferResponse)
def get_transfer(transfer_id: int, db: Session = Depends(get_db)):
    return TransferService(db).get_transfer(transfer_id)
