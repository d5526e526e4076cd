"""
Client API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_admin.api.deps import get_acting_user_id, unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.account_service import AccountService
from bank_admin.services.client_service import ClientService
from bank_admin.schemas.account import AccountResponse
from bank_admin.schemas.client import ClientCreate, ClientResponse, ClientUpdate

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=list[ClientResponse])
def list_clients(db: Session = Depends(get_db)):
    return ClientService(db).list_clients()


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(
    request: ClientCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """Register a new client."""
    with unit_of_work(db):
        client = ClientService(db).create_client(request, user_id)
    return client


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db)):
    return ClientService(db).get_client(client_id)


@router.get("/{client_id}/accounts", response_model=list[AccountResponse])
def get_client_accounts(client_id: int, db: Session = Depends(get_db)):
    ClientService(db).get_client(client_id)
    return AccountService(db).get_client_accounts(client_id)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    request: ClientUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        client = ClientService(db).update_client(client_id, request, user_id)
    return client


@router.put("/{client_id}/deactivate", response_model=ClientResponse)
def deactivate_client(
    client_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        client = ClientService(db).set_active(client_id, False, user_id)
    return client


@router.put("/{client_id}/activate", response_model=ClientResponse)
def activate_client(
    client_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        client = ClientService(db).set_active(client_id, True, user_id)
    return client
