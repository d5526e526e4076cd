"""
Account and account type API endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bank_admin.api.deps import get_acting_user_id, unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.account_service import AccountService
from bank_admin.schemas.account import (
    AccountOpen,
    AccountResponse,
    AccountSummary,
    AccountTypeCreate,
    AccountTypeResponse,
    AccountTypeUpdate,
    AccountUpdate,
)

router = APIRouter(tags=["Accounts"])


# --- Account Type Endpoints ---

@router.get("/account-types", response_model=list[AccountTypeResponse])
def list_account_types(db: Session = Depends(get_db)):
    return AccountService(db).list_account_types()


@router.post("/account-types", response_model=AccountTypeResponse, status_code=201)
def create_account_type(
    request: AccountTypeCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        account_type = AccountService(db).create_account_type(request, user_id)
    return account_type


@router.get("/account-types/{type_id}", response_model=AccountTypeResponse)
def get_account_type(type_id: int, db: Session = Depends(get_db)):
    return AccountService(db).get_account_type(type_id)


@router.put("/account-types/{type_id}", response_model=AccountTypeResponse)
def update_account_type(
    type_id: int,
    request: AccountTypeUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        account_type = AccountService(db).update_account_type(
            type_id, request, user_id
        )
    return account_type


@router.delete("/account-types/{type_id}", status_code=204)
def delete_account_type(
    type_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """Delete an account type no account uses."""
    with unit_of_work(db):
        AccountService(db).delete_account_type(type_id, user_id)
    return Response(status_code=204)


# --- Account Endpoints ---

@router.get("/accounts", response_model=list[AccountSummary])
def list_accounts(db: Session = Depends(get_db)):
    """All accounts with client and account type names."""
    return AccountService(db).list_accounts()


@router.get("/accounts/active", response_model=list[AccountSummary])
def list_active_accounts(db: Session = Depends(get_db)):
    """Accounts eligible for transfers and payments."""
    return AccountService(db).list_accounts(active_only=True)


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def open_account(
    request: AccountOpen,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    """Open a new account for an active client."""
    with unit_of_work(db):
        account = AccountService(db).open_account(request, user_id)
    return account


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: int, db: Session = Depends(get_db)):
    return AccountService(db).get_account(account_id)


@router.put("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        account = AccountService(db).update_account(account_id, request, user_id)
    return account


@router.put("/accounts/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        account = AccountService(db).set_active(account_id, False, user_id)
    return account


@router.put("/accounts/{account_id}/activate", response_model=AccountResponse)
def activate_account(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        account = AccountService(db).set_active(account_id, True, user_id)
    return account
