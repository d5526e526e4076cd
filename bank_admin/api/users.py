"""
Role, user and login API endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bank_admin.api.deps import get_acting_user_id, unit_of_work
from bank_admin.models.base import get_db
from bank_admin.services.user_service import UserService
from bank_admin.schemas.user import (
    LoginRequest,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)

router = APIRouter(tags=["Users"])


# --- Role Endpoints ---

@router.get("/roles", response_model=list[RoleResponse])
def list_roles(db: Session = Depends(get_db)):
    return UserService(db).list_roles()


@router.post("/roles", response_model=RoleResponse, status_code=201)
def create_role(
    request: RoleCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        role = UserService(db).create_role(request, user_id)
    return role


@router.get("/roles/{role_id}", response_model=RoleResponse)
def get_role(role_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_role(role_id)


@router.put("/roles/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: int,
    request: RoleUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        role = UserService(db).update_role(role_id, request, user_id)
    return role


@router.delete("/roles/{role_id}", status_code=204)
def delete_role(
    role_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        UserService(db).delete_role(role_id, user_id)
    return Response(status_code=204)


# --- User Endpoints ---

@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    request: UserCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        user = UserService(db).create_user(request, user_id)
    return user


@router.get("/users/{target_id}", response_model=UserResponse)
def get_user(target_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(target_id)


@router.put("/users/{target_id}", response_model=UserResponse)
def update_user(
    target_id: int,
    request: UserUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        user = UserService(db).update_user(target_id, request, user_id)
    return user


@router.delete("/users/{target_id}", status_code=204)
def delete_user(
    target_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_acting_user_id),
):
    with unit_of_work(db):
        UserService(db).delete_user(target_id, user_id)
    return Response(status_code=204)


@router.post("/login", response_model=UserResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return the user. No token is issued."""
    return UserService(db).authenticate(request)
