"""
User service: roles, staff users and credential checks.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bank_admin.errors import ConflictError, InvalidCredentialsError, NotFoundError
from bank_admin.models.enums import AuditAction
from bank_admin.models.role import Role
from bank_admin.models.transfer import Transfer
from bank_admin.models.user import User
from bank_admin.schemas.user import (
    LoginRequest,
    RoleCreate,
    RoleUpdate,
    UserCreate,
    UserUpdate,
)
from bank_admin.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session, audit: AuditRecorder | None = None):
        self.db = db
        self.audit = audit or AuditRecorder(db)

    # --- Roles ---

    def _ensure_role_name_free(self, name: str, role_id: int | None = None) -> None:
        existing = self.db.execute(
            select(Role).where(Role.name == name)
        ).scalar_one_or_none()
        if existing and existing.id != role_id:
            raise ConflictError(f"Role '{name}' already exists")

    def create_role(self, request: RoleCreate, user_id: int | None) -> Role:
        self._ensure_role_name_free(request.name)

        role = Role(name=request.name, description=request.description)
        self.db.add(role)
        self.db.flush()

        self.audit.append(AuditAction.CREATE, "Role", role.id, user_id)
        return role

    def update_role(
        self, role_id: int, request: RoleUpdate, user_id: int | None
    ) -> Role:
        role = self.get_role(role_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_role_name_free(changes["name"], role.id)

        for field, value in changes.items():
            setattr(role, field, value)
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "Role", role.id, user_id)
        return role

    def delete_role(self, role_id: int, user_id: int | None) -> None:
        role = self.get_role(role_id)
        in_use = self.db.execute(
            select(User.id).where(User.role_id == role_id).limit(1)
        ).first()
        if in_use:
            raise ConflictError(f"Role {role_id} is assigned to users")

        self.db.delete(role)
        self.db.flush()
        self.audit.append(AuditAction.DELETE, "Role", role_id, user_id)

    def get_role(self, role_id: int) -> Role:
        role = self.db.get(Role, role_id)
        if not role:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    def list_roles(self) -> list[Role]:
        return list(self.db.execute(select(Role).order_by(Role.id)).scalars().all())

    # --- Users ---

    def _ensure_username_free(self, username: str, target_id: int | None = None) -> None:
        existing = self.db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()
        if existing and existing.id != target_id:
            raise ConflictError(f"Username '{username}' is already taken")

    def create_user(self, request: UserCreate, user_id: int | None) -> User:
        self.get_role(request.role_id)
        self._ensure_username_free(request.username)

        user = User(username=request.username, role_id=request.role_id)
        user.set_password(request.password)
        self.db.add(user)
        self.db.flush()

        self.audit.append(AuditAction.CREATE, "User", user.id, user_id)
        logger.info("User %s created", user.username)
        return user

    def update_user(
        self, target_id: int, request: UserUpdate, user_id: int | None
    ) -> User:
        user = self.get_user(target_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        if "username" in changes:
            self._ensure_username_free(changes["username"], user.id)
            user.username = changes["username"]
        if "role_id" in changes:
            self.get_role(changes["role_id"])
            user.role_id = changes["role_id"]
        if "password" in changes:
            user.set_password(changes["password"])
        self.db.flush()

        self.audit.append(AuditAction.UPDATE, "User", user.id, user_id)
        return user

    def delete_user(self, target_id: int, user_id: int | None) -> None:
        """
        Delete a user who never authorized a transfer.

        Transfers keep a foreign key to their authorizing user,
        so those users stay.
        """
        user = self.get_user(target_id)
        authorized = self.db.execute(
            select(Transfer.id)
            .where(Transfer.authorizing_user_id == target_id)
            .limit(1)
        ).first()
        if authorized:
            raise ConflictError(f"User {target_id} has authorized transfers")

        self.db.delete(user)
        self.db.flush()
        self.audit.append(AuditAction.DELETE, "User", target_id, user_id)
        logger.info("User %s deleted", target_id)

    def get_user(self, target_id: int) -> User:
        user = self.db.get(User, target_id)
        if not user:
            raise NotFoundError(f"User {target_id} not found")
        return user

    def list_users(self) -> list[User]:
        return list(self.db.execute(select(User).order_by(User.id)).scalars().all())

    def authenticate(self, request: LoginRequest) -> User:
        """Check a username/password pair. No token is issued."""
        user = self.db.execute(
            select(User).where(User.username == request.username)
        ).scalar_one_or_none()
        if not user or not user.check_password(request.password):
            logger.warning("Failed login for username %s", request.username)
            raise InvalidCredentialsError("Invalid username or password")
        return user
