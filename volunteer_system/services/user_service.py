"""
User service — minimal provisioning of roles and users.

Applicants and handlers must exist before the application
lifecycle can reference them. Authentication is handled
elsewhere; this service only records who is who.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_system.errors import (
    ErrorKind,
    NotFoundError,
    StorageError,
    VolunteerSystemError,
)
from volunteer_system.models.role import Role, DEFAULT_ROLE_NAMES
from volunteer_system.models.user import User
from volunteer_system.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db

    def ensure_default_roles(self) -> list[Role]:
        """Create the admin and user roles if they are missing."""
        roles = []
        for name in DEFAULT_ROLE_NAMES:
            role = self.db.execute(
                select(Role).where(Role.name == name)
            ).scalar_one_or_none()
            if role is None:
                role = Role(name=name)
                self.db.add(role)
                logger.info("role_created %s", name)
            roles.append(role)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError("failed to create default roles") from e
        return roles

    def create_user(self, request: UserCreate) -> User:
        """Create a user under an existing role (default "user")."""
        role_name = request.role_name.strip() or "user"

        existing = self.db.execute(
            select(User).where(User.username == request.username)
        ).scalar_one_or_none()
        if existing:
            raise VolunteerSystemError(
                ErrorKind.DUPLICATE,
                f"username '{request.username}' already exists",
            )

        role = self.db.execute(
            select(Role).where(Role.name == role_name)
        ).scalar_one_or_none()
        if not role:
            raise NotFoundError("role", role_name)

        user = User(username=request.username, role_id=role.id)
        self.db.add(user)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError("failed to create user") from e
        return user

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("user", user_id)
        return user
