"""
Tests for the UserService.
"""

import pytest
from sqlalchemy import select

from volunteer_system.errors import ErrorKind, NotFoundError, VolunteerSystemError
from volunteer_system.models import Role
from volunteer_system.schemas.user import UserCreate
from volunteer_system.services.user_service import UserService


class TestDefaultRoles:

    def test_seeds_admin_and_user(self, db_session):
        UserService(db_session).ensure_default_roles()
        db_session.commit()

        names = db_session.execute(select(Role.name).order_by(Role.name)).scalars().all()
        assert names == ["admin", "user"]

    def test_idempotent(self, db_session):
        service = UserService(db_session)
        service.ensure_default_roles()
        db_session.commit()
        service.ensure_default_roles()
        db_session.commit()

        assert len(db_session.execute(select(Role)).scalars().all()) == 2


class TestCreateUser:

    def test_defaults_to_user_role(self, db_session, make_user):
        user = make_user("alice")

        assert user.id is not None
        assert user.role.name == "user"

    def test_duplicate_username_rejected(self, db_session, make_user):
        make_user("alice")

        with pytest.raises(VolunteerSystemError, match="already exists") as exc:
            make_user("alice")
        assert exc.value.kind == ErrorKind.DUPLICATE

    def test_unknown_role_rejected(self, db_session, make_user):
        with pytest.raises(NotFoundError, match="role manager not found"):
            make_user("alice", role_name="manager")

    def test_get_unknown_user(self, db_session):
        with pytest.raises(NotFoundError, match="user 42 not found"):
            UserService(db_session).get_user(42)

    def test_create_without_seeded_roles(self, db_session):
        with pytest.raises(NotFoundError):
            UserService(db_session).create_user(UserCreate(username="alice"))
