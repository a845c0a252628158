"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before and dropped after
every test, so each test starts from an empty schema.
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from volunteer_system.main import app
from volunteer_system.models import Base
from volunteer_system.models.base import get_db
from volunteer_system.schemas.activity import (
    ActivityWrite,
    CategoryCreate,
    DepartmentCreate,
)
from volunteer_system.schemas.user import UserCreate
from volunteer_system.services.activity_service import ActivityService
from volunteer_system.services.locking import ActivityLocks
from volunteer_system.services.user_service import UserService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


def format_time(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S")


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Factory for components that open their own sessions."""
    return TestSessionLocal


@pytest.fixture
def locks():
    return ActivityLocks()


@pytest.fixture
def make_user(db_session):
    """Create users on demand; default roles are seeded on first use."""
    service = UserService(db_session)
    service.ensure_default_roles()
    db_session.commit()

    def _make_user(username: str, role_name: str = "user"):
        user = service.create_user(UserCreate(username=username, role_name=role_name))
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin", role_name="admin")


@pytest.fixture
def make_activity(db_session, admin):
    """
    Create activities on demand.

    starts_in is relative to now; a negative value creates an
    activity whose time has already passed.
    """
    service = ActivityService(db_session)
    department = service.create_department(DepartmentCreate(name="Outreach"))
    category = service.create_category(CategoryCreate(name="Environment"))
    db_session.commit()

    def _make_activity(
        title: str = "Beach cleanup",
        max_people: int = 2,
        starts_in: timedelta = timedelta(days=1),
        **overrides,
    ):
        fields = {
            "dept_id": department.id,
            "category_id": category.id,
            "creator_id": admin.id,
            "title": title,
            "description": "Bring gloves",
            "activity_time": format_time(datetime.now() + starts_in),
            "location": "North pier",
            "max_people": max_people,
        }
        fields.update(overrides)
        activity = service.create_activity(ActivityWrite(**fields))
        db_session.commit()
        return activity

    return _make_activity


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
