import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-inventory-admin-tests")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
from app.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.group import Group
from app.models.user import User
from app.models.label import Label
from app.models.location import Location
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "admin-pass-123"
USER_PASSWORD = "user-pass-123"


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id="00000000-0000-0000-0000-000000000001",
    roles: tuple[str, ...] | None = ("user",),
    expired: bool = False,
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        roles: Role claims; None omits the claim entirely
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": str(user_id), "exp": exp, "iat": datetime.now(UTC)}
    if roles is not None:
        payload["roles"] = list(roles)

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user, roles: tuple[str, ...] | None = ("user",)) -> dict:
    """Authorization headers for the given user"""
    return {"Authorization": f"Bearer {create_test_token(user.id, roles=roles)}"}


@pytest.fixture
def admin_group(db_session):
    group = Group(name="Admin Group")
    db_session.add(group)
    db_session.commit()
    db_session.refresh(group)
    return group


@pytest.fixture
def other_group(db_session):
    group = Group(name="Bob's Group")
    db_session.add(group)
    db_session.commit()
    db_session.refresh(group)
    return group


@pytest.fixture
def admin_user(db_session, admin_group):
    """Superuser who founded the admin group"""
    user = User(
        name="Alice Admin",
        email="alice@example.test",
        password=hash_password(ADMIN_PASSWORD),
        is_superuser=True,
        is_owner=True,
        group_id=admin_group.id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def regular_user(db_session, other_group):
    """Owner of another group without superuser privileges"""
    user = User(
        name="Bob Builder",
        email="bob@example.test",
        password=hash_password(USER_PASSWORD),
        is_superuser=False,
        is_owner=True,
        group_id=other_group.id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_headers(admin_user):
    """Authorization headers for the superuser"""
    return headers_for(admin_user)


@pytest.fixture
def user_headers(regular_user):
    """Authorization headers for the non-superuser"""
    return headers_for(regular_user)
