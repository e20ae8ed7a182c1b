"""Pytest configuration and fixtures for VibePilot tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vibepilot.api.deps import get_db
from vibepilot.main import app
from vibepilot.models.base import Base
from vibepilot.models.user import User
from vibepilot.services.auth import create_access_token

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db: Session) -> User:
    """A user signed in with Deezer holding a non-expiring token."""
    user = User(
        deezer_user_id="1001",
        name="Test Listener",
        email="listener@example.com",
        deezer_access_token="dz_access_token_123",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    """Session token headers for the test user."""
    token = create_access_token({"sub": test_user.deezer_user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def deezer_configured() -> Generator[MagicMock, None, None]:
    """Pretend Deezer app credentials are configured (not read-only)."""
    settings = MagicMock()
    settings.is_deezer_oauth_configured = True
    with patch("vibepilot.api.deps.get_settings", return_value=settings):
        yield settings
