"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from treasury_ledger.auth import create_access_token
from treasury_ledger.config import get_settings
from treasury_ledger.main import app
from treasury_ledger.models.base import Base, get_db


# SQLite keeps the suite free of database infrastructure.
# FOR UPDATE is a no-op there; everything else behaves the same.
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

ADMIN_USER = "owner@example.com"


def auth_headers(role: str = "admin", sub: str = ADMIN_USER) -> dict:
    token = create_access_token({"sub": sub, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings(monkeypatch):
    """
    The cached settings object, for tests that flip a flag.

    monkeypatch restores every attribute after the test.
    """
    current = get_settings()
    monkeypatch.setattr(current, "ENVIRONMENT", "test")
    return current


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
def anon_client(db_session):
    """
    Test client bound to the test database, without credentials.

    get_db is overridden so the app uses our test session
    instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client):
    """Test client that sends an admin bearer token."""
    anon_client.headers.update(auth_headers())
    return anon_client
