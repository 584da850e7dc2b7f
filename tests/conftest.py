"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before and dropped after
every test.
"""

import os

# Settings are read at import time; point them at the test
# database before anything from bank_api is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bank_api.main import app
from bank_api.models.base import Base, engine_options, get_db
from bank_api.schemas.account import AccountCreate
from bank_api.schemas.user import UserCreate
from bank_api.models import AccountType
from bank_api.services import AccountService, UserService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    """Session factory for tests that need more than one session."""
    return TestSessionLocal


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
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the configured database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Helpers ---

def create_user(db_session, email="test@test.com", password="password123"):
    """Helper: register a user and commit."""
    user = UserService.with_session(db_session).create_user(UserCreate(
        email=email, password=password, first_name="Test", last_name="User",
    ))
    db_session.commit()
    return user


def open_account(
    db_session,
    user,
    balance="0.00",
    account_type=AccountType.CHECKING,
    account_number=None,
):
    """Helper: open an account with an opening balance and commit."""
    account = AccountService.with_session(db_session).create_account(
        user.id,
        AccountCreate(
            account_type=account_type,
            account_number=account_number,
            initial_balance=balance,
        ),
    )
    db_session.commit()
    return account


def auth_headers(client, email="test@test.com", password="password123"):
    """Helper: log in through the API and return a bearer header."""
    response = client.post(
        "/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
