"""
Pytest configuration for integration tests.

Runs the FastAPI app in-process with TestClient against a fresh in-memory
SQLite database per test.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_BCRYPT_COST", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-only-signing-key-0123456789abcdef")

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledger_auth.core.database import Base, get_db
from ledger_auth.main import app
from ledger_auth.models import User, UserRole
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.utils.security import hash_password


TEST_PASSWORD = "Correct-Horse1"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an in-process API test"
    )


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    engine.dispose()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """TestClient with the database dependency pointed at the test engine."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def create_account(session_factory) -> Callable[..., int]:
    """Insert a user directly and return its id."""
    def _create_account(
        username: str,
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER
    ) -> int:
        db = session_factory()
        try:
            user = IdentityStore(db).add(User(
                username=username,
                email=f"{username}@example.com",
                password_hash=hash_password(password),
                role=role,
            ))
            return user.user_id
        finally:
            db.close()

    return _create_account


@pytest.fixture
def login(client) -> Callable[..., str]:
    """Log in with password only and return the bearer token."""
    def _login(username: str, password: str = TEST_PASSWORD) -> str:
        response = client.post(
            "/api/auth/login",
            json={"username": username, "password": password}
        )
        assert response.status_code == 200, f"Login failed: {response.json()}"
        return response.json()["token"]

    return _login


@pytest.fixture
def auth_headers(login) -> Callable[..., dict]:
    def _auth_headers(username: str, password: str = TEST_PASSWORD) -> dict:
        return {"Authorization": f"Bearer {login(username, password)}"}

    return _auth_headers
