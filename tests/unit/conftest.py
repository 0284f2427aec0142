"""
Pytest configuration for unit tests.

Services run against an in-memory SQLite database; time is injected
through a controllable clock.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_BCRYPT_COST", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-only-signing-key-0123456789abcdef")

import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from ledger_auth.core.config import Settings
from ledger_auth.core.database import Base
from ledger_auth.models import User, UserRole, SecondFactorState
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.utils.security import hash_password


TEST_PASSWORD = "Correct-Horse1"


class FakeClock:
    """Callable clock returning a settable unix time"""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session = Session(bind=engine)
    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def store(db_session):
    return IdentityStore(db_session)


@pytest.fixture
def test_settings():
    """Explicit settings object passed into the services under test."""
    return Settings(
        JWT_SECRET_KEY="unit-test-signing-key-0123456789abcdef",
        JWT_ISSUER="test-issuer",
        JWT_AUDIENCE="test-audience",
        SESSION_TTL_HOURS=24,
        MFA_ISSUER="SaralLedger",
        MFA_QR_CODE_ENABLED=False,
    )


@pytest.fixture
def clock():
    # Start on a step boundary close to real time; token expiry is also
    # checked against the wall clock by the JWT library.
    now = time.time()
    return FakeClock(now - (now % 30))


@pytest.fixture
def make_user(store):
    """Factory for persisted users."""
    def _make_user(
        username: str = "alice",
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
        mfa_secret: str = None,
        mfa_enabled: bool = False,
    ) -> User:
        user = store.add(User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        ))
        if mfa_secret:
            user = store.update_second_factor(
                user.user_id,
                SecondFactorState(enabled=mfa_enabled, secret=mfa_secret)
            )
        return user

    return _make_user
