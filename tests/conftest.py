"""Pytest configuration and fixtures for tests."""
import os

# Settings are read at import time; provide test values first
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shiftdesk.database import Base, get_db
from shiftdesk.models.shift import Shift
from shiftdesk.models.user import User, UserRole
from shiftdesk.services.token_service import TokenService


# Precomputed so fixtures do not pay for PBKDF2 on every user
PASSWORD = "secret123"
PASSWORD_HASH = None


def password_hash() -> str:
    global PASSWORD_HASH
    if PASSWORD_HASH is None:
        from shiftdesk.services.auth_service import AuthService
        PASSWORD_HASH = AuthService.hash_password(PASSWORD)
    return PASSWORD_HASH


def make_user(
    db: Session,
    name: str = "Test Member",
    email: str = None,
    role: UserRole = UserRole.MEMBER
) -> User:
    """Insert a user with the shared test password."""
    user_id = str(uuid.uuid4())
    user = User(
        id=user_id,
        name=name,
        email=email or f"{user_id[:8]}@example.com",
        password_hash=password_hash(),
        role=role,
        employee_code=f"T{user_id[:8]}",
        department="General",
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_shift(db: Session, user: User, shift_date: str, start: str, end: str) -> Shift:
    """Insert a shift directly, bypassing the rule engine."""
    shift = Shift(
        id=str(uuid.uuid4()),
        user_id=user.id,
        shift_date=datetime.fromisoformat(shift_date).date(),
        start_time=datetime.fromisoformat(f"{shift_date}T{start}"),
        end_time=datetime.fromisoformat(f"{shift_date}T{end}")
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


def auth_header(user: User) -> Dict[str, str]:
    """Authorization header carrying a fresh session for the user."""
    return {"Authorization": f"Bearer {TokenService().issue(user)}"}


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a test database session for each test.
    Uses an in-memory SQLite database for fast testing.
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@contextmanager
def get_test_db_session():
    """
    Context manager for creating test database sessions.
    Used for property-based tests where fixtures don't work well.
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def api_db() -> Generator[Session, None, None]:
    """
    Session on a database shared with the API under test.

    The engine uses a static pool so the in-memory database is visible from
    the test client's worker thread.
    """
    from main import app

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(api_db) -> TestClient:
    """Create test client bound to the api_db database."""
    from main import app
    return TestClient(app)

