# tests/conftest.py
"""
Pytest configuration for the booking core.

Every test gets a fresh in-memory SQLite calendar store. Services commit
through the same session the test inspects, so no cross-test cleanup is
needed beyond dropping the schema.
"""

import os

# Set test configuration BEFORE any freelance_booking imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["REDIS_URL"] = ""
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from typing import Callable, Dict, Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from freelance_booking.api.dependencies.database import get_db
from freelance_booking.core import calendar_lock as calendar_lock_module
from freelance_booking.core.calendar_lock import reset_calendar_locks
from freelance_booking.core.security import create_access_token
from freelance_booking.database import Base
from freelance_booking.main import app
from freelance_booking.models import Profile, ProfileRole, Service


@pytest.fixture(autouse=True)
def _isolated_calendar_locks(monkeypatch) -> Iterator[None]:
    monkeypatch.setattr(calendar_lock_module.settings, "redis_url", None, raising=False)
    reset_calendar_locks()
    yield
    reset_calendar_locks()


@pytest.fixture
def engine() -> Iterator[Engine]:
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Test client whose requests share the test's session."""

    def override_get_db() -> Iterator[Session]:
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_profile(db: Session, user_id: str, name: str, role: ProfileRole) -> Profile:
    profile = Profile(
        id=user_id,
        display_name=name,
        email=f"{user_id}@example.com",
        role=role.value,
    )
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def client_profile(db: Session) -> Profile:
    return _make_profile(db, "client-1", "Casey Client", ProfileRole.CLIENT)


@pytest.fixture
def other_client_profile(db: Session) -> Profile:
    return _make_profile(db, "client-2", "Robin Client", ProfileRole.CLIENT)


@pytest.fixture
def freelancer_profile(db: Session) -> Profile:
    return _make_profile(db, "freelancer-1", "Frankie Freelancer", ProfileRole.FREELANCER)


@pytest.fixture
def other_freelancer_profile(db: Session) -> Profile:
    return _make_profile(db, "freelancer-2", "Sam Freelancer", ProfileRole.FREELANCER)


@pytest.fixture
def service(db: Session, freelancer_profile: Profile) -> Service:
    """Active listing at 5000 cents per hour."""
    listing = Service(
        freelancer_id=freelancer_profile.id,
        title="Logo design",
        description="Two concepts and one revision",
        price_cents=5000,
        duration_minutes=60,
        is_active=True,
    )
    db.add(listing)
    db.commit()
    return listing


@pytest.fixture
def inactive_service(db: Session, freelancer_profile: Profile) -> Service:
    listing = Service(
        freelancer_id=freelancer_profile.id,
        title="Retired offering",
        price_cents=3000,
        is_active=False,
    )
    db.add(listing)
    db.commit()
    return listing


@pytest.fixture
def auth_headers_for() -> Callable[..., Dict[str, str]]:
    def _headers(user_id: str, display_name: str = None) -> Dict[str, str]:
        token = create_access_token(
            user_id, email=f"{user_id}@example.com", display_name=display_name
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client_headers(auth_headers_for, client_profile: Profile) -> Dict[str, str]:
    return auth_headers_for(client_profile.id)


@pytest.fixture
def freelancer_headers(auth_headers_for, freelancer_profile: Profile) -> Dict[str, str]:
    return auth_headers_for(freelancer_profile.id)
