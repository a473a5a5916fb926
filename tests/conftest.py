import pytest
import os
from datetime import date, datetime

import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["COMPANY_TIMEZONE"] = "UTC"

from staffdesk.database import Base, get_db
from staffdesk.main import app
from staffdesk.routers.auth_deps import get_now
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


class FrozenClock:
    """Settable wall clock injected in place of get_now."""

    def __init__(self):
        self.now = datetime(2025, 3, 3, 8, 0, tzinfo=pytz.UTC)

    def set(self, year, month, day, hour=0, minute=0):
        self.now = datetime(year, month, day, hour, minute, tzinfo=pytz.UTC)
        return self.now

    def __call__(self):
        return self.now


@pytest.fixture(scope="function")
def clock():
    return FrozenClock()


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory: create an account with its profile directly in the database."""
    from staffdesk.models.account import Account
    from staffdesk.models.profile import Profile, UserRole
    from staffdesk.services import auth as auth_service

    def _make_user(email, role=UserRole.EMPLOYEE, name=None, hire_date=date(2020, 1, 1), password="Password123!"):
        account = Account(email=email, hashed_password=auth_service.get_password_hash(password))
        account.profile = Profile(
            email=email,
            name=name or email.split("@")[0].title(),
            role=role,
            hire_date=hire_date,
        )
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account.profile
    return _make_user


@pytest.fixture(scope="function")
def employee(make_user):
    return make_user("alice@acme.com", name="Alice")


@pytest.fixture(scope="function")
def hr_user(make_user):
    from staffdesk.models.profile import UserRole
    return make_user("hannah@acme.com", role=UserRole.HR, name="Hannah")


@pytest.fixture(scope="function")
def admin_user(make_user):
    from staffdesk.models.profile import UserRole
    return make_user("root@acme.com", role=UserRole.ADMIN, name="Root")


@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture to build bearer headers for a profile."""
    from staffdesk.services.auth import token_for

    def _auth_headers(profile):
        return {"Authorization": f"Bearer {token_for(profile)}"}
    return _auth_headers


@pytest.fixture(scope="function")
def client(db_session, clock):
    """Get a TestClient that uses the test database session and the frozen clock."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
