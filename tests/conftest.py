import os

# Settings are read at import time; these must be set before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")
os.environ.setdefault("BCRYPT_COST", "4")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
from app.core.permissions import RoleMasks
from app.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.tenant import Tenant
from app.models.user import User
from app.models.session import Session
from app.models.taxi import Taxi
from app.models.weekly_report import WeeklyReport
from app.models.expense import Expense
from app.models.bank_deposit import BankDeposit
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

TEST_PASSWORD = "password123"


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


@pytest.fixture
def role_masks() -> RoleMasks:
    return settings.role_masks


def create_test_token(
    user_id: int,
    permission: int = 0,
    expired: bool = False,
    token_type: str = "access",
    secret: str | None = None,
) -> str:
    """
    Generate a JWT for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        permission: Mask to embed (informational, the server uses the live user)
        expired: If True, create expired token
        token_type: Value of the 'type' claim
        secret: Signing key, defaults to the app's SECRET_KEY

    Returns:
        Encoded JWT token
    """
    now = datetime.now(UTC)
    if expired:
        exp = now - timedelta(minutes=5)
    else:
        exp = now + timedelta(minutes=15)

    payload = {
        "sub": str(user_id),
        "permission": permission,
        "type": token_type,
        "exp": exp,
        "iat": now,
    }
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm="HS256")


@pytest.fixture
def token_factory():
    """Expose create_test_token to tests"""
    return create_test_token


@pytest.fixture
def headers_for():
    """Build Authorization headers for a user"""

    def _headers(user: User) -> dict:
        token = create_test_token(user.id, user.permission)
        return {"Authorization": f"Bearer {token}"}

    return _headers


# Tenants


@pytest.fixture
def tenant(db_session) -> Tenant:
    tenant = Tenant(name="Yellow Cabs", subdomain="yellow", settings={})
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def other_tenant(db_session) -> Tenant:
    tenant = Tenant(name="Green Cabs", subdomain="green", settings={})
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


# Users


@pytest.fixture
def make_user(db_session):
    """Factory: create a user in a tenant with a given permission mask"""
    counter = {"n": 0}

    def _make_user(
        tenant: Tenant,
        permission: int,
        email: str | None = None,
        active: bool = True,
        phone: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        counter["n"] += 1
        user = User(
            tenant_id=tenant.id,
            email=email or f"user{counter['n']}@{tenant.subdomain}.test",
            password_hash=hash_password(password),
            permission=permission,
            first_name="Test",
            last_name=f"User{counter['n']}",
            phone=phone,
            active=active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.admin, email="admin@yellow.test")


@pytest.fixture
def owner(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.owner, email="owner@yellow.test")


@pytest.fixture
def manager(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.manager, email="manager@yellow.test")


@pytest.fixture
def mechanic(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.mechanic, email="mechanic@yellow.test")


@pytest.fixture
def driver(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.driver, email="driver@yellow.test")


@pytest.fixture
def other_driver(make_user, tenant, role_masks) -> User:
    return make_user(tenant, role_masks.driver, email="driver2@yellow.test")


@pytest.fixture
def foreign_owner(make_user, other_tenant, role_masks) -> User:
    return make_user(other_tenant, role_masks.owner, email="owner@green.test")


@pytest.fixture
def admin_headers(headers_for, admin):
    return headers_for(admin)


@pytest.fixture
def owner_headers(headers_for, owner):
    return headers_for(owner)


@pytest.fixture
def manager_headers(headers_for, manager):
    return headers_for(manager)


@pytest.fixture
def mechanic_headers(headers_for, mechanic):
    return headers_for(mechanic)


@pytest.fixture
def driver_headers(headers_for, driver):
    return headers_for(driver)


@pytest.fixture
def other_driver_headers(headers_for, other_driver):
    return headers_for(other_driver)


@pytest.fixture
def foreign_owner_headers(headers_for, foreign_owner):
    return headers_for(foreign_owner)


# Fleet data


@pytest.fixture
def taxi(db_session, tenant) -> Taxi:
    taxi = Taxi(tenant_id=tenant.id, license_plate="YC-1001", model="Prius", year=2021)
    db_session.add(taxi)
    db_session.commit()
    db_session.refresh(taxi)
    return taxi


@pytest.fixture
def foreign_taxi(db_session, other_tenant) -> Taxi:
    taxi = Taxi(tenant_id=other_tenant.id, license_plate="GC-2001", model="Camry", year=2020)
    db_session.add(taxi)
    db_session.commit()
    db_session.refresh(taxi)
    return taxi


@pytest.fixture
def week_start() -> date:
    return date(2026, 3, 2)


@pytest.fixture
def draft_report(client, driver_headers, taxi, week_start) -> dict:
    """A draft report created by the driver through the API"""
    response = client.post(
        "/api/reports",
        headers=driver_headers,
        json={"taxi_id": taxi.id, "week_start_date": week_start.isoformat(), "earnings": 1200.00},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def submitted_report(client, driver_headers, draft_report) -> dict:
    response = client.post(f"/api/reports/{draft_report['id']}/submit", headers=driver_headers)
    assert response.status_code == 200
    return response.json()
