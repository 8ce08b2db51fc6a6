import pytest
import os
import random
from datetime import datetime, timedelta
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["GATEWAY_MODE"] = "mock"

from paystream.core.clock import UTC
from paystream.database import Base, get_db
from paystream.dependencies import get_gateway, get_scheduler
from paystream.gateway.mock import MockChainGateway
from paystream.main import app
from paystream.repositories.company import CompanyRepository
from paystream.repositories.employee import EmployeeRepository
from paystream.services.payment_scheduler import PaymentScheduler
from fastapi.testclient import TestClient

# SQLite in-memory database shared by every session in a test
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


class FrozenClock:
    """Injectable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function", autouse=True)
def setup_database():
    """Fresh tables per test; scheduler runs commit from their own sessions."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory():
    return TestingSessionLocal


@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def clock():
    return FrozenClock(T0)


@pytest.fixture(scope="function")
def gateway():
    """Deterministic gateway: no random failures, no delay, seeded hashes."""
    return MockChainGateway(failure_rate=0.0, rng=random.Random(1234))


@pytest.fixture(scope="function")
def scheduler(session_factory, gateway, clock):
    return PaymentScheduler(session_factory, gateway, clock=clock, payment_timeout=1.0)


@pytest.fixture(scope="function")
def make_company(db_session):
    """Factory for companies created at T0 unless told otherwise."""
    counter = {"n": 0}

    def _make_company(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Acme {counter['n']}",
            "email": f"payroll{counter['n']}@acme.io",
            "wallet_address": f"0xC0{counter['n']:038x}",
            "payment_schedule": "monthly",
            "monthly_budget": Decimal("10000"),
            "created_at": T0,
        }
        data.update(overrides)
        return CompanyRepository(db_session).create(data)
    return _make_company


@pytest.fixture(scope="function")
def make_employee(db_session):
    counter = {"n": 0}

    def _make_employee(company, **overrides):
        counter["n"] += 1
        data = {
            "company_id": company.id,
            "name": f"Employee {counter['n']:02d}",
            "email": f"employee{counter['n']}@acme.io",
            "wallet_address": f"0xE0{counter['n']:038x}",
            "position": "Engineer",
            "department": "Engineering",
            "salary": Decimal("1000"),
        }
        data.update(overrides)
        return EmployeeRepository(db_session).create(data)
    return _make_employee


@pytest.fixture(scope="function")
def client(session_factory, scheduler, gateway):
    """TestClient wired to the test database, scheduler and gateway via dependency override."""
    def override_get_db():
        # One session per request, as get_db does
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
