"""
Pytest fixtures for testing
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine, JSON
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.db.session import Base
import app.infrastructure.db.models  # noqa: F401  (register tables)


IST = ZoneInfo("Asia/Kolkata")


def ist(year, month, day, hour=12, minute=0, second=0) -> datetime:
    """Local (IST) wall-clock time as a UTC-aware timestamp, the way it is stored."""
    return datetime(year, month, day, hour, minute, second, tzinfo=IST).astimezone(timezone.utc)


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests, with JSONB→JSON mapping."""
    # StaticPool: one connection shared by the test and the API thread
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite doesn't support JSONB, remap to JSON for tests
    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def tz():
    return IST


@pytest.fixture
def household(db_session):
    """Household with family size 6 (large-family tier, balance 75)"""
    from app.application.accounts import SignupUseCase

    return SignupUseCase(db_session).execute(
        name="Asha Patil",
        identifier="9876543210",
        password="Green@123",
        family_size=6,
        area="Kothrud",
        landmark="Near park",
        pincode="411038",
        now=ist(2026, 10, 1, 9),
    )


@pytest.fixture
def admin_account(db_session):
    from app.application.accounts import ProvisionAccountUseCase

    return ProvisionAccountUseCase(db_session).execute(
        name="Meera Admin",
        identifier="9000000001",
        role="admin",
        now=ist(2026, 9, 1),
    )


@pytest.fixture
def driver(db_session):
    from app.application.accounts import ProvisionAccountUseCase

    return ProvisionAccountUseCase(db_session).execute(
        name="Ravi Driver",
        identifier="9000000002",
        role="driver",
        now=ist(2026, 9, 1),
    )
