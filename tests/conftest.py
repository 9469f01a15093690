"""
Pytest configuration and fixtures for the persistence pipeline tests.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.pool import StaticPool

from organizer.models import Base, ChangeLog, Space, SpaceType, Tenant, User, WeekStart
from organizer.persistence.session import create_session_factory


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class SwitchableTenantContext:
    """Tenant context the test can re-point between statements."""

    def __init__(self, tenant_id: uuid.UUID | None = None):
        self.tenant_id = tenant_id

    @property
    def current_tenant_id(self) -> uuid.UUID | None:
        return self.tenant_id


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def tenant_context():
    return SwitchableTenantContext()


@pytest.fixture(scope="function")
def session_factory(clock, tenant_context):
    """
    Pipeline-enabled session factory over a fresh schema.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)
    try:
        yield create_session_factory(engine, clock=clock, tenant_context=tenant_context)
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a fresh pipeline session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def change_log_rows(session):
    """All ledger rows in insertion order."""
    return session.scalars(select(ChangeLog).order_by(ChangeLog.id)).all()


def make_tenant(session, slug: str) -> Tenant:
    tenant = Tenant(name=slug.replace("-", " ").title(), slug=slug)
    session.add(tenant)
    session.commit()
    return tenant


def make_space(session, tenant: Tenant, name: str = "Home") -> Space:
    space = Space(
        tenant_id=tenant.id,
        name=name,
        normalized_name=name.upper(),
        space_type=SpaceType.SHARED,
    )
    session.add(space)
    session.commit()
    return space


@pytest.fixture
def tenant_a(db_session):
    """First tenant."""
    return make_tenant(db_session, "tenant-a")


@pytest.fixture
def tenant_b(db_session):
    """Second tenant."""
    return make_tenant(db_session, "tenant-b")


@pytest.fixture
def user_a(db_session, tenant_a):
    """A user of tenant A."""
    user = User(
        tenant_id=tenant_a.id,
        display_name="Ada Lovelace",
        email="ada@daykeeper.io",
        timezone="Europe/London",
        week_start=WeekStart.MONDAY,
    )
    db_session.add(user)
    db_session.commit()
    return user
