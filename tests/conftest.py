"""Shared test fixtures for the salon booking API.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

os.environ["DATABASE_DSN"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENV"] = "local"
os.environ["EVENT_BUS_PROVIDER"] = "noop"
os.environ["SALON_TIMEZONE"] = "UTC"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from salon.core.base import Base
from salon.core.db import get_session
from salon.main import app

# Import all models to ensure they're registered with Base.metadata
import salon.models  # noqa: F401


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool, connect_args={"check_same_thread": False})
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_session():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_session] = override_get_session


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest_asyncio.fixture
async def salon_service(db):
    """A 60-minute service in the catalogue."""
    from salon.modules.catalog.models import Service

    svc = Service(name="Silk Press", description="Wash and press", category="styling", duration_minutes=60, price=85.0, active=True)
    db.add(svc)
    await db.commit()
    return svc


@pytest_asyncio.fixture
async def salon_client(db):
    from salon.modules.clients.models import Client

    c = Client(name="Ada Lovelace", email="ada@example.com", phone="+15550001111")
    db.add(c)
    await db.commit()
    return c


@pytest_asyncio.fixture
async def weekday_hours(db):
    """Recurring Monday 09:00-17:00 rule with 30 minute slots."""
    from salon.modules.availability.models import AvailabilityRule

    rule = AvailabilityRule(is_recurring=True, day_of_week=1, all_day=False, start_time="09:00", end_time="17:00", slot_duration=30, active=True)
    db.add(rule)
    await db.commit()
    return rule
