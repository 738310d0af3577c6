"""
Pytest fixtures for test database, client, authentication and the
in-memory booking backend.

HTTP and SQL-store tests run against a fresh in-memory SQLite database per
test (aiosqlite). Concurrency and fault-injection tests use MemoryBackend,
where interleaving can be forced deterministically.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub.main import app
from eventhub.db.base import Base
from eventhub.db.session import get_db
from eventhub.core.security import create_access_token, hash_password
from eventhub.models import Category, Event, Profile, User
from eventhub.services.access_service import grant_role
from eventhub.services.booking_service import ReservationCoordinator
from eventhub.services.memory_store import (
    MemoryBackend, MemoryBookingLedger, MemoryInventoryStore, MemoryQueryFacade,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def future(days: int = 30) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy own BEGIN so SAVEPOINTs behave (the sqlite driver
    # otherwise manages transactions itself).
    @sa_event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @sa_event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, email: str, full_name: str) -> User:
    user = User(email=email, hashed_password=hash_password("testpassword123"))
    db.add(user)
    await db.flush()
    db.add(Profile(id=user.id, full_name=full_name, email=email))
    await grant_role(db, user.id, "user")
    await db.commit()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.id})}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "test@example.com", "Test User")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "other@example.com", "Other User")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = await _make_user(db_session, "admin@example.com", "Admin User")
    await grant_role(db_session, user.id, "admin")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return _headers_for(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers_for(admin_user)


@pytest_asyncio.fixture
async def music(db_session: AsyncSession) -> Category:
    category = Category(name="Music")
    db_session.add(category)
    await db_session.commit()
    return category


@pytest_asyncio.fixture
async def sports(db_session: AsyncSession) -> Category:
    category = Category(name="Sports")
    db_session.add(category)
    await db_session.commit()
    return category


async def make_event(db: AsyncSession, **overrides) -> Event:
    fields = dict(
        title="Test Concert",
        description="A test event",
        start_date=future(),
        location="Test City",
        venue_name="Test Venue",
        price=Decimal("25.00"),
        total_seats=100,
        available_seats=100,
        status="upcoming",
        featured=False,
        tags=["live"],
    )
    fields.update(overrides)
    event = Event(**fields)
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_user: User, music: Category) -> Event:
    """Upcoming event with 100 seats at 25.00."""
    return await make_event(db_session, organizer_id=test_user.id, category_id=music.id)


@pytest_asyncio.fixture
async def sold_out_event(db_session: AsyncSession, test_user: User) -> Event:
    return await make_event(
        db_session,
        title="Sold Out Show",
        description="No seats left",
        total_seats=50,
        available_seats=0,
        organizer_id=test_user.id,
    )


# In-memory backend


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def inventory(backend: MemoryBackend) -> MemoryInventoryStore:
    # Non-zero latency forces a suspension between read and write
    return MemoryInventoryStore(backend, latency=0.001)


@pytest.fixture
def ledger(backend: MemoryBackend, inventory: MemoryInventoryStore) -> MemoryBookingLedger:
    return MemoryBookingLedger(backend, inventory)


@pytest.fixture
def coordinator(backend, inventory, ledger) -> ReservationCoordinator:
    return ReservationCoordinator(MemoryQueryFacade(backend), inventory, ledger, append_timeout=1.0)
