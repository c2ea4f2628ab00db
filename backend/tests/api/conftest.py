"""API test fixtures — async DB, FastAPI test client with fake external clients, seed data.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and every external-client dependency are overridden
    - db_manager patched so the readiness probe hits the test engine
    - The in-memory assistant context store is emptied around each test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Real signed tokens (tests/helpers.py) instead of overriding auth: the
      401 paths are exercised through the same dependency as production
"""

import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

import rentmap.infrastructure.database as db_module
from rentmap.api.dependencies import (
    get_ai_client, get_notifier, get_ocr_client, get_waitlist_client,
)
from rentmap.core.conversation_context import context_store
from rentmap.db.base import Base
from rentmap.db.session import create_session_factory
from rentmap.infrastructure.database import DatabaseSessionManager, get_db
from rentmap.main import app
from rentmap.models import (
    Customer, Landlord, Property, PropertyListing, User,
)
from tests.api.fakes import FakeAIClient, FakeNotifier, FakeOCRClient, FakeWaitlistClient

BASE_TIME = datetime(2026, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def ocr_client():
    return FakeOCRClient()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def waitlist_client():
    return FakeWaitlistClient()


@pytest.fixture(autouse=True)
def clean_context_store():
    context_store._conversations.clear()
    yield
    context_store._conversations.clear()


@pytest.fixture
async def client(
    test_engine, test_session_factory, ai_client, ocr_client, notifier, waitlist_client,
):
    """FastAPI test client with DB and external clients overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    app.dependency_overrides[get_ocr_client] = lambda: ocr_client
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_waitlist_client] = lambda: waitlist_client

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed Data ──────────────────────────────────────────────────

def _user(username: str, first: str, last: str, **kwargs) -> User:
    user = User(
        id=uuid.uuid4(), username=username,
        email=f"{username}@example.com", **kwargs,
    )
    user.customer = Customer(id=uuid.uuid4(), first_name=first, last_name=last)
    return user


@pytest.fixture
async def seed_users(test_db):
    alice = _user("alice", "Alice", "Renter", phone_number="555-0100")
    bob = _user("bob", "Bob", "Owner", phone_number="555-0200")
    carol = _user("carol", "Carol", "Jones")
    bob.customer.landlord = Landlord(
        id=uuid.uuid4(),
        business_name="Bob Rentals",
        business_phone="555-0299",
        business_email="rentals@example.com",
    )
    test_db.add_all([alice, bob, carol])
    await test_db.commit()
    return SimpleNamespace(alice=alice, bob=bob, carol=carol)


def _listing(prop: Property, rent: str, days: int, status: str = "active", **kwargs):
    return PropertyListing(
        id=uuid.uuid4(),
        property_id=prop.id,
        listing_title=f"{prop.property_type.title()} in {prop.city}",
        monthly_rent=Decimal(rent),
        listing_status=status,
        created_at=BASE_TIME + timedelta(days=days),
        **kwargs,
    )


@pytest.fixture
async def seed_properties(test_db, seed_users):
    landlord_id = seed_users.bob.customer.landlord.id
    downtown = Property(
        id=uuid.uuid4(), landlord_id=landlord_id,
        address_line_1="100 Congress Ave", address_line_2="Unit 5",
        city="Austin", state="TX", zip_code="78701",
        latitude=30.27, longitude=-97.74,
        property_type="apartment", bedrooms=2, bathrooms=1,
        square_footage=900, parking_spaces=1, pet_friendly=True,
    )
    east_side = Property(
        id=uuid.uuid4(),
        address_line_1="55 Cesar Chavez St",
        city="Austin", state="TX", zip_code="78702",
        latitude=30.30, longitude=-97.70,
        property_type="house", bedrooms=3, bathrooms=2,
        square_footage=1600, furnished=True,
    )
    uptown = Property(
        id=uuid.uuid4(),
        address_line_1="9 Elm Street",
        city="Dallas", state="TX", zip_code="75201",
        latitude=32.78, longitude=-96.80,
        property_type="condo", bedrooms=1, bathrooms=1.5,
        air_conditioning=True, in_unit_laundry=True,
    )
    rented = Property(
        id=uuid.uuid4(),
        address_line_1="12 Lamar Blvd",
        city="Austin", state="TX", zip_code="78703",
        latitude=30.28, longitude=-97.75,
        property_type="studio", bedrooms=0, bathrooms=1,
    )
    test_db.add_all([downtown, east_side, uptown, rented])
    await test_db.flush()

    listings = [
        _listing(
            downtown, "1500.00", 1,
            security_deposit=Decimal("1500.00"), available_date=date(2026, 10, 1),
        ),
        _listing(east_side, "2500.00", 2, available_date=date(2026, 12, 1)),
        _listing(uptown, "1200.00", 3),
        _listing(rented, "900.00", 4, status="rented"),
    ]
    test_db.add_all(listings)
    await test_db.commit()
    return SimpleNamespace(
        downtown=downtown, east_side=east_side, uptown=uptown, rented=rented,
        listings=listings,
    )
