"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite database file; requests run on their own
sessions like in production, and fixtures seed data through a separate
session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("PAYMENT_GATEWAY", "offline")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ticketbari.main import app
from ticketbari.core.config import get_settings
from ticketbari.core.security import create_access_token
from ticketbari.db.base import Base
from ticketbari.db.session import get_db
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User
from ticketbari.services.interfaces.offline_gateway import OfflinePaymentGateway
from ticketbari.services.strategy_factory import get_payment_gateway

ADMIN_EMAIL = "admin@ticketbari.com"
VENDOR_EMAIL = "vendor@ticketbari.com"
OTHER_VENDOR_EMAIL = "other-vendor@ticketbari.com"
CUSTOMER_EMAIL = "alice@ticketbari.com"
OTHER_CUSTOMER_EMAIL = "bob@ticketbari.com"


def headers_for(email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'email': email})}"}


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh schema in a per-test database file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ticketbari.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the test database and an offline payment gateway."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = OfflinePaymentGateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add_user(session: AsyncSession, email: str, role: str) -> User:
    user = User(email=email, name=email.split("@")[0], role=role)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _add_user(db_session, ADMIN_EMAIL, "admin")


@pytest_asyncio.fixture
async def demo_admin(db_session: AsyncSession) -> User:
    return await _add_user(db_session, get_settings().DEMO_ADMIN_EMAIL, "admin")


@pytest_asyncio.fixture
async def vendor(db_session: AsyncSession) -> User:
    return await _add_user(db_session, VENDOR_EMAIL, "vendor")


@pytest_asyncio.fixture
async def other_vendor(db_session: AsyncSession) -> User:
    return await _add_user(db_session, OTHER_VENDOR_EMAIL, "vendor")


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await _add_user(db_session, CUSTOMER_EMAIL, "user")


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> User:
    return await _add_user(db_session, OTHER_CUSTOMER_EMAIL, "user")


async def make_ticket(
    session: AsyncSession,
    vendor_email: str = VENDOR_EMAIL,
    title: str = "Dhaka to Chittagong Express",
    quantity: int = 10,
    price: float = 50.0,
    status: str = "approved",
    advertised: bool = False,
) -> Ticket:
    ticket = Ticket(
        vendor_email=vendor_email,
        title=title,
        origin="Dhaka",
        destination="Chittagong",
        transport_type="bus",
        price=price,
        quantity=quantity,
        departure_date=datetime.now(timezone.utc) + timedelta(days=14),
        perks=["AC", "WiFi"],
        verification_status=status,
        is_advertised=advertised,
    )
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    return ticket


@pytest_asyncio.fixture
async def ticket(db_session: AsyncSession, vendor: User) -> Ticket:
    """Approved ticket with 10 seats at 50.0 each."""
    return await make_ticket(db_session)


async def fetch(session_factory, model, pk):
    """Read a row through a fresh session so nothing cached leaks in."""
    async with session_factory() as session:
        return await session.get(model, pk)
