"""Shared test fixtures for async database, sessions, deal store, and sample deals."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fx_deals.core.config import Settings
from fx_deals.models import Base
from fx_deals.schemas.deal import DealRequest
from fx_deals.services.deal_store import SqlAlchemyDealStore


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine shared by every session in a test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def deal_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlAlchemyDealStore:
    """SQLAlchemy deal store over the in-memory database."""
    return SqlAlchemyDealStore(session_factory)


@pytest.fixture
def make_deal() -> Callable[..., DealRequest]:
    """Factory for valid deal requests; keyword arguments override fields."""

    def _make(**overrides: object) -> DealRequest:
        fields: dict[str, object] = {
            "deal_unique_id": "DEAL-001",
            "from_currency_iso_code": "USD",
            "to_currency_iso_code": "EUR",
            "deal_timestamp": datetime.now(UTC) - timedelta(hours=1),
            "deal_amount": Decimal("1000.50"),
        }
        fields.update(overrides)
        return DealRequest(**fields)

    return _make
