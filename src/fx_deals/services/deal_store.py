"""Deal store: the persistence boundary consumed by the deal service.

Each store call runs in its own short-lived session and, for writes, its
own transaction.  No session or lock outlives a single call, so one
record's unit of work never spans another's.
"""

from typing import Protocol

from loguru import logger
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fx_deals.lib.deal_validator import NormalizedDeal
from fx_deals.models.fx_deal import FxDeal
from fx_deals.services.errors import DealPersistenceError


class DealStore(Protocol):
    """Protocol for deal persistence."""

    async def exists(self, deal_unique_id: str) -> bool:
        """Return True if a deal with this identifier is already persisted."""
        ...

    async def find_by_unique_id(self, deal_unique_id: str) -> FxDeal | None:
        """Return the stored deal with this identifier, or None."""
        ...

    async def find_all(self) -> list[FxDeal]:
        """Return every stored deal."""
        ...

    async def save(self, deal: NormalizedDeal) -> FxDeal:
        """Insert a new deal, assigning its id and creation timestamp.

        Raises:
            DealPersistenceError: On constraint violation or database failure.
        """
        ...


class SqlAlchemyDealStore:
    """DealStore backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, deal_unique_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(select(exists().where(FxDeal.deal_unique_id == deal_unique_id)))
            return bool(result.scalar())

    async def find_by_unique_id(self, deal_unique_id: str) -> FxDeal | None:
        async with self._session_factory() as session:
            result = await session.execute(select(FxDeal).where(FxDeal.deal_unique_id == deal_unique_id))
            return result.scalar_one_or_none()

    async def find_all(self) -> list[FxDeal]:
        async with self._session_factory() as session:
            result = await session.execute(select(FxDeal).order_by(FxDeal.id))
            return list(result.scalars().all())

    async def save(self, deal: NormalizedDeal) -> FxDeal:
        row = FxDeal(
            deal_unique_id=deal.deal_unique_id,
            from_currency_iso_code=deal.from_currency_iso_code,
            to_currency_iso_code=deal.to_currency_iso_code,
            deal_timestamp=deal.deal_timestamp,
            deal_amount=deal.deal_amount,
        )
        async with self._session_factory() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                logger.warning(f"Unique constraint rejected deal {deal.deal_unique_id}")
                raise DealPersistenceError(deal.deal_unique_id, f"constraint violation ({exc.orig})") from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                raise DealPersistenceError(deal.deal_unique_id, str(exc)) from exc
            await session.refresh(row)
        return row
