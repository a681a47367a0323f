"""FastAPI dependency injection for the deal store and validation limits."""

from typing import Annotated

from fastapi import Depends

from fx_deals.core.config import Settings, get_settings
from fx_deals.core.database import get_session_factory
from fx_deals.services.deal_service import ValidationLimits
from fx_deals.services.deal_store import DealStore, SqlAlchemyDealStore


def get_deal_store() -> DealStore:
    """Return a store bound to the application session factory.

    The store opens a fresh session per call rather than per request, so
    each deal in a batch commits independently.
    """
    return SqlAlchemyDealStore(get_session_factory())


def get_validation_limits(settings: Annotated[Settings, Depends(get_settings)]) -> ValidationLimits:
    """Build validation limits from application settings."""
    return ValidationLimits(max_amount=settings.deal_max_amount, max_age_years=settings.deal_max_age_years)
