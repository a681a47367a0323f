"""Tests for FastAPI dependency providers."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

from fx_deals.core.config import Settings
from fx_deals.core.dependencies import get_deal_store, get_validation_limits
from fx_deals.services.deal_store import SqlAlchemyDealStore


class TestGetDealStore:
    """Tests for get_deal_store."""

    def test_binds_application_session_factory(self) -> None:
        factory = MagicMock()
        with patch("fx_deals.core.dependencies.get_session_factory", return_value=factory):
            store = get_deal_store()
        assert isinstance(store, SqlAlchemyDealStore)
        assert store._session_factory is factory


class TestGetValidationLimits:
    """Tests for get_validation_limits."""

    def test_limits_follow_settings(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            deal_max_amount=Decimal("250000"),
            deal_max_age_years=2,
        )
        limits = get_validation_limits(settings)
        assert limits.max_amount == Decimal("250000")
        assert limits.max_age_years == 2
