"""Unit tests for the deal validator rules."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fx_deals.lib.deal_validator import normalize_deal, parse_deal, validate_deal, validate_deals
from fx_deals.schemas.deal import DealRequest

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def deal(make_deal: Callable[..., DealRequest]) -> Callable[..., DealRequest]:
    """Valid deal factory with a timestamp fixed relative to NOW."""

    def _make(**overrides: object) -> DealRequest:
        overrides.setdefault("deal_timestamp", NOW - timedelta(hours=1))
        return make_deal(**overrides)

    return _make


class TestValidateDeal:
    """Tests for single-deal validation."""

    def test_valid_deal(self, deal) -> None:
        assert validate_deal(deal(), now=NOW) == []

    def test_none_record(self) -> None:
        assert validate_deal(None, now=NOW) == ["Deal request is required"]

    def test_empty_record_reports_every_required_field(self) -> None:
        errors = validate_deal(DealRequest(), now=NOW)
        assert errors == [
            "Deal Unique Id is required and cannot be empty",
            "From Currency ISO Code is required",
            "To Currency ISO Code is required",
            "Deal timestamp is required",
            "Deal amount is required",
        ]

    def test_same_invalid_record_gives_same_violations(self, deal) -> None:
        bad = deal(deal_unique_id=" ", from_currency_iso_code="US", deal_amount=Decimal("-1"))
        assert validate_deal(bad, now=NOW) == validate_deal(bad, now=NOW)

    def test_malformed_values_reported_with_other_violations(self) -> None:
        malformed = parse_deal(
            {
                "dealUniqueId": "DEAL-001",
                "fromCurrencyIsoCode": "US",
                "toCurrencyIsoCode": "EUR",
                "dealTimestamp": "2026-06-15T11:00:00Z",
                "dealAmount": "abc",
            }
        )
        assert validate_deal(malformed, now=NOW) == [
            "From Currency ISO Code must be exactly 3 characters",
            "Deal amount must be a number",
        ]

    def test_unparsed_value_replaces_required_check(self) -> None:
        malformed = parse_deal({"dealUniqueId": "DEAL-001", "dealTimestamp": "not a date"})
        errors = validate_deal(malformed, now=NOW)
        assert "Deal timestamp must be a valid date-time" in errors
        assert "Deal timestamp is required" not in errors

    def test_non_object_record(self) -> None:
        assert validate_deal(parse_deal(["DEAL-001"]), now=NOW) == ["Deal request must be an object"]


class TestDealUniqueId:
    """Identifier rules."""

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_identifier(self, deal, value) -> None:
        errors = validate_deal(deal(deal_unique_id=value), now=NOW)
        assert errors == ["Deal Unique Id is required and cannot be empty"]

    def test_identifier_at_limit(self, deal) -> None:
        assert validate_deal(deal(deal_unique_id="D" * 100), now=NOW) == []

    def test_identifier_too_long(self, deal) -> None:
        errors = validate_deal(deal(deal_unique_id="D" * 101), now=NOW)
        assert errors == ["Deal Unique Id must not exceed 100 characters"]

    @pytest.mark.parametrize("value", [" DEAL-001", "DEAL-001 ", "\tDEAL-001"])
    def test_surrounding_whitespace(self, deal, value) -> None:
        errors = validate_deal(deal(deal_unique_id=value), now=NOW)
        assert errors == ["Deal Unique Id cannot have leading or trailing whitespace"]


class TestCurrencyCodes:
    """Currency code format rules."""

    def test_lowercase_codes_accepted(self, deal) -> None:
        assert validate_deal(deal(from_currency_iso_code="usd", to_currency_iso_code="eur"), now=NOW) == []

    def test_padded_code_accepted(self, deal) -> None:
        assert validate_deal(deal(from_currency_iso_code=" gbp "), now=NOW) == []

    def test_uncommon_but_well_formed_code_accepted(self, deal) -> None:
        assert validate_deal(deal(to_currency_iso_code="XAU"), now=NOW) == []

    def test_wrong_length(self, deal) -> None:
        errors = validate_deal(deal(from_currency_iso_code="US"), now=NOW)
        assert errors == ["From Currency ISO Code must be exactly 3 characters"]

    def test_non_letters(self, deal) -> None:
        errors = validate_deal(deal(to_currency_iso_code="U5D"), now=NOW)
        assert errors == ["To Currency ISO Code must be 3 uppercase letters (A-Z)"]

    def test_missing_code(self, deal) -> None:
        errors = validate_deal(deal(to_currency_iso_code=""), now=NOW)
        assert errors == ["To Currency ISO Code is required"]

    def test_same_currencies_rejected(self, deal) -> None:
        errors = validate_deal(deal(from_currency_iso_code="USD", to_currency_iso_code="USD"), now=NOW)
        assert errors == ["From Currency and To Currency must be different"]

    def test_same_currencies_rejected_regardless_of_other_fields(self, deal) -> None:
        bad = deal(
            from_currency_iso_code="USD",
            to_currency_iso_code="USD",
            deal_amount=Decimal("0"),
            deal_timestamp=NOW + timedelta(days=1),
        )
        assert "From Currency and To Currency must be different" in validate_deal(bad, now=NOW)

    def test_same_currencies_compared_after_normalizing(self, deal) -> None:
        errors = validate_deal(deal(from_currency_iso_code="usd", to_currency_iso_code=" USD"), now=NOW)
        assert errors == ["From Currency and To Currency must be different"]

    def test_missing_code_skips_equality_check(self, deal) -> None:
        errors = validate_deal(deal(from_currency_iso_code=None, to_currency_iso_code=None), now=NOW)
        assert "From Currency and To Currency must be different" not in errors


class TestDealTimestamp:
    """Timestamp range rules."""

    def test_now_is_accepted(self, deal) -> None:
        assert validate_deal(deal(deal_timestamp=NOW), now=NOW) == []

    def test_future_rejected(self, deal) -> None:
        errors = validate_deal(deal(deal_timestamp=NOW + timedelta(seconds=1)), now=NOW)
        assert errors == ["Deal timestamp cannot be in the future"]

    def test_exactly_ten_years_accepted(self, deal) -> None:
        assert validate_deal(deal(deal_timestamp=NOW.replace(year=2016)), now=NOW) == []

    def test_older_than_ten_years_rejected(self, deal) -> None:
        old = NOW.replace(year=2016) - timedelta(seconds=1)
        errors = validate_deal(deal(deal_timestamp=old), now=NOW)
        assert errors == ["Deal timestamp is too old (more than 10 years)"]

    def test_naive_timestamp_treated_as_utc(self, deal) -> None:
        naive = (NOW - timedelta(minutes=5)).replace(tzinfo=None)
        assert validate_deal(deal(deal_timestamp=naive), now=NOW) == []

    def test_offset_timestamp_compared_in_utc(self, deal) -> None:
        # 13:30 at +02:00 is 11:30 UTC, before NOW
        ts = datetime(2026, 6, 15, 13, 30, tzinfo=timezone(timedelta(hours=2)))
        assert validate_deal(deal(deal_timestamp=ts), now=NOW) == []

    def test_leap_day_reference(self, deal) -> None:
        leap_now = datetime(2028, 2, 29, 12, 0, tzinfo=UTC)
        ts = datetime(2018, 2, 28, 12, 0, tzinfo=UTC)
        assert validate_deal(deal(deal_timestamp=ts), now=leap_now) == []

    def test_custom_max_age(self, deal) -> None:
        errors = validate_deal(deal(deal_timestamp=NOW - timedelta(days=800)), now=NOW, max_age_years=2)
        assert errors == ["Deal timestamp is too old (more than 2 years)"]


class TestDealAmount:
    """Amount rules."""

    @pytest.mark.parametrize("amount", ["0", "-0.01", "-100"])
    def test_not_positive(self, deal, amount) -> None:
        errors = validate_deal(deal(deal_amount=Decimal(amount)), now=NOW)
        assert errors == ["Deal amount must be greater than 0"]

    def test_four_decimal_places_accepted(self, deal) -> None:
        assert validate_deal(deal(deal_amount=Decimal("0.0001")), now=NOW) == []

    def test_five_decimal_places_rejected(self, deal) -> None:
        errors = validate_deal(deal(deal_amount=Decimal("1.00001")), now=NOW)
        assert errors == ["Deal amount cannot have more than 4 decimal places"]

    def test_trailing_zeros_count_as_written(self, deal) -> None:
        errors = validate_deal(deal(deal_amount=Decimal("1.10000")), now=NOW)
        assert errors == ["Deal amount cannot have more than 4 decimal places"]

    def test_exponent_notation_has_no_decimals(self, deal) -> None:
        assert validate_deal(deal(deal_amount=Decimal("1E+3")), now=NOW) == []

    def test_maximum_accepted(self, deal) -> None:
        assert validate_deal(deal(deal_amount=Decimal("1000000000000")), now=NOW) == []

    def test_above_maximum_rejected(self, deal) -> None:
        errors = validate_deal(deal(deal_amount=Decimal("1000000000000.0001")), now=NOW)
        assert errors == ["Deal amount exceeds maximum allowed value"]

    def test_custom_ceiling(self, deal) -> None:
        errors = validate_deal(deal(deal_amount=Decimal("500")), now=NOW, max_amount=Decimal("100"))
        assert errors == ["Deal amount exceeds maximum allowed value"]

    def test_precision_and_ceiling_reported_together(self, deal) -> None:
        errors = validate_deal(deal(deal_amount=Decimal("2000000000000.12345")), now=NOW)
        assert errors == [
            "Deal amount cannot have more than 4 decimal places",
            "Deal amount exceeds maximum allowed value",
        ]


class TestValidateDeals:
    """Tests for batch validation."""

    def test_empty_batch(self) -> None:
        assert validate_deals([]) == ["Deals list cannot be null or empty"]

    def test_missing_batch(self) -> None:
        assert validate_deals(None) == ["Deals list cannot be null or empty"]

    def test_all_valid(self, deal) -> None:
        assert validate_deals([deal(), deal(deal_unique_id="DEAL-002")], now=NOW) == []

    def test_errors_tagged_with_index_and_id(self, deal) -> None:
        errors = validate_deals(
            [deal(), deal(deal_unique_id="DEAL-002", deal_amount=Decimal("0"))],
            now=NOW,
        )
        assert errors == ["record[1] (DEAL-002): Deal amount must be greater than 0"]

    def test_one_entry_per_violation(self, deal) -> None:
        errors = validate_deals([deal(from_currency_iso_code="X", deal_amount=None)], now=NOW)
        assert errors == [
            "record[0] (DEAL-001): From Currency ISO Code must be exactly 3 characters",
            "record[0] (DEAL-001): Deal amount is required",
        ]

    def test_unknown_identifier(self, deal) -> None:
        errors = validate_deals([None, deal(deal_unique_id=None)], now=NOW)
        assert errors == [
            "record[0] (unknown): Deal request is required",
            "record[1] (unknown): Deal Unique Id is required and cannot be empty",
        ]

    def test_malformed_record_tagged_with_its_id(self, deal) -> None:
        malformed = parse_deal({"dealUniqueId": "B", "dealAmount": "abc"})
        errors = validate_deals([deal(), malformed], now=NOW)
        assert "record[1] (B): Deal amount must be a number" in errors
        assert not any(error.startswith("record[0]") for error in errors)


class TestNormalizeDeal:
    """Tests for conversion to the stored form."""

    def test_trims_and_uppercases(self, deal) -> None:
        normalized = normalize_deal(deal(from_currency_iso_code=" usd", to_currency_iso_code="eur "))
        assert normalized.deal_unique_id == "DEAL-001"
        assert normalized.from_currency_iso_code == "USD"
        assert normalized.to_currency_iso_code == "EUR"
        assert normalized.deal_amount == Decimal("1000.50")

    def test_incomplete_deal_raises(self) -> None:
        with pytest.raises(ValueError, match="incomplete deal"):
            normalize_deal(DealRequest(deal_unique_id="DEAL-001"))
