"""FX deal validation rules.

Validates required fields, identifier and currency code format, timestamp
range, and amount bounds.  Every rule runs independently so a single pass
reports all violations on a record.  Validation never touches storage.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger

from fx_deals.lib.deal_validator.currencies import CURRENCY_CODE_PATTERN, is_common_currency, normalize_currency_code
from fx_deals.lib.deal_validator.parsing import IncomingDeal, MalformedDeal
from fx_deals.schemas.deal import DealRequest

MAX_DEAL_UNIQUE_ID_LENGTH = 100
MAX_DEAL_AMOUNT = Decimal("1000000000000")
MAX_DEAL_AGE_YEARS = 10
MAX_AMOUNT_DECIMAL_PLACES = 4

UNKNOWN_DEAL_ID = "unknown"


@dataclass(frozen=True)
class NormalizedDeal:
    """A validated deal with its identifier trimmed and currency codes upper-cased."""

    deal_unique_id: str
    from_currency_iso_code: str
    to_currency_iso_code: str
    deal_timestamp: datetime
    deal_amount: Decimal


def validate_deal(
    deal: IncomingDeal,
    *,
    now: datetime | None = None,
    max_amount: Decimal = MAX_DEAL_AMOUNT,
    max_age_years: int = MAX_DEAL_AGE_YEARS,
) -> list[str]:
    """Validate a single deal.

    Args:
        deal: The incoming deal, or None. A MalformedDeal reports each value that
            failed to parse in place of the rules for that field.
        now: Reference time for timestamp checks (defaults to the current UTC time).
        max_amount: Largest accepted amount.
        max_age_years: Oldest accepted timestamp, in years before ``now``.

    Returns:
        List of violation messages; empty when the deal is valid.
    """
    if deal is None:
        return ["Deal request is required"]

    unparsed: Mapping[str, str] = {}
    if isinstance(deal, MalformedDeal):
        if deal.request is None:
            logger.warning(f"Validation failed for unparseable deal: {list(deal.unparsed.values())}")
            return list(deal.unparsed.values())
        unparsed = deal.unparsed
        deal = deal.request

    errors: list[str] = []
    if not _reported_unparsed("deal_unique_id", unparsed, errors):
        _check_deal_unique_id(deal.deal_unique_id, errors)
    if not _reported_unparsed("from_currency_iso_code", unparsed, errors):
        _check_currency_code(deal.from_currency_iso_code, "From Currency", errors)
    if not _reported_unparsed("to_currency_iso_code", unparsed, errors):
        _check_currency_code(deal.to_currency_iso_code, "To Currency", errors)
    _check_currencies_differ(deal.from_currency_iso_code, deal.to_currency_iso_code, errors)
    if not _reported_unparsed("deal_timestamp", unparsed, errors):
        _check_deal_timestamp(deal.deal_timestamp, now or datetime.now(UTC), max_age_years, errors)
    if not _reported_unparsed("deal_amount", unparsed, errors):
        _check_deal_amount(deal.deal_amount, max_amount, errors)

    if errors:
        logger.warning(f"Validation failed for deal {deal.deal_unique_id}: {errors}")
    return errors


def validate_deals(deals: Sequence[IncomingDeal] | None, **kwargs: object) -> list[str]:
    """Validate a batch of deals.

    Args:
        deals: The incoming deals.
        **kwargs: Passed through to :func:`validate_deal`.

    Returns:
        Flat list of ``record[<index>] (<id>): <violation>`` strings. An
        empty or missing batch yields a single top-level violation.
    """
    if not deals:
        return ["Deals list cannot be null or empty"]

    all_errors: list[str] = []
    for index, deal in enumerate(deals):
        for error in validate_deal(deal, **kwargs):  # type: ignore[arg-type]
            all_errors.append(format_record_error(index, deal, error))
    return all_errors


def format_record_error(index: int, deal: IncomingDeal, message: str) -> str:
    """Tag a message with the position and identifier of the record it belongs to."""
    deal_id = deal.deal_unique_id if deal is not None and deal.deal_unique_id is not None else UNKNOWN_DEAL_ID
    return f"record[{index}] ({deal_id}): {message}"


def normalize_deal(deal: DealRequest) -> NormalizedDeal:
    """Convert a validated deal into its stored form.

    Raises:
        ValueError: If a required field is missing (the deal was not validated).
    """
    if (
        deal.deal_unique_id is None
        or deal.from_currency_iso_code is None
        or deal.to_currency_iso_code is None
        or deal.deal_timestamp is None
        or deal.deal_amount is None
    ):
        msg = "Cannot normalize an incomplete deal; validate it first"
        raise ValueError(msg)
    return NormalizedDeal(
        deal_unique_id=deal.deal_unique_id.strip(),
        from_currency_iso_code=normalize_currency_code(deal.from_currency_iso_code),
        to_currency_iso_code=normalize_currency_code(deal.to_currency_iso_code),
        deal_timestamp=deal.deal_timestamp,
        deal_amount=deal.deal_amount,
    )


def _reported_unparsed(field_name: str, unparsed: Mapping[str, str], errors: list[str]) -> bool:
    message = unparsed.get(field_name)
    if message is None:
        return False
    errors.append(message)
    return True


def _check_deal_unique_id(deal_unique_id: str | None, errors: list[str]) -> None:
    if deal_unique_id is None or not deal_unique_id.strip():
        errors.append("Deal Unique Id is required and cannot be empty")
    elif len(deal_unique_id) > MAX_DEAL_UNIQUE_ID_LENGTH:
        errors.append(f"Deal Unique Id must not exceed {MAX_DEAL_UNIQUE_ID_LENGTH} characters")
    elif deal_unique_id.strip() != deal_unique_id:
        errors.append("Deal Unique Id cannot have leading or trailing whitespace")


def _check_currency_code(code: str | None, field_name: str, errors: list[str]) -> None:
    if code is None or not code.strip():
        errors.append(f"{field_name} ISO Code is required")
        return

    normalized = normalize_currency_code(code)
    if len(normalized) != 3:
        errors.append(f"{field_name} ISO Code must be exactly 3 characters")
        return
    if not CURRENCY_CODE_PATTERN.match(normalized):
        errors.append(f"{field_name} ISO Code must be 3 uppercase letters (A-Z)")
        return

    if not is_common_currency(normalized):
        logger.debug(f"Currency code {normalized} is not in the common list, but format is valid")


def _check_currencies_differ(from_code: str | None, to_code: str | None, errors: list[str]) -> None:
    if from_code is None or to_code is None or not from_code.strip() or not to_code.strip():
        return
    if normalize_currency_code(from_code) == normalize_currency_code(to_code):
        errors.append("From Currency and To Currency must be different")


def _check_deal_timestamp(
    deal_timestamp: datetime | None,
    now: datetime,
    max_age_years: int,
    errors: list[str],
) -> None:
    if deal_timestamp is None:
        errors.append("Deal timestamp is required")
        return

    timestamp = _as_utc(deal_timestamp)
    reference = _as_utc(now)
    if timestamp > reference:
        errors.append("Deal timestamp cannot be in the future")
    if timestamp < _years_before(reference, max_age_years):
        errors.append(f"Deal timestamp is too old (more than {max_age_years} years)")


def _check_deal_amount(deal_amount: Decimal | None, max_amount: Decimal, errors: list[str]) -> None:
    if deal_amount is None:
        errors.append("Deal amount is required")
        return
    if deal_amount.is_nan():
        errors.append("Deal amount must be a number")
        return
    if deal_amount <= 0:
        errors.append("Deal amount must be greater than 0")
        return

    if deal_amount.is_finite() and _decimal_places(deal_amount) > MAX_AMOUNT_DECIMAL_PLACES:
        errors.append(f"Deal amount cannot have more than {MAX_AMOUNT_DECIMAL_PLACES} decimal places")
    if deal_amount > max_amount:
        errors.append("Deal amount exceeds maximum allowed value")


def _decimal_places(value: Decimal) -> int:
    """Number of fractional digits as written, e.g. 1.50 -> 2 and 1E+3 -> 0."""
    exponent = value.as_tuple().exponent
    assert isinstance(exponent, int)  # finite decimals only
    return max(0, -exponent)


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _years_before(value: datetime, years: int) -> datetime:
    """Same calendar date ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        return value.replace(year=value.year - years, day=28)
