"""Deal validator library public API.

Provides per-record parsing and validation of incoming FX deals, plus
normalization of validated deals into their stored form.
"""

from fx_deals.lib.deal_validator.currencies import COMMON_CURRENCY_CODES, is_common_currency, normalize_currency_code
from fx_deals.lib.deal_validator.parsing import IncomingDeal, MalformedDeal, parse_deal, parse_deals
from fx_deals.lib.deal_validator.validator import (
    MAX_DEAL_AGE_YEARS,
    MAX_DEAL_AMOUNT,
    NormalizedDeal,
    format_record_error,
    normalize_deal,
    validate_deal,
    validate_deals,
)

__all__ = [
    "COMMON_CURRENCY_CODES",
    "MAX_DEAL_AGE_YEARS",
    "MAX_DEAL_AMOUNT",
    "IncomingDeal",
    "MalformedDeal",
    "NormalizedDeal",
    "format_record_error",
    "is_common_currency",
    "normalize_currency_code",
    "normalize_deal",
    "parse_deal",
    "parse_deals",
    "validate_deal",
    "validate_deals",
]
