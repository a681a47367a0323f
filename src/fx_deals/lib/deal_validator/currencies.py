"""ISO 4217 currency code format and the list of commonly traded codes."""

import re

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

# Advisory only: well-formed codes outside this set are accepted.
COMMON_CURRENCY_CODES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "AUD",
        "CAD",
        "CHF",
        "CNY",
        "HKD",
        "NZD",
        "SEK",
        "NOK",
        "DKK",
        "PLN",
        "ZAR",
        "SGD",
        "MXN",
        "INR",
        "BRL",
        "KRW",
    }
)


def normalize_currency_code(code: str) -> str:
    """Trim and upper-case a currency code."""
    return code.strip().upper()


def is_common_currency(code: str) -> bool:
    """Return True if the normalized code is one of the commonly traded currencies."""
    return normalize_currency_code(code) in COMMON_CURRENCY_CODES
