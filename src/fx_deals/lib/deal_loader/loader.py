"""Deal file readers for bulk import from the command line.

Supports a JSON array of deal objects (snake_case or camelCase keys) and
CSV files with one deal per row.  Each record is parsed on its own, so a
value that cannot be parsed marks only that record as malformed; rule
checks are left to the deal validator so every row is reported through the
same path.
"""

import json
from pathlib import Path

import pandas as pd
from loguru import logger

from fx_deals.lib.deal_validator import IncomingDeal, parse_deal

# CSV header (case-insensitive) → DealRequest field name
CSV_COLUMN_MAP: dict[str, str] = {
    "deal_unique_id": "deal_unique_id",
    "dealuniqueid": "deal_unique_id",
    "deal unique id": "deal_unique_id",
    "from_currency_iso_code": "from_currency_iso_code",
    "fromcurrencyisocode": "from_currency_iso_code",
    "from currency": "from_currency_iso_code",
    "to_currency_iso_code": "to_currency_iso_code",
    "tocurrencyisocode": "to_currency_iso_code",
    "to currency": "to_currency_iso_code",
    "deal_timestamp": "deal_timestamp",
    "dealtimestamp": "deal_timestamp",
    "deal timestamp": "deal_timestamp",
    "deal_amount": "deal_amount",
    "dealamount": "deal_amount",
    "deal amount": "deal_amount",
}


def load_deals(file_path: Path) -> list[IncomingDeal]:
    """Load deals from a JSON or CSV file, chosen by extension.

    Args:
        file_path: Path to a ``.json`` or ``.csv`` file.

    Returns:
        Parsed deals in file order.

    Raises:
        ValueError: If the extension is not supported or the file itself is malformed.
    """
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return load_deals_json(file_path)
    if suffix == ".csv":
        return load_deals_csv(file_path)
    msg = f"Unsupported deal file format: {suffix or '(none)'}"
    raise ValueError(msg)


def load_deals_json(file_path: Path) -> list[IncomingDeal]:
    """Load a JSON array of deals, or an object with a ``deals`` array."""
    payload = json.loads(file_path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("deals")
    if not isinstance(payload, list):
        msg = "JSON deal file must contain an array of deals or an object with a 'deals' array"
        raise ValueError(msg)
    deals = [parse_deal(item) for item in payload]
    logger.info(f"Loaded {len(deals)} deals from {file_path.name}")
    return deals


def load_deals_csv(file_path: Path) -> list[IncomingDeal]:
    """Load deals from a CSV file with a header row.

    All cells are read as strings; empty cells become missing values so
    the validator reports them as required-field violations.
    """
    df = pd.read_csv(file_path, dtype=str, keep_default_na=False, skipinitialspace=False)
    rename: dict[str, str] = {}
    for column in df.columns:
        field = CSV_COLUMN_MAP.get(str(column).strip().lower())
        if field is not None:
            rename[column] = field
        else:
            logger.debug(f"Ignoring unmapped deal CSV column: {column}")
    df = df.rename(columns=rename)[list(rename.values())]

    deals: list[IncomingDeal] = []
    for row in df.to_dict(orient="records"):
        values = {key: (value if value != "" else None) for key, value in row.items()}
        deals.append(parse_deal(values))
    logger.info(f"Loaded {len(deals)} deals from {file_path.name}")
    return deals
