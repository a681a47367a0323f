"""Pydantic v2 schemas for deal import operations."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DealRequest(BaseModel):
    """An incoming FX deal.

    Every field is optional at the type level so missing values are reported
    by the deal validator.  Payloads reach this model through
    ``parse_deal``, which turns a value that cannot be coerced (a
    non-numeric amount, an unparseable timestamp) into a violation on that
    record instead of a request-wide parse failure.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    deal_unique_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("deal_unique_id", "dealUniqueId"),
        description="Caller-supplied unique identifier",
    )
    from_currency_iso_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("from_currency_iso_code", "fromCurrencyIsoCode"),
        description="ISO 4217 code of the ordering currency",
    )
    to_currency_iso_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("to_currency_iso_code", "toCurrencyIsoCode"),
        description="ISO 4217 code of the target currency",
    )
    deal_timestamp: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("deal_timestamp", "dealTimestamp"),
        description="When the deal took place",
    )
    deal_amount: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("deal_amount", "dealAmount"),
        description="Deal amount in the ordering currency",
    )


class DealResponse(BaseModel):
    """A stored FX deal."""

    model_config = {"from_attributes": True}

    id: int
    deal_unique_id: str
    from_currency_iso_code: str
    to_currency_iso_code: str
    deal_timestamp: datetime
    deal_amount: Decimal
    created_at: datetime


class BulkDealRequest(BaseModel):
    """Request body for a batch import.

    Items are kept raw and parsed one by one, so a malformed record fails
    alone.  A missing or null list is reported by the importer as an empty
    batch.
    """

    deals: list[Any] | None = Field(default=None, description="Deal objects (snake_case or camelCase keys)")


class BulkDealResponse(BaseModel):
    """Per-batch import statistics."""

    model_config = {"from_attributes": True}

    total_received: int
    successfully_imported: int
    skipped_duplicates: int
    failed: int
    errors: list[str] = Field(default_factory=list)
    imported_deals: list[DealResponse] = Field(default_factory=list)
