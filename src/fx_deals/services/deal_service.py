"""Deal service: orchestrates validation, duplicate detection, and per-record persistence.

Every call to :func:`import_deal` is an independent unit of work: it
validates, checks the store for an existing identifier, and saves through
a store call that commits on its own.  :func:`import_deals_bulk` folds
each record's outcome into an immutable :class:`BatchResult`; no record's
failure is ever rolled back into, or raised out of, the batch.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from fastapi import status
from loguru import logger

from fx_deals.lib.deal_validator import (
    MAX_DEAL_AGE_YEARS,
    MAX_DEAL_AMOUNT,
    IncomingDeal,
    format_record_error,
    normalize_deal,
    validate_deal,
)
from fx_deals.schemas.deal import BulkDealResponse, DealRequest, DealResponse
from fx_deals.services.deal_store import DealStore
from fx_deals.services.errors import DealPersistenceError, DealValidationError, DuplicateDealError

IN_BATCH_DUPLICATE_MESSAGE = "Duplicate deal ID in the same batch"
EMPTY_BATCH_MESSAGE = "Deals list cannot be null or empty"


@dataclass(frozen=True)
class ValidationLimits:
    """Configurable bounds handed to the deal validator."""

    max_amount: Decimal = MAX_DEAL_AMOUNT
    max_age_years: int = MAX_DEAL_AGE_YEARS


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch import.

    Invariants: ``imported + duplicates + failed == total_received`` and
    ``len(errors) == duplicates + failed``.
    """

    total_received: int
    imported: int = 0
    duplicates: int = 0
    failed: int = 0
    errors: tuple[str, ...] = ()
    imported_deals: tuple[DealResponse, ...] = ()
    seen_deal_ids: frozenset[str] = field(default=frozenset(), repr=False)

    def with_imported(self, deal: DealResponse) -> "BatchResult":
        return replace(
            self,
            imported=self.imported + 1,
            imported_deals=(*self.imported_deals, deal),
            seen_deal_ids=self.seen_deal_ids | {deal.deal_unique_id},
        )

    def with_duplicate(self, error: str) -> "BatchResult":
        return replace(self, duplicates=self.duplicates + 1, errors=(*self.errors, error))

    def with_failure(self, error: str) -> "BatchResult":
        return replace(self, failed=self.failed + 1, errors=(*self.errors, error))

    def status_code(self) -> int:
        """HTTP status summarizing the batch: all imported, some imported, or none."""
        if self.failed == 0 and self.duplicates == 0:
            return status.HTTP_201_CREATED
        if self.imported > 0:
            return status.HTTP_206_PARTIAL_CONTENT
        return status.HTTP_400_BAD_REQUEST

    def to_response(self) -> BulkDealResponse:
        return BulkDealResponse(
            total_received=self.total_received,
            successfully_imported=self.imported,
            skipped_duplicates=self.duplicates,
            failed=self.failed,
            errors=list(self.errors),
            imported_deals=list(self.imported_deals),
        )


async def import_deal(
    store: DealStore,
    request: IncomingDeal,
    *,
    limits: ValidationLimits | None = None,
    now: datetime | None = None,
) -> DealResponse:
    """Validate and persist a single deal.

    Args:
        store: Deal persistence boundary.
        request: The incoming deal.
        limits: Amount and age bounds (defaults to the standard limits).
        now: Reference time for timestamp validation.

    Returns:
        The stored deal, including its store-assigned id and creation timestamp.

    Raises:
        DealValidationError: If the deal breaks any validation rule; the store is not touched.
        DuplicateDealError: If the identifier is already persisted; nothing is written.
        DealPersistenceError: If the store fails to save the deal.
    """
    limits = limits or ValidationLimits()
    deal_id = request.deal_unique_id if request is not None else None
    logger.info(f"Importing deal with unique ID: {deal_id}")

    violations = validate_deal(request, now=now, max_amount=limits.max_amount, max_age_years=limits.max_age_years)
    if violations:
        logger.error(f"Validation failed for deal {deal_id}: {'; '.join(violations)}")
        raise DealValidationError(violations)

    assert isinstance(request, DealRequest)  # validate_deal rejects None and malformed records
    normalized = normalize_deal(request)

    if await store.exists(normalized.deal_unique_id):
        logger.warning(f"Deal with unique ID {normalized.deal_unique_id} already exists, skipping import")
        raise DuplicateDealError(normalized.deal_unique_id)

    try:
        saved = await store.save(normalized)
    except DealPersistenceError:
        logger.exception(f"Error saving deal {normalized.deal_unique_id}")
        raise
    except Exception as exc:
        logger.exception(f"Error saving deal {normalized.deal_unique_id}")
        raise DealPersistenceError(normalized.deal_unique_id, str(exc)) from exc

    logger.info(f"Successfully imported deal with unique ID: {saved.deal_unique_id}")
    return DealResponse.model_validate(saved)


async def import_deals_bulk(
    store: DealStore,
    requests: Sequence[IncomingDeal] | None,
    *,
    limits: ValidationLimits | None = None,
    now: datetime | None = None,
) -> BatchResult:
    """Import a batch of deals, each in its own unit of work.

    Records are processed in input order.  An identifier already imported
    earlier in the same batch is reported as an in-batch duplicate without
    touching the store.  Only successfully imported identifiers count as
    seen, so a record that failed validation does not shadow a later retry
    of the same identifier, and a store duplicate is reported again if it
    recurs.

    Args:
        store: Deal persistence boundary.
        requests: The incoming deals.
        limits: Amount and age bounds (defaults to the standard limits).
        now: Reference time for timestamp validation.

    Returns:
        The batch statistics, errors, and imported deals.

    Raises:
        DealValidationError: If the batch is empty or missing.
    """
    if not requests:
        logger.warning("Rejected bulk import with no deals")
        raise DealValidationError([EMPTY_BATCH_MESSAGE])

    logger.info(f"Starting bulk import of {len(requests)} deals")
    result = BatchResult(total_received=len(requests))
    for index, request in enumerate(requests):
        result = await _import_batch_record(store, result, index, request, limits=limits, now=now)

    logger.bind(
        json_output=True,
        event="deal_batch_imported",
        total_received=result.total_received,
        imported=result.imported,
        duplicates=result.duplicates,
        failed=result.failed,
        imported_deal_ids=[deal.deal_unique_id for deal in result.imported_deals],
    ).info(
        f"Bulk import completed. Total: {result.total_received}, Imported: {result.imported}, "
        f"Duplicates: {result.duplicates}, Failed: {result.failed}"
    )
    return result


async def _import_batch_record(
    store: DealStore,
    result: BatchResult,
    index: int,
    request: IncomingDeal,
    *,
    limits: ValidationLimits | None,
    now: datetime | None,
) -> BatchResult:
    """Import one record of a batch and fold its outcome into a new BatchResult."""
    deal_id = request.deal_unique_id if request is not None else None

    if deal_id is not None and deal_id in result.seen_deal_ids:
        error = format_record_error(index, request, IN_BATCH_DUPLICATE_MESSAGE)
        logger.warning(error)
        return result.with_failure(error)

    try:
        imported = await import_deal(store, request, limits=limits, now=now)
    except DuplicateDealError as exc:
        error = format_record_error(index, request, str(exc))
        logger.warning(error)
        return result.with_duplicate(error)
    except DealValidationError as exc:
        error = format_record_error(index, request, str(exc))
        logger.warning(error)
        return result.with_failure(error)
    except DealPersistenceError as exc:
        # import_deal already logged the traceback
        error = format_record_error(index, request, f"Unexpected error - {exc}")
        logger.error(error)
        return result.with_failure(error)
    except Exception as exc:
        error = format_record_error(index, request, f"Unexpected error - {exc}")
        logger.exception(f"Unexpected error importing deal[{index}] {deal_id}")
        return result.with_failure(error)

    logger.debug(f"Successfully imported deal[{index}]: {deal_id}")
    return result.with_imported(imported)


async def get_all_deals(store: DealStore) -> list[DealResponse]:
    """Return every stored deal, ordered by id."""
    logger.debug("Retrieving all deals")
    return [DealResponse.model_validate(deal) for deal in await store.find_all()]


async def get_deal_by_unique_id(store: DealStore, deal_unique_id: str) -> DealResponse | None:
    """Return the stored deal with this identifier, or None if it does not exist."""
    logger.debug(f"Retrieving deal with unique ID: {deal_unique_id}")
    deal = await store.find_by_unique_id(deal_unique_id)
    if deal is None:
        return None
    return DealResponse.model_validate(deal)
