"""Typed errors raised while importing a deal.

Every error is scoped to the single record that produced it; none is
fatal to the process or to the batch the record belongs to.
"""

from collections.abc import Sequence


class DealImportError(Exception):
    """Base class for per-record import failures."""


class DealValidationError(DealImportError):
    """Raised when a deal breaks one or more validation rules.

    Args:
        violations: Human-readable rule violations, in rule order.
    """

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__(f"Validation failed: {'; '.join(self.violations)}")


class DuplicateDealError(DealImportError):
    """Raised when a deal's identifier is already persisted."""

    def __init__(self, deal_unique_id: str) -> None:
        self.deal_unique_id = deal_unique_id
        super().__init__(f"Deal with unique ID {deal_unique_id} already exists")


class DealPersistenceError(DealImportError):
    """Raised when the store fails to save a deal (constraint violation or I/O error)."""

    def __init__(self, deal_unique_id: str, reason: str) -> None:
        self.deal_unique_id = deal_unique_id
        self.reason = reason
        super().__init__(f"Failed to save deal: {reason}")
