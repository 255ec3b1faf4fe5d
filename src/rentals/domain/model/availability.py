"""Derived availability values.

These are never persisted; the calculator recomputes them from the
reservation store on every query.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class FailureReason(Enum):
    NOT_FOUND = "NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    INVALID_REQUEST = "INVALID_REQUEST"


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of a range check for one product.

    ``available_quantity`` is floored at zero even when stock is
    over-committed; ``reserved_quantity`` is the raw overlapping sum.
    """

    available: bool
    available_quantity: int
    total_quantity: int
    reserved_quantity: int
    message: str | None = None
    reason: FailureReason | None = None

    def shortfall(self, requested: int) -> int:
        """Units missing to satisfy *requested*; zero when it fits."""
        return max(0, requested - self.available_quantity)

    @staticmethod
    def unavailable(message: str, reason: FailureReason) -> AvailabilityResult:
        """A zero-capacity result for lookups that could not be computed."""
        return AvailabilityResult(
            available=False,
            available_quantity=0,
            total_quantity=0,
            reserved_quantity=0,
            message=message,
            reason=reason,
        )


@dataclass(frozen=True)
class DayAvailability:
    date: date
    available_quantity: int
