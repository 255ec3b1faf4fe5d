"""Result values returned by the reservation lifecycle operations.

The lifecycle manager never raises across its public operations; callers
inspect ``success`` and decide whether to retry, abort the order or show
a message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rentals.domain.model.availability import AvailabilityResult, FailureReason
from rentals.domain.model.reservation import Reservation


@dataclass(frozen=True)
class ReservationRequest:
    """What the checkout workflow wants held."""

    product_id: str
    quantity: int
    start_date: date
    end_date: date
    variant_id: str | None = None
    order_id: str | None = None
    quotation_id: str | None = None


@dataclass(frozen=True)
class ReservationOutcome:
    success: bool
    reservation: Reservation | None = None
    error: str | None = None
    reason: FailureReason | None = None
    availability: AvailabilityResult | None = None  # set by the atomic path

    @staticmethod
    def ok(
        reservation: Reservation, availability: AvailabilityResult | None = None
    ) -> ReservationOutcome:
        return ReservationOutcome(True, reservation=reservation, availability=availability)

    @staticmethod
    def failed(
        error: str,
        reason: FailureReason,
        availability: AvailabilityResult | None = None,
    ) -> ReservationOutcome:
        return ReservationOutcome(False, error=error, reason=reason, availability=availability)


@dataclass(frozen=True)
class CancellationOutcome:
    success: bool
    released: int = 0  # reservations deactivated by this call
    error: str | None = None
    reason: FailureReason | None = None
