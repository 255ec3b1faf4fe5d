"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rentals.domain.model.reservation import Reservation


@dataclass(frozen=True)
class RentalLineSpec:
    """Input: one cart line the customer wants to rent."""

    product_id: str
    quantity: int
    start_date: date
    end_date: date
    variant_id: str | None = None


@dataclass(frozen=True)
class ReservationDTO:
    """Output: a reservation as displayed to the user."""

    id: int
    product_id: str
    quantity: int
    start_date: str  # ISO, e.g. "2024-03-01"
    end_date: str
    status: str  # ACTIVE or RELEASED
    order_id: str | None
    quotation_id: str | None
    variant_id: str | None
    created_at: str

    @staticmethod
    def from_domain(reservation: Reservation) -> ReservationDTO:
        return ReservationDTO(
            id=reservation.id,  # type: ignore[arg-type]
            product_id=reservation.product_id,
            quantity=reservation.quantity,
            start_date=reservation.start_date.isoformat(),
            end_date=reservation.end_date.isoformat(),
            status="ACTIVE" if reservation.is_active else "RELEASED",
            order_id=reservation.order_id,
            quotation_id=reservation.quotation_id,
            variant_id=reservation.variant_id,
            created_at=reservation.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
