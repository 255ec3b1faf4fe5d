"""Reservation aggregate: a committed hold on units of a product.

A reservation ties N units of one product to an inclusive date range,
optionally on behalf of an order or a quotation.  Reservations are never
deleted by the normal flow: cancelling an order only deactivates them,
so released holds stay queryable for audit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import DateRange, Quantity


@dataclass
class Reservation:
    """Aggregate root for a date-bound stock hold.

    Use the ``Reservation.create()`` factory for new reservations; it
    enforces all business rules.  The ``__init__`` is intentionally simple
    so the repository can reconstitute persisted rows without
    re-validating.

    Invariants:
    - ``quantity`` is positive
    - ``period.start <= period.end``
    - once inactive, a reservation never becomes active again
    """

    id: int | None
    product_id: str
    quantity: int
    period: DateRange
    variant_id: str | None = None
    order_id: str | None = None
    quotation_id: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    released_at: datetime | None = None

    # --- Factory (used for NEW reservations only) -----------------------------

    @staticmethod
    def create(
        product_id: str,
        quantity: int,
        start_date: date,
        end_date: date,
        variant_id: str | None = None,
        order_id: str | None = None,
        quotation_id: str | None = None,
    ) -> Reservation:
        """Create a new active reservation, enforcing all invariants."""
        if not product_id:
            raise ValidationError("Product ID is required")

        return Reservation(
            id=None,
            product_id=product_id,
            quantity=Quantity(quantity).value,
            period=DateRange(start_date, end_date),
            variant_id=variant_id or None,
            order_id=order_id or None,
            quotation_id=quotation_id or None,
        )

    # --- State transitions ----------------------------------------------------

    def deactivate(self, at: datetime | None = None) -> bool:
        """Release the hold.  Returns False if it was already released."""
        if not self.is_active:
            return False
        self.is_active = False
        self.released_at = at or datetime.now(timezone.utc)
        return True

    # --- Queries --------------------------------------------------------------

    @property
    def start_date(self) -> date:
        return self.period.start

    @property
    def end_date(self) -> date:
        return self.period.end

    def blocks(self, period: DateRange) -> bool:
        """True if this reservation counts against stock during *period*."""
        return self.is_active and self.period.overlaps(period)

    def blocks_day(self, day: date) -> bool:
        return self.is_active and self.period.contains(day)
