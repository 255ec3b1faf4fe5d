"""Application service: Cancel Order Reservations use case.

Called whenever an order moves to a cancelled or refunded state, so the
dates it held become available to other customers again.
"""

from __future__ import annotations

from rentals.application.failures import raise_for
from rentals.domain.exceptions import ValidationError
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleManager


class CancelOrderReservationsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._manager = ReservationLifecycleManager(product_repo, reservation_repo)

    def handle(self, order_id: str) -> int:
        """Release the order's holds; returns how many were still active."""
        if not order_id or not order_id.strip():
            raise ValidationError("Order ID is required")

        outcome = self._manager.cancel_order_reservations(order_id)
        if not outcome.success:
            raise_for(outcome.reason, outcome.error or "Failed to cancel reservations")
        return outcome.released
