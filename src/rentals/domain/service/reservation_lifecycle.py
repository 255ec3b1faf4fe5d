"""Domain service: Reservation Lifecycle Manager.

The only writer of the reservation store.  Reservations are created
when an order or quotation commits stock for a period, and deactivated
(never deleted) when the order is cancelled or refunded.

Two creation paths exist:

``create_reservation``
    Records the hold unconditionally.  The caller is expected to have
    checked availability first; two concurrent callers can both pass
    that check and oversell the product.

``reserve_if_available``
    Recomputes availability and inserts under the store's per-product
    lock, so check and write behave as one step.  Checkout flows should
    use this one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from rentals.domain.exceptions import StorageError, ValidationError
from rentals.domain.model.availability import FailureReason
from rentals.domain.model.outcomes import (
    CancellationOutcome,
    ReservationOutcome,
    ReservationRequest,
)
from rentals.domain.model.reservation import Reservation
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_calculator import AvailabilityCalculator

logger = logging.getLogger(__name__)


class ReservationLifecycleManager:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)

    def create_reservation(self, request: ReservationRequest) -> ReservationOutcome:
        """Record an active reservation without re-checking capacity."""
        try:
            reservation = self._build(request)
        except ValidationError as exc:
            return ReservationOutcome.failed(str(exc), FailureReason.INVALID_REQUEST)

        try:
            if self._product_repo.get_by_id(request.product_id) is None:
                return ReservationOutcome.failed(
                    f"Product '{request.product_id}' not found", FailureReason.NOT_FOUND
                )
            saved = self._reservation_repo.add(reservation)
        except StorageError:
            logger.exception("Error creating reservation for product %s", request.product_id)
            return ReservationOutcome.failed(
                "Failed to create reservation", FailureReason.STORAGE_FAILURE
            )

        logger.info(
            "Reserved %d x %s for %s (order=%s, quotation=%s)",
            saved.quantity, saved.product_id, saved.period,
            saved.order_id, saved.quotation_id,
        )
        return ReservationOutcome.ok(saved)

    def reserve_if_available(self, request: ReservationRequest) -> ReservationOutcome:
        """Check capacity and record the reservation as one step."""
        try:
            reservation = self._build(request)
        except ValidationError as exc:
            return ReservationOutcome.failed(str(exc), FailureReason.INVALID_REQUEST)

        try:
            with self._reservation_repo.locked(request.product_id):
                availability = self._calculator.check_availability(
                    request.product_id,
                    request.start_date,
                    request.end_date,
                    request.quantity,
                )
                if not availability.available:
                    return ReservationOutcome.failed(
                        availability.message or "Not available for the selected dates",
                        availability.reason or FailureReason.INSUFFICIENT_CAPACITY,
                        availability=availability,
                    )
                saved = self._reservation_repo.add(reservation)
        except StorageError:
            logger.exception("Error creating reservation for product %s", request.product_id)
            return ReservationOutcome.failed(
                "Failed to create reservation", FailureReason.STORAGE_FAILURE
            )

        logger.info(
            "Reserved %d x %s for %s (order=%s, %d left)",
            saved.quantity, saved.product_id, saved.period, saved.order_id,
            availability.available_quantity - saved.quantity,
        )
        return ReservationOutcome.ok(saved, availability=availability)

    def cancel_order_reservations(self, order_id: str) -> CancellationOutcome:
        """Deactivate every reservation of an order.

        Idempotent: a second call succeeds and releases nothing.  The
        rows stay in the store for audit.
        """
        try:
            released = self._reservation_repo.deactivate_by_order(
                order_id, datetime.now(timezone.utc)
            )
        except StorageError:
            logger.exception("Error cancelling reservations for order %s", order_id)
            return CancellationOutcome(
                success=False,
                error="Failed to cancel reservations",
                reason=FailureReason.STORAGE_FAILURE,
            )

        if released:
            logger.info("Released %d reservation(s) for order %s", released, order_id)
        return CancellationOutcome(success=True, released=released)

    def get_order_reservations(self, order_id: str) -> list[Reservation]:
        """Every reservation an order ever held, oldest first."""
        try:
            reservations = self._reservation_repo.list_by_order(order_id)
        except StorageError:
            logger.exception("Error fetching reservations for order %s", order_id)
            return []
        return sorted(reservations, key=lambda r: r.id or 0)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _build(request: ReservationRequest) -> Reservation:
        return Reservation.create(
            product_id=request.product_id,
            quantity=request.quantity,
            start_date=request.start_date,
            end_date=request.end_date,
            variant_id=request.variant_id,
            order_id=request.order_id,
            quotation_id=request.quotation_id,
        )
