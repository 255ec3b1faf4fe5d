"""Application service: Reserve Order Lines use case.

The checkout step that commits stock for every line of a paid (or cash)
order.  Mirrors what the storefront does after payment verification:

  Phase 1: check every line; abort the whole order before any write if
           one of them is short.
  Phase 2: reserve line by line through the atomic check-and-reserve.
           A line can still lose a race here (or two lines of the same
           product can add up past the stock), so on the first failure
           the reservations already made for this order are released
           again before the error is raised.
"""

from __future__ import annotations

import logging

from rentals.application.dto import RentalLineSpec, ReservationDTO
from rentals.application.failures import raise_for
from rentals.domain.exceptions import StorageError, ValidationError
from rentals.domain.model.availability import FailureReason
from rentals.domain.model.outcomes import ReservationRequest
from rentals.domain.model.reservation import Reservation
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_calculator import AvailabilityCalculator
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleManager

logger = logging.getLogger(__name__)


class ReserveOrderLinesHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)
        self._manager = ReservationLifecycleManager(product_repo, reservation_repo)

    def handle(self, order_id: str, lines: list[RentalLineSpec]) -> list[ReservationDTO]:
        if not order_id or not order_id.strip():
            raise ValidationError("Order ID is required")
        if not lines:
            raise ValidationError("Order must contain at least one line")

        # Rolling back deactivates the whole order, so it must start empty.
        if any(r.is_active for r in self._reservation_repo.list_by_order(order_id)):
            raise ValidationError(f"Order '{order_id}' already holds reservations")

        # Phase 1: check everything before writing anything
        for line in lines:
            result = self._calculator.check_availability(
                line.product_id, line.start_date, line.end_date, line.quantity
            )
            if not result.available:
                message = (
                    f"'{line.product_id}' is not available for the selected dates. "
                    f"{result.message}"
                )
                if result.reason is FailureReason.INSUFFICIENT_CAPACITY:
                    message += f" ({result.shortfall(line.quantity)} short)"
                raise_for(result.reason, message)

        # Phase 2: reserve, compensating on the first failure
        created: list[Reservation] = []
        for line in lines:
            outcome = self._manager.reserve_if_available(
                ReservationRequest(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    start_date=line.start_date,
                    end_date=line.end_date,
                    variant_id=line.variant_id,
                    order_id=order_id,
                )
            )
            if not outcome.success or outcome.reservation is None:
                self._roll_back(order_id, len(created))
                raise_for(
                    outcome.reason,
                    f"Could not reserve '{line.product_id}' for order '{order_id}': "
                    f"{outcome.error}",
                )
            created.append(outcome.reservation)

        return [ReservationDTO.from_domain(r) for r in created]

    def _roll_back(self, order_id: str, created: int) -> None:
        if not created:
            return
        logger.warning(
            "Rolling back %d reservation(s) of order %s after a failed line",
            created, order_id,
        )
        cancelled = self._manager.cancel_order_reservations(order_id)
        if not cancelled.success:
            raise StorageError(
                f"Order '{order_id}' is partially reserved and could not be rolled back: "
                f"{cancelled.error}"
            )
