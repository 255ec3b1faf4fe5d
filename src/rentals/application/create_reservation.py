"""Application service: Create Reservation use case.

Back-office entry point for holding stock outside checkout, e.g. for an
accepted quotation.  Capacity is checked and committed in one step
unless ``atomic=False`` is passed, which records the hold
unconditionally.
"""

from __future__ import annotations

from rentals.application.dto import ReservationDTO
from rentals.application.failures import raise_for
from rentals.domain.model.outcomes import ReservationRequest
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleManager


class CreateReservationHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._manager = ReservationLifecycleManager(product_repo, reservation_repo)

    def handle(self, request: ReservationRequest, atomic: bool = True) -> ReservationDTO:
        if atomic:
            outcome = self._manager.reserve_if_available(request)
        else:
            outcome = self._manager.create_reservation(request)

        if not outcome.success or outcome.reservation is None:
            raise_for(outcome.reason, outcome.error or "Failed to create reservation")
        return ReservationDTO.from_domain(outcome.reservation)
