"""Application service: Check Availability use case (query)."""

from __future__ import annotations

from datetime import date

from rentals.domain.model.availability import AvailabilityResult
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_calculator import AvailabilityCalculator


class CheckAvailabilityHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)

    def handle(
        self,
        product_id: str,
        start_date: date,
        end_date: date,
        quantity: int = 1,
        exclude_order_id: str | None = None,
    ) -> AvailabilityResult:
        return self._calculator.check_availability(
            product_id, start_date, end_date, quantity, exclude_order_id=exclude_order_id
        )
