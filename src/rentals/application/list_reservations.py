"""Application service: List Reservations use case (query)."""

from __future__ import annotations

from datetime import date

from rentals.application.dto import ReservationDTO
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_calculator import AvailabilityCalculator
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleManager


class ListReservationsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)
        self._manager = ReservationLifecycleManager(product_repo, reservation_repo)

    def for_product(
        self, product_id: str, start_date: date, end_date: date
    ) -> list[ReservationDTO]:
        """Active holds on a product during the range, earliest first."""
        period = DateRange(start_date, end_date)
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        reservations = self._calculator.get_product_reservations(
            product_id, period.start, period.end
        )
        return [ReservationDTO.from_domain(r) for r in reservations]

    def for_order(self, order_id: str) -> list[ReservationDTO]:
        """Every hold the order ever had, including released ones."""
        return [
            ReservationDTO.from_domain(r)
            for r in self._manager.get_order_reservations(order_id)
        ]
