"""Application service: Show Calendar use case (query).

Backs the per-day availability calendar on the product page.
"""

from __future__ import annotations

from rentals.domain.exceptions import EntityNotFoundError, StorageError
from rentals.domain.model.availability import DayAvailability
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_calculator import AvailabilityCalculator


class ShowCalendarHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._calculator = AvailabilityCalculator(product_repo, reservation_repo)

    def handle(self, product_id: str, year: int, month: int) -> list[DayAvailability]:
        """Free units per day for ``year``/``month`` (1-12).

        The calculator quietly returns an empty list when it cannot answer;
        here that becomes an error the caller can show.
        """
        period = DateRange.for_month(year, month)
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        days = self._calculator.get_available_dates(product_id, year, month)
        if len(days) != period.length:
            raise StorageError(f"Could not load availability for {period}")
        return days
