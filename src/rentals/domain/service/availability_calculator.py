"""Domain service: Availability Calculator.

Answers "how many units of this product are free?" for a date range or
for every day of a month.  Availability is pure arithmetic: the
product's total stock minus the quantities of active reservations whose
inclusive period overlaps the one being asked about.

Every operation here is read-only and never raises.  Availability
checks gate purchase flows, so a store failure degrades to "cannot
confirm availability" instead of an exception.
"""

from __future__ import annotations

import logging
from datetime import date

from rentals.domain.exceptions import StorageError, ValidationError
from rentals.domain.model.availability import (
    AvailabilityResult,
    DayAvailability,
    FailureReason,
)
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


class AvailabilityCalculator:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def check_availability(
        self,
        product_id: str,
        start_date: date,
        end_date: date,
        requested_quantity: int,
        exclude_order_id: str | None = None,
    ) -> AvailabilityResult:
        """Check whether *requested_quantity* units are free for the range.

        Pass *exclude_order_id* when re-checking an order that is being
        modified, so its own reservations do not count against it.
        """
        try:
            period = DateRange(start_date, end_date)
        except ValidationError as exc:
            return AvailabilityResult.unavailable(str(exc), FailureReason.INVALID_REQUEST)
        if requested_quantity <= 0:
            return AvailabilityResult.unavailable(
                "Requested quantity must be positive", FailureReason.INVALID_REQUEST
            )

        try:
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                return AvailabilityResult.unavailable(
                    "Product not found", FailureReason.NOT_FOUND
                )
            overlapping = self._reservation_repo.find_active_overlapping(
                product_id, period, exclude_order_id=exclude_order_id
            )
        except StorageError:
            logger.exception("Error checking availability for product %s", product_id)
            return AvailabilityResult.unavailable(
                "Error checking availability", FailureReason.STORAGE_FAILURE
            )

        reserved = sum(r.quantity for r in overlapping)
        free = max(0, product.quantity - reserved)  # over-committed stock reads as zero

        if free >= requested_quantity:
            return AvailabilityResult(
                available=True,
                available_quantity=free,
                total_quantity=product.quantity,
                reserved_quantity=reserved,
            )
        return AvailabilityResult(
            available=False,
            available_quantity=free,
            total_quantity=product.quantity,
            reserved_quantity=reserved,
            message=f"Only {free} available for the selected dates",
            reason=FailureReason.INSUFFICIENT_CAPACITY,
        )

    def get_available_dates(
        self, product_id: str, year: int, month: int
    ) -> list[DayAvailability]:
        """Free units on each day of a month (``month`` is 1-12).

        Reservations overlapping the month are loaded once and then
        evaluated day by day.  Returns an empty list when the product
        does not exist or the store cannot be read.
        """
        try:
            month_range = DateRange.for_month(year, month)
        except ValidationError as exc:
            logger.warning("Invalid calendar month %s-%s: %s", year, month, exc)
            return []

        try:
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                return []
            reservations = self._reservation_repo.find_active_overlapping(
                product_id, month_range
            )
        except StorageError:
            logger.exception("Error getting available dates for product %s", product_id)
            return []

        calendar: list[DayAvailability] = []
        for day in month_range.days():
            reserved = sum(r.quantity for r in reservations if r.blocks_day(day))
            calendar.append(
                DayAvailability(date=day, available_quantity=max(0, product.quantity - reserved))
            )
        return calendar

    def get_product_reservations(
        self, product_id: str, start_date: date, end_date: date
    ) -> list[Reservation]:
        """Active reservations overlapping the range, earliest first."""
        try:
            period = DateRange(start_date, end_date)
            reservations = self._reservation_repo.find_active_overlapping(
                product_id, period
            )
        except ValidationError as exc:
            logger.warning("Invalid reservation lookup for product %s: %s", product_id, exc)
            return []
        except StorageError:
            logger.exception("Error fetching reservations for product %s", product_id)
            return []

        return sorted(reservations, key=lambda r: (r.start_date, r.id or 0))
