"""Abstract repository for Reservation aggregate.

Implementations raise ``StorageError`` when the underlying store cannot
be read or written; the domain services turn that into failure results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import DateRange


class ReservationRepository(ABC):

    @abstractmethod
    def find_active_overlapping(
        self,
        product_id: str,
        period: DateRange,
        exclude_order_id: str | None = None,
    ) -> list[Reservation]:
        """Return active reservations of a product overlapping *period*.

        Reservations owned by *exclude_order_id* are left out.
        """

    @abstractmethod
    def list_by_order(self, order_id: str) -> list[Reservation]:
        """Return every reservation of an order, active or not."""

    @abstractmethod
    def add(self, reservation: Reservation) -> Reservation:
        """Insert a new reservation, assigning its ID."""

    @abstractmethod
    def deactivate_by_order(self, order_id: str, at: datetime) -> int:
        """Deactivate every active reservation of an order.

        Returns how many reservations changed state.
        """

    @abstractmethod
    def locked(self, product_id: str) -> AbstractContextManager[None]:
        """Serialise check-then-insert sequences for one product.

        Reads and writes issued while the lock is held must see each
        other, so a recomputed availability sum stays valid until the
        insert that depends on it.
        """
