"""Product aggregate.

Products are owned by the catalog; the availability engine only reads
their total stock.  Stock is a single pool shared across every date
range, so there is no per-unit identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import ValidationError


@dataclass
class Product:
    """A rentable product in the catalog."""

    id: str
    name: str
    quantity: int = 0  # total units owned, independent of dates

    def __post_init__(self) -> None:
        self._check_quantity(self.quantity)

    def set_stock(self, quantity: int) -> None:
        """Change the total number of units owned.

        Existing reservations are not touched.  Lowering stock below what
        is already reserved for some day leaves that day over-committed,
        which the availability math reports as zero free units.
        """
        self._check_quantity(quantity)
        self.quantity = quantity

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(
                f"Stock quantity must be an integer, got {type(quantity).__name__}"
            )
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
