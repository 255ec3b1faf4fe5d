"""Application service: Set Stock use case."""

from __future__ import annotations

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.repository.product_repository import ProductRepository


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> Product:
        """Set the total number of units owned for a product.

        Reservations are date-bound and stay untouched; availability is
        recomputed from the new total on the next query.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        product.set_stock(quantity)
        self._product_repo.save(product)
        return product
