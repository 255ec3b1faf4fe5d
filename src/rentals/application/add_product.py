"""Application service: Add Product use case."""

from __future__ import annotations

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.product import Product
from rentals.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, quantity: int, product_id: str | None = None) -> Product:
        """Add a new rentable product with its total stock."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        all_products = self._product_repo.list_all()
        if any(p.name.lower() == name.strip().lower() for p in all_products):
            raise ValidationError(f"Product '{name}' already exists")

        if product_id:
            if self._product_repo.get_by_id(product_id) is not None:
                raise ValidationError(f"Product ID '{product_id}' already exists")
        else:
            # Auto-assign the next numeric ID
            numeric = [int(p.id) for p in all_products if p.id.isdigit()]
            product_id = str(max(numeric, default=0) + 1)

        product = Product(id=product_id, name=name.strip(), quantity=quantity)
        self._product_repo.save(product)
        return product
