"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import json
from pathlib import Path

from rentals.domain.exceptions import StorageError, ValidationError
from rentals.domain.model.product import Product
from rentals.domain.repository.product_repository import ProductRepository
from rentals.infrastructure.persistence.json_file import file_lock, write_atomically


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = file_lock(file_path)
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        try:
            with self._lock:
                products = self._load()
                products[product.id] = product
                self._persist(products)
        except OSError as exc:
            raise StorageError(f"Cannot lock {self._file_path}: {exc}") from exc

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return {
                item["id"]: Product(
                    id=item["id"],
                    name=item["name"],
                    quantity=item["quantity"],
                )
                for item in raw
            }
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as exc:
            raise StorageError(f"Cannot read products from {self._file_path}: {exc}") from exc

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [
            {"id": p.id, "name": p.name, "quantity": p.quantity}
            for p in products.values()
        ]
        try:
            write_atomically(self._file_path, raw)
        except OSError as exc:
            raise StorageError(f"Cannot write products to {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                if not self._file_path.exists():
                    write_atomically(self._file_path, [])
        except OSError as exc:
            raise StorageError(f"Cannot create {self._file_path}: {exc}") from exc
