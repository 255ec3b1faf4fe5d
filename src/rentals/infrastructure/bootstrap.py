"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from rentals.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from rentals.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)

DATA_DIR_ENV = "RENTALS_DATA_DIR"


def data_dir(override: str | Path | None = None) -> Path:
    """Resolve the data directory: explicit path, environment, then ./data."""
    if override:
        return Path(override)
    from_env = os.environ.get(DATA_DIR_ENV)
    if from_env:
        return Path(from_env)
    return Path.cwd() / "data"


def product_repository(directory: Path) -> JsonProductRepository:
    return JsonProductRepository(directory / "products.json")


def reservation_repository(directory: Path) -> JsonReservationRepository:
    return JsonReservationRepository(directory / "reservations.json")
