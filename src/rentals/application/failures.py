"""Map engine failure results onto domain exceptions.

The engine reports failures as values; use-case handlers surface them
the same way the rest of the application does, as DomainException
subclasses the CLI already knows how to display.
"""

from __future__ import annotations

from typing import NoReturn

from rentals.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    StorageError,
    ValidationError,
)
from rentals.domain.model.availability import FailureReason

_EXCEPTIONS: dict[FailureReason, type[DomainException]] = {
    FailureReason.NOT_FOUND: EntityNotFoundError,
    FailureReason.STORAGE_FAILURE: StorageError,
    FailureReason.INSUFFICIENT_CAPACITY: ValidationError,
    FailureReason.INVALID_REQUEST: ValidationError,
}


def raise_for(reason: FailureReason | None, message: str) -> NoReturn:
    exc_type = _EXCEPTIONS[reason] if reason is not None else ValidationError
    raise exc_type(message)
