"""JSON-file-backed implementation of ReservationRepository.

Every mutation rewrites the whole file, so mutations run under the
file's exclusive lock (see ``json_file.file_lock``), which holds across
threads and processes.  ``locked()`` hands out the same lock, which makes
a check-then-insert sequence atomic with respect to every other writer,
including concurrent CLI invocations.  Readers do not lock; files are
replaced atomically so they never observe a half-written document.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from datetime import date, datetime
from pathlib import Path

from rentals.domain.exceptions import StorageError, ValidationError
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.infrastructure.persistence.json_file import file_lock, write_atomically


class JsonReservationRepository(ReservationRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = file_lock(file_path)
        self._ensure_file()

    # --- ReservationRepository interface --------------------------------------

    def find_active_overlapping(
        self,
        product_id: str,
        period: DateRange,
        exclude_order_id: str | None = None,
    ) -> list[Reservation]:
        result: list[Reservation] = []
        for raw in self._load_raw():
            if raw.get("product_id") != product_id or not raw.get("is_active"):
                continue
            if exclude_order_id is not None and raw.get("order_id") == exclude_order_id:
                continue
            reservation = self._to_domain(raw)
            if reservation.blocks(period):
                result.append(reservation)
        return result

    def list_by_order(self, order_id: str) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw.get("order_id") == order_id
        ]

    def add(self, reservation: Reservation) -> Reservation:
        with self._exclusive():
            records = self._load_raw()
            reservation.id = max((r.get("id") or 0 for r in records), default=0) + 1
            records.append(self._to_raw(reservation))
            self._persist_raw(records)
        return reservation

    def deactivate_by_order(self, order_id: str, at: datetime) -> int:
        with self._exclusive():
            records = self._load_raw()
            changed = 0
            for i, raw in enumerate(records):
                if raw.get("order_id") != order_id:
                    continue
                reservation = self._to_domain(raw)
                if reservation.deactivate(at):
                    records[i] = self._to_raw(reservation)
                    changed += 1
            if changed:
                self._persist_raw(records)
        return changed

    @contextmanager
    def locked(self, product_id: str) -> Iterator[None]:
        # One lock per file: whole-file rewrites make finer locks unsafe.
        with self._exclusive():
            yield

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "product_id": reservation.product_id,
            "variant_id": reservation.variant_id,
            "order_id": reservation.order_id,
            "quotation_id": reservation.quotation_id,
            "quantity": reservation.quantity,
            "start_date": reservation.start_date.isoformat(),
            "end_date": reservation.end_date.isoformat(),
            "is_active": reservation.is_active,
            "created_at": reservation.created_at.isoformat(),
            "released_at": (
                reservation.released_at.isoformat() if reservation.released_at else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        try:
            released_at = raw.get("released_at")
            return Reservation(
                id=raw["id"],
                product_id=raw["product_id"],
                quantity=raw["quantity"],
                period=DateRange(
                    date.fromisoformat(raw["start_date"]),
                    date.fromisoformat(raw["end_date"]),
                ),
                variant_id=raw.get("variant_id"),
                order_id=raw.get("order_id"),
                quotation_id=raw.get("quotation_id"),
                is_active=raw["is_active"],
                created_at=datetime.fromisoformat(raw["created_at"]),
                released_at=datetime.fromisoformat(released_at) if released_at else None,
            )
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise StorageError(f"Malformed reservation record {raw.get('id')!r}: {exc}") from exc

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read reservations from {self._file_path}: {exc}") from exc
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise StorageError(f"{self._file_path} does not hold a list of reservations")
        return records

    def _persist_raw(self, records: list[dict]) -> None:
        try:
            write_atomically(self._file_path, records)
        except OSError as exc:
            raise StorageError(f"Cannot write reservations to {self._file_path}: {exc}") from exc

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with ExitStack() as stack:
            try:
                stack.enter_context(self._lock)
            except OSError as exc:
                raise StorageError(f"Cannot lock {self._file_path}: {exc}") from exc
            yield

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create {self._file_path}: {exc}") from exc
        with self._exclusive():
            if self._file_path.exists():
                return
            try:
                write_atomically(self._file_path, [])
            except OSError as exc:
                raise StorageError(f"Cannot create {self._file_path}: {exc}") from exc
