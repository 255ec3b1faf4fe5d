"""Tests for the JSON-file-backed repositories."""

import json
import multiprocessing
import queue
from datetime import date, datetime, timezone

import pytest

from rentals.domain.exceptions import StorageError
from rentals.domain.model.outcomes import ReservationRequest
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import DateRange
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleManager
from rentals.infrastructure.bootstrap import product_repository, reservation_repository
from rentals.infrastructure.persistence.json_product_repository import JsonProductRepository
from rentals.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)


def _reservation(product_id: str, qty: int, start: str, end: str, order_id: str | None = None):
    return Reservation.create(
        product_id, qty, date.fromisoformat(start), date.fromisoformat(end), order_id=order_id
    )


class TestJsonReservationRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "reservations.json"
        JsonReservationRepository(path)
        assert json.loads(path.read_text()) == []

    def test_add_assigns_ids_and_persists(self, tmp_path):
        path = tmp_path / "reservations.json"
        repo = JsonReservationRepository(path)

        first = repo.add(_reservation("p1", 2, "2024-03-01", "2024-03-03", order_id="A"))
        second = repo.add(_reservation("p1", 1, "2024-03-05", "2024-03-06"))

        assert (first.id, second.id) == (1, 2)
        [reloaded] = JsonReservationRepository(path).list_by_order("A")
        assert reloaded.period == DateRange.of("2024-03-01", "2024-03-03")
        assert reloaded.order_id == "A"
        assert reloaded.is_active

    def test_find_active_overlapping(self, tmp_path):
        repo = JsonReservationRepository(tmp_path / "reservations.json")
        repo.add(_reservation("p1", 1, "2024-01-01", "2024-01-05", order_id="A"))
        repo.add(_reservation("p1", 1, "2024-01-10", "2024-01-15", order_id="B"))
        repo.add(_reservation("p2", 1, "2024-01-01", "2024-01-05"))

        found = repo.find_active_overlapping("p1", DateRange.of("2024-01-05", "2024-01-10"))
        excluded = repo.find_active_overlapping(
            "p1", DateRange.of("2024-01-05", "2024-01-10"), exclude_order_id="A"
        )

        assert sorted(r.order_id for r in found) == ["A", "B"]
        assert [r.order_id for r in excluded] == ["B"]

    def test_deactivate_by_order_keeps_rows(self, tmp_path):
        path = tmp_path / "reservations.json"
        repo = JsonReservationRepository(path)
        repo.add(_reservation("p1", 1, "2024-01-01", "2024-01-05", order_id="A"))
        repo.add(_reservation("p1", 1, "2024-02-01", "2024-02-05", order_id="A"))
        at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

        assert repo.deactivate_by_order("A", at) == 2
        assert repo.deactivate_by_order("A", at) == 0

        rows = json.loads(path.read_text())
        assert len(rows) == 2
        assert all(row["is_active"] is False for row in rows)
        assert repo.list_by_order("A")[0].released_at == at
        assert repo.find_active_overlapping("p1", DateRange.of("2024-01-01", "2024-12-31")) == []

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "reservations.json"
        path.write_text("{not json")
        repo = JsonReservationRepository(path)

        with pytest.raises(StorageError, match="Cannot read reservations"):
            repo.list_by_order("A")

    def test_wrong_shape_raises_storage_error(self, tmp_path):
        path = tmp_path / "reservations.json"
        path.write_text('{"id": 1}')
        repo = JsonReservationRepository(path)

        with pytest.raises(StorageError, match="does not hold a list"):
            repo.list_by_order("A")

    def test_malformed_record_raises_storage_error(self, tmp_path):
        path = tmp_path / "reservations.json"
        path.write_text(json.dumps([{"id": 1, "product_id": "p1", "is_active": True}]))
        repo = JsonReservationRepository(path)

        with pytest.raises(StorageError, match="Malformed reservation record 1"):
            repo.find_active_overlapping("p1", DateRange.of("2024-01-01", "2024-01-02"))

    def test_locked_is_reentrant_with_add(self, tmp_path):
        repo = JsonReservationRepository(tmp_path / "reservations.json")

        with repo.locked("p1"):
            repo.add(_reservation("p1", 1, "2024-01-01", "2024-01-05"))

        assert len(repo.find_active_overlapping("p1", DateRange.of("2024-01-01", "2024-01-05"))) == 1

    def test_lock_is_shared_between_instances_of_one_file(self, tmp_path):
        path = tmp_path / "reservations.json"
        outer, inner = JsonReservationRepository(path), JsonReservationRepository(path)

        with outer.locked("p1"):
            inner.add(_reservation("p1", 1, "2024-01-01", "2024-01-05"))

        assert (tmp_path / "reservations.json.lock").exists()
        assert len(json.loads(path.read_text())) == 1


class TestJsonProductRepository:

    def test_round_trip(self, tmp_path):
        path = tmp_path / "products.json"
        JsonProductRepository(path).save(Product(id="1", name="Tent", quantity=3))

        product = JsonProductRepository(path).get_by_id("1")

        assert product == Product(id="1", name="Tent", quantity=3)

    def test_invalid_stock_raises_storage_error(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{"id": "1", "name": "Tent", "quantity": -1}]))

        with pytest.raises(StorageError, match="Cannot read products"):
            JsonProductRepository(path).list_all()

    def test_round_trip_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "products.json"
        repo = JsonProductRepository(path)
        repo.save(Product(id="1", name="Tent", quantity=3))
        repo.save(Product(id="2", name="Stove", quantity=1))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["products.json", "products.json.lock"]
        assert [p["id"] for p in json.loads(path.read_text())] == ["1", "2"]


def _reserve_one_unit(directory, gate, results):
    gate.wait(timeout=30)
    manager = ReservationLifecycleManager(
        product_repository(directory), reservation_repository(directory)
    )
    outcome = manager.reserve_if_available(
        ReservationRequest(
            product_id="cam",
            quantity=1,
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 3),
        )
    )
    results.put(outcome.success)


@pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(),
    reason="needs fork-based multiprocessing",
)
class TestCrossProcessReservations:

    WORKERS = 6
    ROUNDS = 5

    def test_concurrent_processes_never_oversell(self, tmp_path):
        ctx = multiprocessing.get_context("fork")

        for round_no in range(self.ROUNDS):
            directory = tmp_path / f"round-{round_no}"
            product_repository(directory).save(Product(id="cam", name="Camera", quantity=1))
            gate = ctx.Barrier(self.WORKERS)
            results = ctx.Queue()
            workers = [
                ctx.Process(target=_reserve_one_unit, args=(directory, gate, results))
                for _ in range(self.WORKERS)
            ]
            for worker in workers:
                worker.start()
            try:
                outcomes = [results.get(timeout=60) for _ in workers]
            except queue.Empty:
                pytest.fail("a reserving process did not report back")
            finally:
                for worker in workers:
                    worker.join(timeout=60)

            stored = reservation_repository(directory).find_active_overlapping(
                "cam", DateRange.of("2024-03-01", "2024-03-03")
            )
            assert outcomes.count(True) == 1
            assert len(stored) == 1
            assert stored[0].id == 1
