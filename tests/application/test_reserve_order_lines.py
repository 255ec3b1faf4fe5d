"""Integration tests for the ReserveOrderLines use case."""

from datetime import date

import pytest

from rentals.application.dto import RentalLineSpec
from rentals.application.reserve_order_lines import ReserveOrderLinesHandler
from rentals.domain.exceptions import EntityNotFoundError, StorageError, ValidationError
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation
from tests.fakes import (
    FakeProductRepository,
    FakeReservationRepository,
    FlakyReservationRepository,
)


def _products():
    return FakeProductRepository([
        Product(id="1", name="Tent", quantity=3),
        Product(id="2", name="Stove", quantity=1),
    ])


def _line(product_id: str, qty: int, start: str = "2024-06-01", end: str = "2024-06-05"):
    return RentalLineSpec(
        product_id=product_id,
        quantity=qty,
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end),
    )


class TestReserveOrderLinesHappyPath:

    def test_reserves_every_line(self):
        reservations = FakeReservationRepository()
        handler = ReserveOrderLinesHandler(_products(), reservations)

        dtos = handler.handle("ORD-1", [_line("1", 2), _line("2", 1)])

        assert [(d.product_id, d.quantity, d.status) for d in dtos] == [
            ("1", 2, "ACTIVE"),
            ("2", 1, "ACTIVE"),
        ]
        assert all(r.order_id == "ORD-1" for r in reservations.all())
        assert dtos[0].start_date == "2024-06-01"
        assert dtos[0].end_date == "2024-06-05"


class TestReserveOrderLinesValidation:

    def test_unavailable_line_aborts_before_any_write(self):
        taken = Reservation.create("2", 1, date(2024, 6, 3), date(2024, 6, 4), order_id="OLD")
        reservations = FakeReservationRepository([taken])
        handler = ReserveOrderLinesHandler(_products(), reservations)

        with pytest.raises(ValidationError, match="'2' is not available"):
            handler.handle("ORD-1", [_line("1", 2), _line("2", 1)])

        assert reservations.list_by_order("ORD-1") == []

    def test_unavailable_line_reports_shortfall(self):
        handler = ReserveOrderLinesHandler(_products(), FakeReservationRepository())

        with pytest.raises(ValidationError, match=r"Only 3 available.*\(2 short\)"):
            handler.handle("ORD-1", [_line("1", 5)])

    def test_unknown_product_rejected(self):
        handler = ReserveOrderLinesHandler(_products(), FakeReservationRepository())

        with pytest.raises(EntityNotFoundError, match="Product not found"):
            handler.handle("ORD-1", [_line("99", 1)])

    def test_empty_order_rejected(self):
        handler = ReserveOrderLinesHandler(_products(), FakeReservationRepository())

        with pytest.raises(ValidationError, match="at least one line"):
            handler.handle("ORD-1", [])

    def test_missing_order_id_rejected(self):
        handler = ReserveOrderLinesHandler(_products(), FakeReservationRepository())

        with pytest.raises(ValidationError, match="Order ID is required"):
            handler.handle("  ", [_line("1", 1)])

    def test_order_with_active_reservations_rejected(self):
        reservations = FakeReservationRepository()
        handler = ReserveOrderLinesHandler(_products(), reservations)
        handler.handle("ORD-1", [_line("1", 1)])

        with pytest.raises(ValidationError, match="already holds reservations"):
            handler.handle("ORD-1", [_line("1", 1)])


class TestReserveOrderLinesRollback:

    def test_lines_adding_up_past_stock_roll_back(self):
        """Each Tent line fits alone; together they need 4 of 3."""
        reservations = FakeReservationRepository()
        handler = ReserveOrderLinesHandler(_products(), reservations)

        with pytest.raises(ValidationError, match="Could not reserve '1'"):
            handler.handle("ORD-1", [_line("1", 2), _line("1", 2)])

        assert [r.is_active for r in reservations.list_by_order("ORD-1")] == [False]

    def test_storage_failure_mid_order_rolls_back(self):
        reservations = FlakyReservationRepository(allowed_adds=1)
        handler = ReserveOrderLinesHandler(_products(), reservations)

        with pytest.raises(StorageError, match="Failed to create reservation"):
            handler.handle("ORD-1", [_line("1", 1), _line("2", 1)])

        assert all(not r.is_active for r in reservations.list_by_order("ORD-1"))

    def test_failed_rollback_reported(self):
        reservations = FlakyReservationRepository(allowed_adds=1, fail_deactivate=True)
        handler = ReserveOrderLinesHandler(_products(), reservations)

        with pytest.raises(StorageError, match="partially reserved"):
            handler.handle("ORD-1", [_line("1", 1), _line("2", 1)])
