"""End-to-end tests for the rentals CLI."""

import pytest
from click.testing import CliRunner

from rentals.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args])

    return _run


@pytest.fixture
def camera(run):
    result = run("product", "add", "--id", "cam", "--name", "Camera", "--quantity", "3")
    assert result.exit_code == 0, result.output
    return "cam"


class TestProductCommands:

    def test_add_and_list(self, run, camera):
        result = run("product", "list")

        assert result.exit_code == 0
        assert "Camera" in result.output

    def test_set_stock(self, run, camera):
        result = run("product", "set-stock", "--id", camera, "--quantity", "5")

        assert result.exit_code == 0
        assert "set to 5" in result.output

    def test_negative_stock_rejected(self, run, camera):
        result = run("product", "set-stock", "--id", camera, "--quantity", "-1")

        assert result.exit_code == 1
        assert "cannot be negative" in result.output


class TestAvailabilityFlow:

    def test_reserve_check_cancel(self, run, camera):
        reserve = run(
            "reservation", "create", "--product", camera, "--quantity", "2",
            "--start", "2024-03-01", "--end", "2024-03-03", "--order", "A",
        )
        assert reserve.exit_code == 0, reserve.output
        assert "Reservation #1 created" in reserve.output

        blocked = run(
            "availability", "check", "--product", camera,
            "--start", "2024-03-02", "--end", "2024-03-04", "--quantity", "2",
        )
        assert blocked.exit_code == 1
        assert "Available: 1" in blocked.output
        assert "Short by:  1" in blocked.output

        cancel = run("reservation", "cancel", "--order", "A")
        assert cancel.exit_code == 0
        assert "Released 1 reservation(s)" in cancel.output

        again = run("reservation", "cancel", "--order", "A")
        assert "No active reservations" in again.output

        free = run(
            "availability", "check", "--product", camera,
            "--start", "2024-03-02", "--end", "2024-03-04", "--quantity", "2",
        )
        assert free.exit_code == 0
        assert "Available: 3" in free.output

    def test_atomic_create_refuses_overbooking(self, run, camera):
        args = ("reservation", "create", "--product", camera, "--quantity", "2",
                "--start", "2024-03-01", "--end", "2024-03-03")
        run(*args, "--order", "A")

        result = run(*args, "--order", "B")

        assert result.exit_code == 1
        assert "Only 1 available" in result.output

    def test_forced_create_skips_check(self, run, camera):
        args = ("reservation", "create", "--product", camera, "--quantity", "2",
                "--start", "2024-03-01", "--end", "2024-03-03")
        run(*args, "--order", "A")

        result = run(*args, "--order", "B", "--force")

        assert result.exit_code == 0

    def test_calendar(self, run, camera):
        run("reservation", "create", "--product", camera, "--quantity", "2",
            "--start", "2024-01-10", "--end", "2024-01-12", "--order", "A")

        result = run("availability", "calendar", "--product", camera,
                     "--year", "2024", "--month", "1")

        assert result.exit_code == 0
        rows = dict(line.split() for line in result.output.splitlines() if line.startswith("2024-"))
        assert len(rows) == 31
        assert rows["2024-01-10"] == rows["2024-01-12"] == "1"
        assert rows["2024-01-13"] == "3"

    def test_calendar_unknown_product(self, run):
        result = run("availability", "calendar", "--product", "nope",
                     "--year", "2024", "--month", "1")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_by_order(self, run, camera):
        run("reservation", "create", "--product", camera, "--quantity", "1",
            "--start", "2024-01-10", "--end", "2024-01-12", "--order", "A")

        result = run("reservation", "list", "--order", "A")

        assert result.exit_code == 0
        assert "ACTIVE" in result.output

    def test_list_requires_one_filter(self, run):
        result = run("reservation", "list")

        assert result.exit_code == 2


class TestConfiguration:

    def test_data_dir_from_environment(self, tmp_path):
        runner = CliRunner()

        result = runner.invoke(
            cli,
            ["product", "add", "--name", "Drone", "--quantity", "1"],
            env={"RENTALS_DATA_DIR": str(tmp_path)},
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "products.json").exists()
