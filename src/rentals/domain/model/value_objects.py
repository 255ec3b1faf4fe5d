"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from rentals.domain.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar days.

    Both ``start`` and ``end`` belong to the range, so a rental that is
    returned on the day another one is picked up contends for the same
    stock.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = getattr(self, name)
            # datetime is a date subclass; a time component would break
            # the day-level comparisons below.
            if not isinstance(value, date) or isinstance(value, datetime):
                raise ValidationError(
                    f"Range {name} must be a date, got {type(value).__name__}"
                )
        if self.start > self.end:
            raise ValidationError(
                f"Start date {self.start} is after end date {self.end}"
            )

    # --- Interval logic -------------------------------------------------------

    def overlaps(self, other: DateRange) -> bool:
        return self.start <= other.end and self.end >= other.start

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    @property
    def length(self) -> int:
        """Number of days in the range, both ends included."""
        return (self.end - self.start).days + 1

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(start: str | date, end: str | date) -> DateRange:
        """Build a range from dates or ISO ``YYYY-MM-DD`` strings."""
        return DateRange(_coerce_date(start), _coerce_date(end))

    @staticmethod
    def for_month(year: int, month: int) -> DateRange:
        """The whole calendar month; ``month`` runs from 1 to 12."""
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        try:
            last_day = calendar.monthrange(year, month)[1]
            return DateRange(date(year, month, 1), date(year, month, last_day))
        except ValueError as exc:
            raise ValidationError(f"Invalid year {year}: {exc}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot reserve zero or negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


def _coerce_date(value: str | date) -> date:
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {value!r}") from exc
    return value
