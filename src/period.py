"""
Budget Calculator - Period Module.

This module defines the inclusive date interval used both for query
ranges and for a budget's calendar month span.

Classes:
    InvalidRange: Raised when a period would end before it starts.
    Period: Immutable inclusive date interval with overlap arithmetic.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from src.date_logic import DateManager


class InvalidRange(ValueError):
    """A period's start date falls after its end date."""

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(
            f"Invalid period: start {start.isoformat()} is after end {end.isoformat()}"
        )


@dataclass(frozen=True)
class Period:
    """
    Inclusive date interval.

    Both ``start`` and ``end`` are counted, so a period starting and
    ending on the same day is one day long.

    Attributes:
        start: First day of the period.
        end: Last day of the period.

    Example:
        >>> january = Period(date(2018, 1, 1), date(2018, 1, 31))
        >>> first_half = Period(date(2018, 1, 1), date(2018, 1, 15))
        >>> january.overlapping_days(first_half)
        15
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidRange(self.start, self.end)

    @classmethod
    def for_month(cls, year: int, month: int) -> "Period":
        """
        Builds the period spanning a whole calendar month.

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Period from the first to the last day of the month.
        """
        dm = DateManager()
        return cls(dm.first_day_of_month(year, month), dm.last_day_of_month(year, month))

    def total_days(self) -> int:
        """Returns the inclusive number of days in the period."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        """Returns True if ``day`` falls within the period."""
        return self.start <= day <= self.end

    def overlaps(self, other: "Period") -> bool:
        """Returns True if the two periods share at least one day."""
        return not (self.end < other.start or self.start > other.end)

    def overlapping_period(self, other: "Period") -> Optional["Period"]:
        """
        Returns the intersection of the two periods.

        Args:
            other: Period to intersect with.

        Returns:
            Period covering the shared days, or None if there are none.
        """
        if not self.overlaps(other):
            return None

        return Period(max(self.start, other.start), min(self.end, other.end))

    def overlapping_days(self, other: "Period") -> int:
        """
        Counts the days shared by the two periods.

        Args:
            other: Period to compare with.

        Returns:
            Number of common days, 0 if the periods do not overlap.
        """
        overlap = self.overlapping_period(other)
        if overlap is None:
            return 0
        return overlap.total_days()
