"""
Budget Calculator - Date Logic Module.

This module provides the calendar arithmetic behind budget proration,
including leap year detection, days-in-month calculations, month
boundaries and parsing of YYYYMM month identifiers.

Classes:
    InvalidYearMonth: Raised when a month identifier cannot be parsed.
    DateManager: Manages all month-related date calculations.
"""

import calendar
import re
from datetime import date
from typing import List, Tuple


# Month identifiers are exactly six ASCII digits: four-digit year, zero-padded month
YEAR_MONTH_PATTERN = re.compile(r"([0-9]{4})([0-9]{2})")


class InvalidYearMonth(ValueError):
    """A budget's month identifier is not a valid YYYYMM value."""

    def __init__(self, year_month: object):
        self.year_month = year_month
        super().__init__(
            f"Invalid year/month '{year_month}': expected YYYYMM with month 01-12"
        )


class DateManager:
    """
    Manages month-related date calculations.

    Handles month boundaries, leap year logic and conversion between
    dates and YYYYMM month identifiers.

    Example:
        >>> dm = DateManager()
        >>> dm.parse_year_month("201802")
        (2018, 2)
        >>> dm.last_day_of_month(2024, 2)
        datetime.date(2024, 2, 29)
    """

    def is_leap_year(self, year: int) -> bool:
        """
        Determines if the specified year is a leap year.

        A year is a leap year if it is divisible by 4, except for
        century years which must be divisible by 400.

        Args:
            year: Four-digit year to check.

        Returns:
            True if the year is a leap year, False otherwise.
        """
        return calendar.isleap(year)

    def get_days_in_month(self, year: int, month: int) -> int:
        """
        Returns the total number of days in the specified month.

        Correctly handles February in leap years (29 days) and
        non-leap years (28 days).

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Number of days in the specified month.

        Raises:
            ValueError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        return calendar.monthrange(year, month)[1]

    def parse_year_month(self, year_month: str) -> Tuple[int, int]:
        """
        Parses a YYYYMM month identifier into year and month numbers.

        Args:
            year_month: Month identifier such as "201801".

        Returns:
            Tuple of (year, month).

        Raises:
            InvalidYearMonth: If the value is not a string of six digits
                or the month is outside 01-12.
        """
        if not isinstance(year_month, str):
            raise InvalidYearMonth(year_month)

        match = YEAR_MONTH_PATTERN.fullmatch(year_month)
        if match is None:
            raise InvalidYearMonth(year_month)

        year, month = int(match.group(1)), int(match.group(2))
        if year < 1 or not 1 <= month <= 12:
            raise InvalidYearMonth(year_month)

        return year, month

    def format_year_month(self, day: date) -> str:
        """Returns the YYYYMM identifier of the month containing ``day``."""
        return f"{day.year:04d}{day.month:02d}"

    def first_day_of_month(self, year: int, month: int) -> date:
        """Returns the first calendar day of the month."""
        return date(year, month, 1)

    def last_day_of_month(self, year: int, month: int) -> date:
        """Returns the last calendar day of the month, leap-year aware."""
        return date(year, month, self.get_days_in_month(year, month))

    def get_month_difference(self, start: date, end: date) -> int:
        """
        Counts calendar month boundaries between two dates.

        Days are ignored: 2018-01-31 to 2018-02-01 is one month apart,
        2018-01-01 to 2018-01-31 is zero.

        Args:
            start: Earlier date.
            end: Later date.

        Returns:
            Number of months from start's month to end's month. Negative
            if end falls in an earlier month than start.
        """
        return (end.year - start.year) * 12 + (end.month - start.month)

    def year_months_between(self, start: date, end: date) -> List[str]:
        """
        Lists every month touched by an inclusive date range.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            YYYYMM identifiers in chronological order. Empty if end
            falls in a month before start.
        """
        months: List[str] = []
        year, month = start.year, start.month

        for _ in range(self.get_month_difference(start, end) + 1):
            months.append(f"{year:04d}{month:02d}")
            month += 1
            if month > 12:
                year, month = year + 1, 1

        return months
