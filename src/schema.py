"""
Budget Calculator - Data Schema Module.

This module defines the core data models for budget proration.
Monetary amounts are whole-unit integers and the daily rate is
truncated before it is multiplied by a day count, so totals never
depend on floating-point rounding.

Classes:
    DuplicateMonthPolicy: How a calculation treats two budgets for one month.
    Budget: A monthly allocation that accrues uniformly per day.
    MonthlyContribution: One budget's share of a query period.
    CalculationSnapshot: Complete calculation run with metadata for audit purposes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List

from src.date_logic import DateManager
from src.period import Period


class DuplicateMonthPolicy(Enum):
    """
    Handling of budget collections holding more than one budget per month.

    Attributes:
        REJECT: Treat duplicates as a data error.
        SUM: Add every matching budget's contribution.
    """

    REJECT = "REJECT"
    SUM = "SUM"


def truncating_divide(dividend: int, divisor: int) -> int:
    """
    Integer division rounding toward zero.

    Python's ``//`` floors, which differs from truncation for negative
    dividends (``-61 // 31 == -2`` whereas truncation gives ``-1``).

    Example:
        >>> truncating_divide(62, 31)
        2
        >>> truncating_divide(-61, 31)
        -1
    """
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        return -quotient
    return quotient


@dataclass(frozen=True)
class Budget:
    """
    Monthly budget allocation.

    The month identifier is parsed lazily, so a malformed record raises
    InvalidYearMonth the first time its calendar span is needed rather
    than being skipped.

    Attributes:
        year_month: Month identifier in YYYYMM format (e.g. "201801").
        amount: Whole-unit total allocated to the month.
    """

    year_month: str
    amount: int

    @property
    def first_day(self) -> date:
        """First calendar day of the budget's month."""
        return self.period().start

    @property
    def last_day(self) -> date:
        """Last calendar day of the budget's month."""
        return self.period().end

    @property
    def days_in_month(self) -> int:
        return self.period().total_days()

    def period(self) -> Period:
        """
        Returns the Period spanning the whole budget month.

        Raises:
            InvalidYearMonth: If year_month cannot be parsed.
        """
        return Period.for_month(*DateManager().parse_year_month(self.year_month))

    def daily_rate(self) -> int:
        """
        Returns the amount accrued per day of the month.

        Truncates toward zero: 62 over 31 days is 2, 61 over 31 days is 1.
        """
        return truncating_divide(self.amount, self.days_in_month)

    def effective_amount(self, query: Period) -> int:
        """
        Calculates this budget's share of a query period.

        Formula: daily_rate * days shared by the query and the budget month.

        Args:
            query: Period being totalled.

        Returns:
            Prorated amount, 0 if the query does not touch this month.

        Raises:
            InvalidYearMonth: If year_month cannot be parsed.
        """
        return self.daily_rate() * query.overlapping_days(self.period())

    def contribution(self, query: Period) -> "MonthlyContribution":
        """
        Builds the breakdown record for this budget against a query period.

        Args:
            query: Period being totalled.

        Returns:
            MonthlyContribution with rate, overlap and effective amount.
        """
        rate = self.daily_rate()
        overlapping_days = query.overlapping_days(self.period())

        return MonthlyContribution(
            year_month=self.year_month,
            amount=self.amount,
            days_in_month=self.days_in_month,
            daily_rate=rate,
            overlapping_days=overlapping_days,
            effective_amount=rate * overlapping_days,
        )


@dataclass(frozen=True)
class MonthlyContribution:
    """
    One budget's share of a query period.

    Attributes:
        year_month: Month identifier in YYYYMM format.
        amount: Full monthly allocation.
        days_in_month: Calendar days in the month.
        daily_rate: Truncated per-day amount.
        overlapping_days: Days of the month inside the query period.
        effective_amount: daily_rate * overlapping_days.
    """

    year_month: str
    amount: int
    days_in_month: int
    daily_rate: int
    overlapping_days: int
    effective_amount: int


@dataclass
class CalculationSnapshot:
    """
    Complete calculation run with metadata for audit purposes.

    Attributes:
        timestamp: When the calculation was performed.
        version: Budget Calculator version identifier.
        start: First day of the query period.
        end: Last day of the query period.
        total_amount: Sum of all effective amounts.
        contributions: Per-month breakdown, ordered by month.
        missing_months: Months touched by the query with no budget.
    """

    timestamp: datetime
    version: str
    start: date
    end: date
    total_amount: int
    contributions: List[MonthlyContribution] = field(default_factory=list)
    missing_months: List[str] = field(default_factory=list)

    @property
    def total_days(self) -> int:
        """Inclusive length of the query period."""
        return (self.end - self.start).days + 1
