"""
Budget Calculator - Accounting Module.

This module provides the calculation service that totals monthly
budgets over an arbitrary inclusive date range. The service is
stateless: every call fetches the full budget collection from its
repository and filters it in memory.

Classes:
    BudgetRepository: Protocol for the external budget source.
    DuplicateYearMonth: Raised when a collection holds two budgets for one month.
    Accounting: Sums prorated budget contributions over a query period.
"""

from collections import Counter
from datetime import date, datetime
from typing import Iterable, List, Protocol

from src import __version__
from src.date_logic import DateManager
from src.period import Period
from src.schema import (
    Budget,
    CalculationSnapshot,
    DuplicateMonthPolicy,
    MonthlyContribution,
)


class BudgetRepository(Protocol):
    """Source of the complete current budget collection."""

    def get_all(self) -> Iterable[Budget]:
        """Return every known budget."""
        ...


class DuplicateYearMonth(ValueError):
    """A budget collection holds more than one budget for the same month."""

    def __init__(self, year_months: List[str]):
        self.year_months = year_months
        super().__init__(
            f"Duplicate budgets for month(s): {', '.join(year_months)}"
        )


class Accounting:
    """
    Totals monthly budgets over an inclusive date range.

    Each budget contributes its truncated daily rate multiplied by the
    number of days its month shares with the query period. Months with
    no budget contribute nothing.

    Attributes:
        repository: BudgetRepository supplying the budget collection.
        duplicate_policy: Handling of two budgets for the same month.

    Example:
        >>> repo = InMemoryBudgetRepository([Budget("201801", 62)])
        >>> accounting = Accounting(repo)
        >>> accounting.total_amount(date(2018, 1, 1), date(2018, 1, 15))
        30
    """

    def __init__(
        self,
        repository: BudgetRepository,
        duplicate_policy: DuplicateMonthPolicy = DuplicateMonthPolicy.REJECT
    ):
        """
        Initialises Accounting with a budget repository.

        Args:
            repository: Source of budgets, queried on every calculation.
            duplicate_policy: REJECT (default) raises DuplicateYearMonth,
                SUM adds every matching budget.
        """
        self._repository = repository
        self._duplicate_policy = duplicate_policy
        self._date_manager = DateManager()

    def total_amount(self, start: date, end: date) -> int:
        """
        Calculates the prorated budget total for an inclusive date range.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            Sum of every budget's effective amount. Zero when no budget
            overlaps the range.

        Raises:
            InvalidRange: If start is after end.
            InvalidYearMonth: If a budget's month cannot be parsed.
            DuplicateYearMonth: If duplicates exist under the REJECT policy.
        """
        query = Period(start, end)
        budgets = self._fetch_budgets()

        return sum(budget.effective_amount(query) for budget in budgets)

    def monthly_breakdown(self, start: date, end: date) -> List[MonthlyContribution]:
        """
        Lists each overlapping budget's contribution to a date range.

        Budgets whose month lies wholly outside the range are omitted.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            MonthlyContribution records ordered by month.

        Raises:
            InvalidRange: If start is after end.
        """
        query = Period(start, end)
        return self._contributions(query, self._fetch_budgets())

    def missing_months(self, start: date, end: date) -> List[str]:
        """
        Lists months touched by a date range that have no budget.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            YYYYMM identifiers in chronological order.

        Raises:
            InvalidRange: If start is after end.
        """
        query = Period(start, end)
        contributions = self._contributions(query, self._fetch_budgets())
        return self._missing_months(query, contributions)

    def analyse(self, start: date, end: date) -> CalculationSnapshot:
        """
        Performs a complete calculation for a date range.

        Fetches the budgets once and derives the total, the per-month
        breakdown and the list of missing months from the same collection.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            CalculationSnapshot for audit and reporting.

        Raises:
            InvalidRange: If start is after end.
        """
        query = Period(start, end)
        budgets = self._fetch_budgets()

        contributions = self._contributions(query, budgets)
        missing = self._missing_months(query, contributions)

        return CalculationSnapshot(
            timestamp=datetime.now(),
            version=__version__,
            start=start,
            end=end,
            total_amount=sum(c.effective_amount for c in contributions),
            contributions=contributions,
            missing_months=missing,
        )

    def _fetch_budgets(self) -> List[Budget]:
        """
        Materialises the repository's collection and applies the duplicate policy.

        Returns:
            Every budget from the repository.

        Raises:
            DuplicateYearMonth: If duplicates exist under the REJECT policy.
        """
        budgets = list(self._repository.get_all())

        if self._duplicate_policy == DuplicateMonthPolicy.REJECT:
            counts = Counter(budget.period().start for budget in budgets)
            duplicates = sorted(
                self._date_manager.format_year_month(first_day)
                for first_day, count in counts.items()
                if count > 1
            )
            if duplicates:
                raise DuplicateYearMonth(duplicates)

        return budgets

    def _contributions(
        self,
        query: Period,
        budgets: List[Budget]
    ) -> List[MonthlyContribution]:
        """Breakdown records for budgets overlapping the query, ordered by month."""
        contributions = [
            budget.contribution(query)
            for budget in budgets
            if query.overlaps(budget.period())
        ]
        return sorted(contributions, key=lambda c: c.year_month)

    def _missing_months(
        self,
        query: Period,
        contributions: List[MonthlyContribution]
    ) -> List[str]:
        covered = {c.year_month for c in contributions}
        return [
            year_month
            for year_month in self._date_manager.year_months_between(query.start, query.end)
            if year_month not in covered
        ]
