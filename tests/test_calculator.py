"""
Budget Calculator - Accounting Tests.

Property-based and unit tests for the Accounting service.
Tests pin the prorated totals for known budget sets, range
validation, duplicate handling and the per-month breakdown.
"""

from datetime import date
from typing import List

import pytest
from hypothesis import given, settings
from hypothesis.strategies import composite, dates, integers, lists, permutations

from src import __version__
from src.calculator import Accounting, DuplicateYearMonth
from src.date_logic import InvalidYearMonth
from src.period import InvalidRange
from src.repository import InMemoryBudgetRepository
from src.schema import Budget, DuplicateMonthPolicy


class CountingRepository:
    """Repository double recording how often budgets were fetched."""

    def __init__(self, budgets: List[Budget]):
        self.budgets = budgets
        self.calls = 0

    def get_all(self):
        self.calls += 1
        return iter(self.budgets)


def accounting_for(*budgets: Budget, **kwargs) -> Accounting:
    """Builds Accounting over an in-memory budget set."""
    return Accounting(InMemoryBudgetRepository(budgets), **kwargs)


@composite
def distinct_month_budgets(draw):
    """Generate budgets for distinct months between 2017 and 2019."""
    months = draw(lists(
        integers(min_value=0, max_value=35),
        unique=True,
        max_size=12
    ))
    return [
        Budget(
            f"{2017 + offset // 12:04d}{offset % 12 + 1:02d}",
            draw(integers(min_value=0, max_value=10000))
        )
        for offset in months
    ]


class TestAccountingScenarios:
    """Known budget sets with their expected totals."""

    def test_no_budgets(self) -> None:
        """Verify an empty repository totals zero."""
        accounting = accounting_for()

        assert accounting.total_amount(date(2018, 3, 1), date(2018, 3, 1)) == 0

    def test_start_after_end_raises(self) -> None:
        """Verify an inverted range surfaces InvalidRange unchanged."""
        accounting = accounting_for()

        with pytest.raises(InvalidRange):
            accounting.total_amount(date(2018, 3, 1), date(2018, 2, 1))

    def test_period_equals_budget_month(self) -> None:
        """Verify a full January returns the January budget."""
        accounting = accounting_for(Budget("201801", 62))

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31)) == 62

    def test_fifteen_days_inside_budget_month(self) -> None:
        """Verify 15 of 31 days at daily rate 2 totals 30."""
        accounting = accounting_for(Budget("201801", 62))

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 1, 15)) == 30

    def test_no_budget_for_queried_month(self) -> None:
        """Verify a month with no budget totals zero."""
        accounting = accounting_for(Budget("201801", 62))

        assert accounting.total_amount(date(2018, 2, 1), date(2018, 2, 15)) == 0

    def test_two_full_months(self) -> None:
        """Verify January and February in full total 342."""
        accounting = accounting_for(Budget("201801", 62), Budget("201802", 280))

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 2, 28)) == 342

    def test_three_months_partial_end(self) -> None:
        """Verify 62 + 280 + 10 days of March at 2 totals 362."""
        accounting = accounting_for(
            Budget("201801", 62),
            Budget("201802", 280),
            Budget("201803", 62),
        )

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 3, 10)) == 362

    def test_missing_middle_month(self) -> None:
        """Verify a missing February contributes zero."""
        accounting = accounting_for(Budget("201801", 62), Budget("201803", 62))

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 3, 10)) == 82

    def test_range_across_year_boundary(self) -> None:
        """Verify December 2017 through 10 March 2018 totals 1000."""
        accounting = accounting_for(
            Budget("201712", 310),
            Budget("201801", 310),
            Budget("201802", 280),
            Budget("201803", 310),
        )

        assert accounting.total_amount(date(2017, 12, 1), date(2018, 3, 10)) == 1000

    def test_partial_start_and_end(self) -> None:
        """Verify partial months at both ends are prorated."""
        accounting = accounting_for(
            Budget("201801", 310),
            Budget("201802", 280),
            Budget("201803", 310),
        )

        # 12 days at 10 + 280 + 5 days at 10
        assert accounting.total_amount(date(2018, 1, 20), date(2018, 3, 5)) == 120 + 280 + 50

    def test_leap_february(self) -> None:
        """Verify February 2024 prorates over 29 days."""
        accounting = accounting_for(Budget("202402", 290))

        assert accounting.total_amount(date(2024, 2, 20), date(2024, 2, 29)) == 100

    def test_truncation_applied_per_month(self) -> None:
        """Verify the daily rate is truncated before multiplying."""
        accounting = accounting_for(Budget("201801", 100))

        # 100 // 31 = 3 per day
        assert accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31)) == 93


class TestAccountingUnit:
    """Unit tests for Accounting behaviour beyond the totals."""

    def test_fetches_budgets_once_per_total(self) -> None:
        """Verify the repository is queried once and its iterator materialised."""
        repo = CountingRepository([Budget("201801", 62), Budget("201802", 280)])
        accounting = Accounting(repo)

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 2, 28)) == 342
        assert repo.calls == 1

    def test_invalid_range_checked_before_fetch(self) -> None:
        """Verify no fetch happens for an inverted range."""
        repo = CountingRepository([Budget("201801", 62)])
        accounting = Accounting(repo)

        with pytest.raises(InvalidRange):
            accounting.total_amount(date(2018, 3, 1), date(2018, 2, 1))
        assert repo.calls == 0

    def test_malformed_budget_propagates(self) -> None:
        """Verify a malformed month is not silently skipped."""
        accounting = accounting_for(Budget("201801", 62), Budget("201813", 62))

        with pytest.raises(InvalidYearMonth):
            accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31))

    @pytest.mark.parametrize("year_month", ["201801\n", "٢٠١٨٠١"])
    def test_lookalike_month_not_read_as_january(self, year_month: str) -> None:
        """Verify near-miss month identifiers raise instead of matching 201801."""
        accounting = accounting_for(Budget(year_month, 62))

        with pytest.raises(InvalidYearMonth):
            accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31))

    def test_duplicate_months_rejected_by_default(self) -> None:
        """Verify two budgets for one month raise DuplicateYearMonth."""
        accounting = accounting_for(
            Budget("201801", 62),
            Budget("201801", 31),
            Budget("201802", 280),
        )

        with pytest.raises(DuplicateYearMonth) as exc_info:
            accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31))

        assert exc_info.value.year_months == ["201801"]

    def test_duplicate_months_summed_when_configured(self) -> None:
        """Verify the SUM policy adds every matching budget."""
        accounting = accounting_for(
            Budget("201801", 62),
            Budget("201801", 31),
            duplicate_policy=DuplicateMonthPolicy.SUM,
        )

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31)) == 93

    def test_zero_amount_budget(self) -> None:
        """Verify a zero budget contributes nothing."""
        accounting = accounting_for(Budget("201801", 0))

        assert accounting.total_amount(date(2018, 1, 1), date(2018, 1, 31)) == 0

    def test_monthly_breakdown_ordered_and_filtered(self) -> None:
        """Verify breakdown omits non-overlapping months and sorts by month."""
        accounting = accounting_for(
            Budget("201803", 62),
            Budget("201712", 310),
            Budget("201801", 62),
            Budget("201806", 300),
        )

        breakdown = accounting.monthly_breakdown(date(2018, 1, 1), date(2018, 3, 10))

        assert [c.year_month for c in breakdown] == ["201801", "201803"]
        assert [c.effective_amount for c in breakdown] == [62, 20]

    def test_missing_months(self) -> None:
        """Verify months without a budget are listed in order."""
        accounting = accounting_for(Budget("201801", 62), Budget("201803", 62))

        missing = accounting.missing_months(date(2017, 12, 15), date(2018, 4, 1))

        assert missing == ["201712", "201802", "201804"]

    def test_analyse_snapshot(self) -> None:
        """Verify analyse returns the total, breakdown and gaps together."""
        repo = CountingRepository([Budget("201801", 62), Budget("201803", 62)])
        accounting = Accounting(repo)

        snapshot = accounting.analyse(date(2018, 1, 1), date(2018, 3, 10))

        assert repo.calls == 1
        assert snapshot.total_amount == 82
        assert snapshot.start == date(2018, 1, 1)
        assert snapshot.end == date(2018, 3, 10)
        assert snapshot.version == __version__
        assert [c.year_month for c in snapshot.contributions] == ["201801", "201803"]
        assert snapshot.missing_months == ["201802"]

    def test_analyse_rejects_inverted_range(self) -> None:
        """Verify analyse surfaces InvalidRange."""
        with pytest.raises(InvalidRange):
            accounting_for().analyse(date(2018, 3, 1), date(2018, 2, 1))


class TestAccountingProperty:
    """Property-based tests for Accounting totals."""

    @given(
        distinct_month_budgets(),
        dates(min_value=date(2017, 1, 1), max_value=date(2019, 12, 31)),
        dates(min_value=date(2017, 1, 1), max_value=date(2019, 12, 31))
    )
    @settings(max_examples=200)
    def test_total_matches_breakdown_and_snapshot(
        self,
        budgets: List[Budget],
        a: date,
        b: date
    ) -> None:
        """Property: total, breakdown sum and snapshot total agree."""
        start, end = min(a, b), max(a, b)
        accounting = accounting_for(*budgets)

        total = accounting.total_amount(start, end)
        breakdown = accounting.monthly_breakdown(start, end)

        assert total == sum(c.effective_amount for c in breakdown)
        assert total == accounting.analyse(start, end).total_amount

    @given(distinct_month_budgets().flatmap(lambda b: permutations(b)))
    @settings(max_examples=100)
    def test_order_does_not_matter(self, budgets: List[Budget]) -> None:
        """Property: Repository order does not change the total."""
        start, end = date(2017, 1, 1), date(2019, 12, 31)

        forward = accounting_for(*budgets).total_amount(start, end)
        reverse = accounting_for(*reversed(budgets)).total_amount(start, end)

        assert forward == reverse

    @given(
        distinct_month_budgets(),
        dates(min_value=date(2017, 1, 1), max_value=date(2019, 12, 31))
    )
    @settings(max_examples=200)
    def test_split_at_month_boundary_is_additive(
        self,
        budgets: List[Budget],
        start: date
    ) -> None:
        """Property: Splitting at a month boundary preserves the total."""
        accounting = accounting_for(*budgets)
        end = date(2019, 12, 31)
        boundary = date(start.year + start.month // 12, start.month % 12 + 1, 1)

        whole = accounting.total_amount(start, end)
        first = accounting.total_amount(start, date.fromordinal(boundary.toordinal() - 1))
        second = accounting.total_amount(boundary, end) if boundary <= end else 0

        assert whole == first + second
