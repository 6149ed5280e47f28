"""
Budget Calculator - Budget Sources Module.

This module provides read-only BudgetRepository implementations:
an in-memory collection and a CSV file re-read on every fetch.

Classes:
    BudgetSourceError: Raised when a budget source holds invalid records.
    InMemoryBudgetRepository: Serves a fixed list of budgets.
    CsvBudgetRepository: Serves budgets parsed from a CSV file.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from src.schema import Budget
from src.validator import BudgetValidator, ValidationError


class BudgetSourceError(ValueError):
    """A budget source contains records that failed validation."""

    # Errors listed in the message before it is truncated
    MAX_LISTED_ERRORS = 10

    def __init__(self, source: str, errors: List[ValidationError]):
        self.source = source
        self.errors = errors

        lines = [str(error) for error in errors[:self.MAX_LISTED_ERRORS]]
        if len(errors) > self.MAX_LISTED_ERRORS:
            lines.append(f"... and {len(errors) - self.MAX_LISTED_ERRORS} more errors")

        super().__init__(
            f"Invalid budget data in {source} ({len(errors)} errors):\n"
            + "\n".join(lines)
        )


class InMemoryBudgetRepository:
    """
    Serves a fixed collection of budgets.

    Example:
        >>> repo = InMemoryBudgetRepository([Budget("201801", 62)])
        >>> repo.get_all()
        [Budget(year_month='201801', amount=62)]
    """

    def __init__(self, budgets: Optional[Iterable[Budget]] = None):
        self._budgets = list(budgets or [])

    def get_all(self) -> List[Budget]:
        """Returns a copy of the stored budgets."""
        return list(self._budgets)


class CsvBudgetRepository:
    """
    Serves budgets from a CSV file with YearMonth and Amount columns.

    The file is validated on every fetch so edits are picked up without
    rebuilding the repository. Any invalid row fails the whole fetch.

    Example:
        >>> repo = CsvBudgetRepository("budgets.csv")
        >>> accounting = Accounting(repo)
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        validator: Optional[BudgetValidator] = None,
        has_header: bool = True
    ):
        """
        Initialises the repository.

        Args:
            file_path: Path to the budget CSV.
            validator: BudgetValidator to parse rows. Defaults to a new one.
            has_header: Whether the CSV has a header row.
        """
        self._file_path = Path(file_path)
        self._validator = validator or BudgetValidator()
        self._has_header = has_header

    def get_all(self) -> List[Budget]:
        """
        Loads and validates every budget in the file.

        Returns:
            List of Budget objects in file order.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If required columns are missing.
            BudgetSourceError: If any row fails validation.
        """
        result = self._validator.validate_csv(self._file_path, self._has_header)

        if not result.is_valid:
            raise BudgetSourceError(str(self._file_path), result.errors)

        return result.budgets
