"""
Budget Calculator - Data Validation Module.

This module provides CSV validation and parsing for monthly budget
records. Amounts are converted to whole-unit integers and month
identifiers are normalised to YYYYMM, with comprehensive error
reporting including row numbers.

Classes:
    ValidationError: A single row-level validation failure.
    ValidationResult: Container for validation outcomes.
    BudgetValidator: Main validation class for CSV processing.
"""

import csv
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from src.date_logic import DateManager, InvalidYearMonth
from src.schema import Budget


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        row_number: The 1-based row number in the CSV (header is row 1).
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A human-readable error message.
    """

    row_number: int
    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted error message for display."""
        return f"Error: Row {self.row_number} '{self.field_name}' - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for CSV validation results.

    Attributes:
        budgets: List of successfully validated Budget objects.
        errors: List of ValidationError objects for failed rows.
        total_rows: Total number of data rows processed.
    """

    budgets: List[Budget] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def valid_count(self) -> int:
        """Returns the number of successfully validated budgets."""
        return len(self.budgets)

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


class BudgetValidator:
    """
    Validates CSV input and converts to Budget objects.

    Checks required columns, parses month identifiers and integer
    amounts, and reports every month that appears more than once.

    Attributes:
        REQUIRED_COLUMNS: List of mandatory CSV column names.

    Example:
        >>> validator = BudgetValidator()
        >>> result = validator.validate_csv("budgets.csv")
        >>> if result.is_valid:
        ...     for budget in result.budgets:
        ...         print(budget.year_month, budget.amount)
    """

    REQUIRED_COLUMNS = ["YearMonth", "Amount"]

    # Either plain digits or comma-separated groups of three, nothing else
    AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+|[0-9]{1,3}(?:,[0-9]{3})+)")
    DECIMAL_COMMA_PATTERN = re.compile(r"[+-]?[0-9]+,[0-9]{2}")
    FRACTION_PATTERN = re.compile(r"[+-]?[0-9]+\.[0-9]*")
    DASHED_YEAR_MONTH_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")

    def __init__(self):
        """Initialises the BudgetValidator."""
        self._date_manager = DateManager()

    def validate_csv(
        self,
        file_path: Union[str, Path],
        has_header: bool = True
    ) -> ValidationResult:
        """
        Validates a CSV file of monthly budgets.

        Args:
            file_path: Path to the CSV file.
            has_header: Whether the CSV has a header row. Defaults to True.
                Without a header the first two columns are read as
                YearMonth and Amount.

        Returns:
            ValidationResult with budgets list and any errors.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If required columns are missing.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
            if has_header:
                reader = csv.DictReader(csvfile)
                column_map = self._map_columns(reader.fieldnames or [])
                missing = [c for c in self.REQUIRED_COLUMNS if c not in column_map]
                if missing:
                    raise ValueError(
                        f"Missing required columns: {', '.join(missing)}"
                    )

                rows = [
                    {name: row.get(source) or "" for name, source in column_map.items()}
                    for row in reader
                ]
                return self.validate_rows(rows, start_row=2)

            result = ValidationResult()
            rows = []
            for row_num, row in enumerate(csv.reader(csvfile), start=1):
                # Blank lines are skipped, as DictReader does
                if not row:
                    rows.append(None)
                    continue
                if len(row) < 2:
                    result.total_rows += 1
                    result.errors.append(ValidationError(
                        row_number=row_num,
                        field_name="Row",
                        value=str(row),
                        message="Row must have at least 2 columns: YearMonth, Amount"
                    ))
                    rows.append(None)
                    continue
                rows.append({"YearMonth": row[0], "Amount": row[1]})

        positional = self.validate_rows(rows, start_row=1)
        positional.errors = sorted(
            result.errors + positional.errors, key=lambda e: e.row_number
        )
        positional.total_rows += result.total_rows
        return positional

    def validate_rows(
        self,
        rows: List[Optional[dict]],
        start_row: int = 2
    ) -> ValidationResult:
        """
        Validates a list of row dictionaries.

        Useful for validating data from sources other than CSV files.
        ``None`` entries are placeholders for rows already rejected and
        are skipped without being counted.

        Args:
            rows: List of dictionaries with "YearMonth" and "Amount" keys.
            start_row: Row number of the first entry for error reporting.

        Returns:
            ValidationResult with budgets list and any errors.
        """
        result = ValidationResult()
        first_seen: Dict[str, int] = {}

        for idx, row in enumerate(rows):
            if row is None:
                continue

            row_num = start_row + idx
            result.total_rows += 1
            budget, errors = self._validate_row(row, row_num)
            result.errors.extend(errors)

            if budget is None:
                continue

            if budget.year_month in first_seen:
                result.errors.append(ValidationError(
                    row_number=row_num,
                    field_name="YearMonth",
                    value=budget.year_month,
                    message=f"Duplicate budget for {budget.year_month} "
                            f"(first defined on row {first_seen[budget.year_month]})"
                ))
                continue

            first_seen[budget.year_month] = row_num
            result.budgets.append(budget)

        return result

    def _map_columns(self, columns: List[str]) -> Dict[str, str]:
        """
        Matches header names to required columns, ignoring case and spacing.

        Args:
            columns: List of column names from CSV header.

        Returns:
            Mapping of required column name to the header name found.
        """
        by_key = {c.lower().strip(): c for c in columns if c is not None}
        return {
            required: by_key[required.lower()]
            for required in self.REQUIRED_COLUMNS
            if required.lower() in by_key
        }

    def _validate_row(
        self,
        row: dict,
        row_number: int
    ) -> Tuple[Optional[Budget], List[ValidationError]]:
        """
        Validates a single row and converts to Budget.

        Args:
            row: Dictionary with row data.
            row_number: Row number for error reporting.

        Returns:
            Tuple of (Budget or None, list of errors).
        """
        errors: List[ValidationError] = []

        year_month, month_error = self._parse_year_month(
            row.get("YearMonth", ""), row_number
        )
        if month_error:
            errors.append(month_error)

        amount, amount_error = self._parse_amount(
            row.get("Amount", ""), row_number
        )
        if amount_error:
            errors.append(amount_error)

        if errors or year_month is None or amount is None:
            return None, errors

        return Budget(year_month=year_month, amount=amount), errors

    def _parse_year_month(
        self,
        value: Optional[str],
        row_number: int
    ) -> Tuple[Optional[str], Optional[ValidationError]]:
        """
        Parses and normalises a month identifier.

        Accepts "201801" and "2018-01"; both normalise to "201801".

        Args:
            value: String value to parse.
            row_number: Row number for error messages.

        Returns:
            Tuple of (YYYYMM string or None, ValidationError or None).
        """
        original_value = value if value is not None else ""
        value = original_value.strip()

        if not value:
            return None, ValidationError(
                row_number=row_number,
                field_name="YearMonth",
                value=original_value,
                message="YearMonth cannot be empty"
            )

        dashed = self.DASHED_YEAR_MONTH_PATTERN.fullmatch(value)
        if dashed:
            value = dashed.group(1) + dashed.group(2)

        try:
            self._date_manager.parse_year_month(value)
        except InvalidYearMonth:
            return None, ValidationError(
                row_number=row_number,
                field_name="YearMonth",
                value=original_value,
                message=f"YearMonth must be YYYYMM or YYYY-MM with month 01-12 "
                        f"(received: '{original_value}')"
            )

        return value, None

    def _parse_amount(
        self,
        value: Optional[str],
        row_number: int
    ) -> Tuple[Optional[int], Optional[ValidationError]]:
        """
        Parses a whole-unit amount.

        Handles formats such as:
        - "62" (plain number)
        - "1,000" (with thousands separator, groups of three)
        - "-310" (negative adjustment)

        Args:
            value: String value to parse.
            row_number: Row number for error messages.

        Returns:
            Tuple of (int value or None, ValidationError or None).
        """
        original_value = value if value is not None else ""
        value = original_value.strip()

        if not value:
            return None, ValidationError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message="Amount cannot be empty"
            )

        # Comma followed by exactly two digits is a decimal comma, not a separator
        if self.DECIMAL_COMMA_PATTERN.fullmatch(value):
            return None, ValidationError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message=f"Amount appears to use a decimal comma "
                        f"(received: '{original_value}')"
            )

        if self.FRACTION_PATTERN.fullmatch(value):
            return None, ValidationError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message=f"Amount must be a whole number "
                        f"(received: '{original_value}')"
            )

        if not self.AMOUNT_PATTERN.fullmatch(value):
            return None, ValidationError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message=f"Amount must be a valid number "
                        f"(received: '{original_value}')"
            )

        return int(value.replace(",", "")), None
