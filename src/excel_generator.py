"""
Budget Calculator - Excel Report Generation Module.

This module generates Excel reports for a budget calculation: a
Summary tab with the query range and total, and a Monthly Breakdown
tab showing how each month's budget was prorated.

Classes:
    ExcelReporter: Generates Excel workbooks from calculation snapshots.
"""

from datetime import datetime
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from src.schema import CalculationSnapshot


class ExcelReporter:
    """
    Generates Excel reports for budget calculations.

    Creates workbooks with Summary and Monthly Breakdown sheets.
    Months that contribute nothing are highlighted so gaps in the
    budget data stand out.

    Attributes:
        AMOUNT_FORMAT: Excel number format for whole-unit amounts.
        DATE_FORMAT: Excel number format for dates.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(snapshot, "budget_report.xlsx")
    """

    # Excel number formats
    AMOUNT_FORMAT = '#,##0'
    DATE_FORMAT = 'yyyy-mm-dd'

    # Highlight colours
    MISSING_FILL = PatternFill(
        start_color="FFC7CE",
        end_color="FFC7CE",
        fill_type="solid"
    )
    ZERO_FILL = PatternFill(
        start_color="FFEB9C",
        end_color="FFEB9C",
        fill_type="solid"
    )

    # Header styling
    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="2F5496",
        end_color="2F5496",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    # Border styling
    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    BREAKDOWN_HEADERS = [
        "YearMonth",
        "Monthly Amount",
        "Days in Month",
        "Daily Rate",
        "Overlapping Days",
        "Effective Amount",
    ]

    def generate_report(
        self,
        snapshot: CalculationSnapshot,
        output_path: Union[str, Path]
    ) -> None:
        """
        Generates a complete Excel report from a calculation.

        Creates a workbook with two sheets:
        1. Summary - query range, total and missing months
        2. Monthly Breakdown - per-month proration detail

        Args:
            snapshot: Complete calculation snapshot.
            output_path: Path for the output .xlsx file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()

        # Remove default sheet
        workbook.remove(workbook.active)

        self._create_summary_sheet(workbook, snapshot)
        self._create_breakdown_sheet(workbook, snapshot)

        workbook.save(output_path)

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        snapshot: CalculationSnapshot
    ) -> None:
        """
        Creates the Summary sheet with the query range and total.

        Args:
            workbook: Target workbook.
            snapshot: Calculation data.
        """
        ws = workbook.create_sheet("Summary")

        ws["A1"] = "Budget Calculator - Summary"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:D1")

        ws["A3"] = "Report Generated:"
        ws["B3"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A4"] = "Calculation Date:"
        ws["B4"] = snapshot.timestamp.strftime("%Y-%m-%d %H:%M")
        ws["A5"] = "Version:"
        ws["B5"] = snapshot.version

        ws["A7"] = "QUERY PERIOD"
        ws["A7"].font = Font(bold=True, size=14)
        ws.merge_cells("A7:D7")

        metrics = [
            ("Start", snapshot.start, self.DATE_FORMAT),
            ("End", snapshot.end, self.DATE_FORMAT),
            ("Days", snapshot.total_days, None),
            ("Budgets Counted", len(snapshot.contributions), None),
            ("Total Amount", snapshot.total_amount, self.AMOUNT_FORMAT),
        ]

        row = 9
        for label, value, number_format in metrics:
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = value
            if number_format:
                ws[f"B{row}"].number_format = number_format
            row += 1

        row += 1
        ws[f"A{row}"] = "MISSING MONTHS"
        ws[f"A{row}"].font = Font(bold=True, size=14)
        ws.merge_cells(f"A{row}:D{row}")
        row += 1

        if not snapshot.missing_months:
            ws[f"A{row}"] = "None"
        for year_month in snapshot.missing_months:
            ws[f"A{row}"] = year_month
            ws[f"A{row}"].fill = self.MISSING_FILL
            ws[f"A{row}"].border = self.THIN_BORDER
            ws[f"B{row}"] = "No budget recorded"
            row += 1

        self._auto_adjust_columns(ws)

    def _create_breakdown_sheet(
        self,
        workbook: Workbook,
        snapshot: CalculationSnapshot
    ) -> None:
        """
        Creates the Monthly Breakdown sheet with per-month detail.

        Args:
            workbook: Target workbook.
            snapshot: Calculation data.
        """
        ws = workbook.create_sheet("Monthly Breakdown")

        for col, header in enumerate(self.BREAKDOWN_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        row_idx = 1
        for row_idx, contribution in enumerate(snapshot.contributions, start=2):
            row_data = [
                contribution.year_month,
                contribution.amount,
                contribution.days_in_month,
                contribution.daily_rate,
                contribution.overlapping_days,
                contribution.effective_amount,
            ]

            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER
                if col_idx in [2, 4, 6]:  # Amount columns
                    cell.number_format = self.AMOUNT_FORMAT

            if contribution.effective_amount == 0:
                for col_idx in range(1, len(self.BREAKDOWN_HEADERS) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = self.ZERO_FILL

        total_row = row_idx + 1
        ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
        total_cell = ws.cell(row=total_row, column=6, value=snapshot.total_amount)
        total_cell.font = Font(bold=True)
        total_cell.number_format = self.AMOUNT_FORMAT

        self._auto_adjust_columns(ws)

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            # Add padding and set minimum width
            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "budget_report") -> str:
        """
        Generates a timestamped filename for reports.

        Args:
            prefix: Filename prefix. Defaults to "budget_report".

        Returns:
            Filename like "budget_report_2018-03-10_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
