"""Spreadsheet export of a single month."""

from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .engine import AttendanceReport
from .reporting import TIME_FMT, decimal_hours

logger = logging.getLogger(__name__)

HEADERS = ("Date", "Start", "End", "Break", "Hours", "Content")


def export_month(report: AttendanceReport, year: int, month: int, path: Path) -> Path:
    """Write one worksheet with every session of the month and a total row.

    Raises ``LookupError`` when the report has nothing for that month.
    """
    summary = report.month(year, month)
    if summary is None:
        raise LookupError(f"no sessions recorded for {year:04d}-{month:02d}")

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = summary.label
    worksheet.append(HEADERS)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for day in summary.days:
        for session in day.sessions:
            worksheet.append(
                [
                    day.date,
                    session.span.start.strftime(TIME_FMT),
                    session.span.end.strftime(TIME_FMT),
                    session.break_minutes,
                    decimal_hours(session.net_minutes),
                    session.note,
                ]
            )
            worksheet.cell(row=worksheet.max_row, column=1).number_format = "yyyy-mm-dd"

    worksheet.append([])
    worksheet.append(["Total", None, None, None, summary.hours, None])
    worksheet.append(["Salary", None, None, None, summary.salary, None])
    for row in worksheet.iter_rows(min_row=worksheet.max_row - 1):
        row[0].font = Font(bold=True)

    _fit_columns(worksheet)
    path = Path(path)
    workbook.save(path)
    logger.debug("Wrote %s with %d days to %s", summary.label, len(summary.days), path)
    return path


def _fit_columns(worksheet) -> None:
    for index, column in enumerate(worksheet.iter_cols(), start=1):
        width = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        worksheet.column_dimensions[get_column_letter(index)].width = max(width + 4, 10)
