"""Markdown rendering of attendance reports for CLI output."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, TextIO

from .errors import KintaiError
from .models import DailySummary, MonthlySummary, Session

if TYPE_CHECKING:
    from .engine import AttendanceReport

TIME_FMT = "%H:%M"
DATE_FMT = "%Y/%m/%d"


class SummaryPrinter:
    """Render daily and monthly tables to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def print_summary(self, report: "AttendanceReport") -> None:
        self.stream.write(render_summary(report))


def decimal_hours(net_minutes: int) -> Decimal:
    return (Decimal(net_minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_hours(net_minutes: int) -> str:
    """Format minutes as ``8h00m (8.00h)``."""
    hours, minutes = divmod(net_minutes, 60)
    return f"{hours}h{minutes:02d}m ({decimal_hours(net_minutes)}h)"


def format_salary(salary: Decimal) -> str:
    return f"{salary:.2f}"


def format_time_ranges(session: Session) -> str:
    return ",".join(
        f"{interval.start.strftime(TIME_FMT)}~{interval.end.strftime(TIME_FMT)}"
        for interval in session.work_intervals()
    )


def render_daily_table(days: Iterable[DailySummary]) -> str:
    lines = ["| date | time | hours | content |", "|------|------|-------|---------|"]
    for day in days:
        times = ",".join(format_time_ranges(session) for session in day.sessions)
        notes = " / ".join(session.note for session in day.sessions if session.note)
        lines.append(
            f"| {day.date.strftime(DATE_FMT)} | {times} | {format_hours(day.net_minutes)} "
            f"| {_escape_cell(notes)} |"
        )
    return "\n".join(lines) + "\n"


def render_monthly_table(months: Iterable[MonthlySummary]) -> str:
    lines = ["| month | hours | salary |", "|-------|-------|--------|"]
    for month in months:
        lines.append(f"| {month.label} | {month.hours} | {format_salary(month.salary)} |")
    return "\n".join(lines) + "\n"


def render_summary(report: "AttendanceReport") -> str:
    return render_daily_table(report.days) + "\n" + render_monthly_table(report.months)


def describe_error(error: KintaiError) -> str:
    return f"{type(error).__name__}: {error}"


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")
