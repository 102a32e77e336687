"""End-to-end pipeline from raw log lines to an attendance report."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional, Union

from .aggregation import summarize_days, summarize_months
from .errors import KintaiError, ParseError
from .models import DailySummary, Event, MonthlySummary
from .parser import parse_lines
from .sessions import reconstruct

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AttendanceReport:
    """Everything the renderers need, plus the problems found on the way."""

    days: list[DailySummary] = field(default_factory=list)
    months: list[MonthlySummary] = field(default_factory=list)
    errors: list[KintaiError] = field(default_factory=list)

    def month(self, year: int, month: int) -> Optional[MonthlySummary]:
        for summary in self.months:
            if (summary.year, summary.month) == (year, month):
                return summary
        return None

    def latest_month(self) -> Optional[MonthlySummary]:
        return self.months[-1] if self.months else None


def read_lines(path: Optional[Path] = None) -> list[str]:
    """Read the whole log up front, from ``path`` or standard input.

    Only ``\\n`` ends a line (a trailing ``\\r`` is dropped), so separators that
    ``str.splitlines`` would also honour stay inside their line.
    """
    if path is None:
        text = sys.stdin.read()
    else:
        with Path(path).open(encoding="utf-8", newline="") as handle:
            text = handle.read()
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def build_report(
    lines: Iterable[str], rate: Union[Decimal, int, str] = 0
) -> AttendanceReport:
    events: list[Event] = []
    errors: list[KintaiError] = []
    for item in parse_lines(lines):
        if isinstance(item, ParseError):
            errors.append(item)
        else:
            events.append(item)

    reconstruction = reconstruct(events)
    errors.extend(reconstruction.errors)

    days, negative = summarize_days(reconstruction.sessions)
    errors.extend(negative)
    months = summarize_months(days, rate)
    logger.debug(
        "Built report: %d events, %d days, %d months, %d problems.",
        len(events),
        len(days),
        len(months),
        len(errors),
    )
    return AttendanceReport(days=days, months=months, errors=errors)
