"""Roll sessions up into daily and monthly summaries."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from .errors import NegativeDurationError
from .models import DailySummary, MonthlySummary, Session

logger = logging.getLogger(__name__)

SALARY_QUANTUM = Decimal("0.01")


def session_net_minutes(session: Session) -> int:
    """Return worked minutes for a session, refusing negative results."""
    if session.net_duration.total_seconds() < 0 or session.net_minutes < 0:
        raise NegativeDurationError(session)
    return session.net_minutes


def compute_salary(net_minutes: int, rate: Union[Decimal, int, str]) -> Decimal:
    """Salary for ``net_minutes`` at an hourly ``rate``, rounded half-up to cents."""
    amount = Decimal(net_minutes) * Decimal(rate) / Decimal(60)
    return amount.quantize(SALARY_QUANTUM, rounding=ROUND_HALF_UP)


def summarize_days(
    sessions: Iterable[Session],
) -> tuple[list[DailySummary], list[NegativeDurationError]]:
    """Group sessions by the calendar date of their start.

    Sessions whose breaks outweigh their span are left out and returned as
    errors instead.
    """
    buckets: defaultdict[date, list[Session]] = defaultdict(list)
    errors: list[NegativeDurationError] = []
    for session in sessions:
        try:
            session_net_minutes(session)
        except NegativeDurationError as exc:
            logger.debug("Excluding session: %s", exc)
            errors.append(exc)
            continue
        buckets[session.date].append(session)

    days = [
        DailySummary(
            date=day,
            sessions=tuple(sorted(items, key=lambda session: session.span.start)),
        )
        for day, items in sorted(buckets.items())
    ]
    return days, errors


def summarize_months(
    days: Iterable[DailySummary], rate: Union[Decimal, int, str] = 0
) -> list[MonthlySummary]:
    buckets: defaultdict[tuple[int, int], list[DailySummary]] = defaultdict(list)
    for day in days:
        buckets[(day.date.year, day.date.month)].append(day)

    months: list[MonthlySummary] = []
    for (year, month), items in sorted(buckets.items()):
        items.sort(key=lambda day: day.date)
        net_minutes = sum(day.net_minutes for day in items)
        months.append(
            MonthlySummary(
                year=year,
                month=month,
                net_minutes=net_minutes,
                salary=compute_salary(net_minutes, rate),
                days=tuple(items),
            )
        )
    return months
