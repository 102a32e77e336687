"""Domain models for attendance events, sessions and summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional


class EventKind(str, Enum):
    """The four event types written to an attendance log."""

    START = "start"
    FINISH = "finish"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


@dataclass(frozen=True, slots=True)
class Event:
    """A single decoded log line."""

    timestamp: datetime
    kind: EventKind
    note: Optional[str] = None
    line_no: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Interval:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"interval ends before it starts: {self.start.isoformat()} > {self.end.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Session:
    """A closed work period and the breaks taken inside it."""

    span: Interval
    breaks: tuple[Interval, ...] = ()
    note: Optional[str] = None

    @property
    def date(self) -> date:
        # The offset recorded with the start timestamp decides the day.
        return self.span.start.date()

    @property
    def break_duration(self) -> timedelta:
        return sum((interval.duration for interval in self.breaks), timedelta())

    @property
    def net_duration(self) -> timedelta:
        return self.span.duration - self.break_duration

    @property
    def net_minutes(self) -> int:
        """Worked minutes counted on the ``HH:MM`` clock times shown in reports."""
        return _clock_minutes(self.span) - self.break_minutes

    @property
    def break_minutes(self) -> int:
        return sum(_clock_minutes(interval) for interval in self.breaks)

    def work_intervals(self) -> list[Interval]:
        """Return the parts of the span not covered by a break."""
        intervals: list[Interval] = []
        cursor = self.span.start
        for interval in self.breaks:
            intervals.append(Interval(cursor, interval.start))
            cursor = interval.end
        intervals.append(Interval(cursor, self.span.end))
        return intervals


@dataclass(frozen=True, slots=True)
class DailySummary:
    date: date
    sessions: tuple[Session, ...] = ()

    @property
    def net_minutes(self) -> int:
        return sum(session.net_minutes for session in self.sessions)

    @property
    def break_minutes(self) -> int:
        return sum(session.break_minutes for session in self.sessions)


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    """Worked time and salary for one calendar month."""

    year: int
    month: int
    net_minutes: int
    salary: Decimal = Decimal(0)
    days: tuple[DailySummary, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def hours(self) -> str:
        from .reporting import format_hours

        return format_hours(self.net_minutes)


def _clock_minutes(interval: Interval) -> int:
    start = interval.start.replace(second=0, microsecond=0)
    end = interval.end.replace(second=0, microsecond=0)
    return int((end - start).total_seconds() // 60)
