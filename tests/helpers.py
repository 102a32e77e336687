from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from kintai.models import Event, EventKind, Interval, Session

JST = timezone(timedelta(hours=9))


def at(day: str, clock: str, tz: timezone = JST) -> datetime:
    return datetime.fromisoformat(f"{day}T{clock}:00").replace(tzinfo=tz)


def event(kind: EventKind, day: str, clock: str, note: Optional[str] = None) -> Event:
    return Event(timestamp=at(day, clock), kind=kind, note=note)


def session(day: str, start: str, end: str, *breaks: tuple[str, str], note: Optional[str] = None) -> Session:
    return Session(
        span=Interval(at(day, start), at(day, end)),
        breaks=tuple(Interval(at(day, b_start), at(day, b_end)) for b_start, b_end in breaks),
        note=note,
    )
