"""Rebuild work sessions from a flat sequence of attendance events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Union

from .errors import (
    StateError,
    UnexpectedBreakEnd,
    UnexpectedBreakStart,
    UnexpectedFinish,
    UnexpectedStart,
    UnterminatedSession,
)
from .models import Event, EventKind, Interval, Session

logger = logging.getLogger(__name__)

# Closing events sort before opening ones when timestamps are equal.
_KIND_PRIORITY: dict[EventKind, int] = {
    EventKind.BREAK_END: 0,
    EventKind.FINISH: 1,
    EventKind.BREAK_START: 2,
    EventKind.START: 3,
}

ReconstructionError = Union[StateError, UnterminatedSession]


class State(str, Enum):
    IDLE = "idle"
    WORKING = "working"
    ON_BREAK = "on break"


@dataclass(frozen=True, slots=True)
class Reconstruction:
    """Snapshot of the reconstructor between two events."""

    state: State = State.IDLE
    start: Optional[Event] = None
    breaks: tuple[Interval, ...] = ()
    break_start: Optional[datetime] = None


@dataclass(slots=True)
class ReconstructionResult:
    sessions: list[Session] = field(default_factory=list)
    errors: list[ReconstructionError] = field(default_factory=list)


IDLE = Reconstruction()


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Order events by instant, preferring closing events on ties.

    The sort is stable, so events that tie on both keys keep input order.
    """
    return sorted(events, key=lambda event: (event.timestamp, _KIND_PRIORITY[event.kind]))


def transition(
    current: Reconstruction, event: Event
) -> tuple[Reconstruction, Optional[Session]]:
    """Apply one event, returning the next snapshot and any session it closes.

    Raises the matching ``StateError`` subclass when the event is not allowed
    in the current state; ``current`` is never modified.
    """
    state = current.state
    if event.kind is EventKind.START:
        if state is not State.IDLE:
            raise UnexpectedStart(event, state.value)
        return Reconstruction(state=State.WORKING, start=event), None

    if event.kind is EventKind.BREAK_START:
        if state is not State.WORKING:
            raise UnexpectedBreakStart(event, state.value)
        return replace(current, state=State.ON_BREAK, break_start=event.timestamp), None

    if event.kind is EventKind.BREAK_END:
        if state is not State.ON_BREAK or current.break_start is None:
            raise UnexpectedBreakEnd(event, state.value)
        interval = Interval(current.break_start, event.timestamp)
        return (
            replace(
                current,
                state=State.WORKING,
                breaks=current.breaks + (interval,),
                break_start=None,
            ),
            None,
        )

    if state is not State.WORKING or current.start is None:
        raise UnexpectedFinish(event, state.value)
    session = Session(
        span=Interval(current.start.timestamp, event.timestamp),
        breaks=current.breaks,
        note=event.note,
    )
    return IDLE, session


def reconstruct(events: Iterable[Event]) -> ReconstructionResult:
    """Fold events into closed sessions, collecting every integrity problem.

    An event that does not fit the current state is reported and skipped. A
    second ``start`` inside an open session is the exception: the open session
    is reported as unterminated and dropped, and a new one begins. Whatever is
    still open when the events run out is reported and never emitted.
    """
    result = ReconstructionResult()
    current = IDLE
    for event in sort_events(events):
        try:
            current, session = transition(current, event)
        except UnexpectedStart as exc:
            logger.debug("Abandoning open session: %s", exc)
            result.errors.append(exc)
            if current.start is not None:
                result.errors.append(
                    UnterminatedSession(
                        current.start, current.state.value, reason="restarted"
                    )
                )
            current = Reconstruction(state=State.WORKING, start=event)
            continue
        except StateError as exc:
            logger.debug("Skipping event: %s", exc)
            result.errors.append(exc)
            continue
        if session is not None:
            result.sessions.append(session)

    if current.state is not State.IDLE and current.start is not None:
        result.errors.append(UnterminatedSession(current.start, current.state.value))
    logger.debug(
        "Reconstructed %d sessions with %d problems.",
        len(result.sessions),
        len(result.errors),
    )
    return result
