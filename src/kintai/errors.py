"""Exceptions raised while reading and interpreting attendance logs.

Record-level errors (``ParseError``, ``StateError``, ``UnterminatedSession``
and ``NegativeDurationError``) are normally collected and returned next to
the usable part of a report rather than raised out of the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import Event, Session


class KintaiError(Exception):
    """Base exception for the package."""


class ConfigError(KintaiError):
    """Raised when a settings file is missing or holds invalid values."""


class ParseError(KintaiError):
    """A log line could not be decoded into an event."""

    def __init__(self, reason: str, *, line: str = "", line_no: Optional[int] = None) -> None:
        self.reason = reason
        self.line = line
        self.line_no = line_no
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{reason}")


class MalformedLine(ParseError):
    pass


class UnknownEventKind(ParseError):
    pass


class BadTimestamp(ParseError):
    pass


class StateError(KintaiError):
    """An event arrived that is not allowed in the current session state."""

    def __init__(self, event: "Event", state: str) -> None:
        self.event = event
        self.state = state
        where = f"line {event.line_no}: " if event.line_no is not None else ""
        super().__init__(
            f"{where}unexpected {event.kind.value} at {event.timestamp.isoformat()} "
            f"while {state}"
        )


class UnexpectedStart(StateError):
    pass


class UnexpectedBreakStart(StateError):
    pass


class UnexpectedBreakEnd(StateError):
    pass


class UnexpectedFinish(StateError):
    pass


class UnterminatedSession(KintaiError):
    """A session was started but never finished."""

    def __init__(self, start: "Event", state: str, *, reason: str = "log ended") -> None:
        self.start = start
        self.state = state
        where = f"line {start.line_no}: " if start.line_no is not None else ""
        super().__init__(
            f"{where}session started at {start.timestamp.isoformat()} was never "
            f"finished ({reason} while {state})"
        )


class NegativeDurationError(KintaiError):
    """Breaks inside a session add up to more than the session itself."""

    def __init__(self, session: "Session") -> None:
        self.session = session
        super().__init__(
            f"session starting {session.span.start.isoformat()} has "
            f"{session.break_duration} of breaks in a span of {session.span.duration}"
        )
