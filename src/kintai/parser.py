"""Decode raw log lines into events."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Iterator, Optional, Union

from .errors import BadTimestamp, MalformedLine, ParseError, UnknownEventKind
from .logfmt import LogfmtError, decode
from .models import Event, EventKind

# Other writers emit nanoseconds; datetime only keeps microseconds.
_EXTRA_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")

ParseResult = Union[Event, ParseError]


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC3339 timestamp that must carry a UTC offset."""
    try:
        parsed = datetime.fromisoformat(_EXTRA_FRACTION_PATTERN.sub(r"\1", value))
    except ValueError as exc:
        raise BadTimestamp(f"invalid timestamp {value!r}") from exc
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise BadTimestamp(f"timestamp {value!r} has no UTC offset")
    return parsed


def parse_line(line: str, line_no: Optional[int] = None) -> Event:
    """Decode a single non-blank line, raising a ``ParseError`` subclass on failure."""
    try:
        fields = decode(line)
    except LogfmtError as exc:
        raise MalformedLine(str(exc), line=line, line_no=line_no) from exc

    missing = [key for key in ("ts", "type") if key not in fields]
    if missing:
        raise MalformedLine(
            f"missing field(s): {', '.join(missing)}", line=line, line_no=line_no
        )

    try:
        kind = EventKind(fields["type"])
    except ValueError as exc:
        raise UnknownEventKind(
            f"unknown event type {fields['type']!r}", line=line, line_no=line_no
        ) from exc

    try:
        timestamp = parse_timestamp(fields["ts"])
    except BadTimestamp as exc:
        raise BadTimestamp(exc.reason, line=line, line_no=line_no) from exc

    return Event(timestamp=timestamp, kind=kind, note=fields.get("content"), line_no=line_no)


def parse_lines(lines: Iterable[str]) -> Iterator[ParseResult]:
    """Lazily decode lines in input order, yielding events or parse errors.

    Blank lines are skipped; line numbers are 1-based and count blank lines.
    """
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield parse_line(line.rstrip("\r\n"), line_no)
        except ParseError as exc:
            yield exc
