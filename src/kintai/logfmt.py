"""Minimal logfmt encoder/decoder for attendance log lines."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from .models import Event

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<key>[^\s=]+)
    (?:=(?:"(?P<quoted>(?:[^"\\]|\\.)*)"|(?P<bare>[^\s"]*)))?
    (?=\s|$)
    """,
    re.VERBOSE,
)
_NEEDS_QUOTES = re.compile(r'[\s"=\\]')
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "\\": "\\"}
_ESCAPE_PATTERN = re.compile(r"\\(u[0-9a-fA-F]{4}|.)")
# Everything else str.splitlines() breaks on.
_LINE_BREAKS = re.compile("[\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029]")


class LogfmtError(ValueError):
    """Raised when a line is not valid logfmt."""


def encode(fields: Mapping[str, str] | Iterable[tuple[str, str]]) -> str:
    """Encode key/value pairs as one logfmt line, preserving order."""
    items = fields.items() if isinstance(fields, Mapping) else fields
    return " ".join(f"{key}={_quote(value)}" for key, value in items)


def decode(line: str) -> dict[str, str]:
    """Decode one logfmt line into a dictionary; later keys win."""
    fields: dict[str, str] = {}
    position = 0
    text = line.strip()
    while position < len(text):
        if text[position].isspace():
            position += 1
            continue
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise LogfmtError(f"cannot decode near column {position + 1}: {text[position:]!r}")
        key = match.group("key")
        if match.group("quoted") is not None:
            fields[key] = _unescape(match.group("quoted"))
        elif match.group("bare") is not None:
            fields[key] = match.group("bare")
        else:
            raise LogfmtError(f"key {key!r} has no value")
        position = match.end()
    return fields


def encode_event(event: Event) -> str:
    fields = [("ts", event.timestamp.isoformat()), ("type", event.kind.value)]
    if event.note is not None:
        fields.append(("content", event.note))
    return encode(fields)


def _quote(value: str) -> str:
    if value and not _NEEDS_QUOTES.search(value):
        return value
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    escaped = _LINE_BREAKS.sub(lambda m: f"\\u{ord(m.group(0)):04x}", escaped)
    return f'"{escaped}"'


def _unescape(value: str) -> str:
    return _ESCAPE_PATTERN.sub(_unescape_one, value)


def _unescape_one(match: re.Match[str]) -> str:
    code = match.group(1)
    if len(code) == 5 and code.startswith("u"):
        return chr(int(code[1:], 16))
    return _ESCAPES.get(code, match.group(0))
