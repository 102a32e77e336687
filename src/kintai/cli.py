"""Command-line interface for the attendance log."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .config import ReportSettings, load_settings
from .engine import AttendanceReport, build_report, read_lines
from .errors import BadTimestamp, ConfigError
from .logfmt import encode_event
from .models import Event, EventKind
from .parser import parse_timestamp
from .reporting import SummaryPrinter, describe_error

app = typer.Typer(help="kintai: attendance log recorder and reporter.")
logger = logging.getLogger(__name__)

_AT_OPTION = typer.Option(
    None,
    "--at",
    help="Record this ISO 8601 timestamp (with offset) instead of the current time.",
)
_INPUT_OPTION = typer.Option(
    None,
    "--input",
    "-i",
    path_type=Path,
    help="Attendance log to read. Defaults to standard input.",
)
_RATE_OPTION = typer.Option(
    None, "--rate", "-r", min=0.0, help="Hourly rate used to compute salary."
)
_STRICT_OPTION = typer.Option(
    None,
    "--strict/--lenient",
    help="Treat any malformed line or session problem as fatal.",
)
_CONFIG_OPTION = typer.Option(
    None, "--config", path_type=Path, help="Settings file (TOML)."
)


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def start(at: Optional[str] = _AT_OPTION) -> None:
    """Record the start of a work session."""
    _record(EventKind.START, at)


@app.command()
def finish(
    content: Optional[str] = typer.Argument(None, help="What was worked on."),
    at: Optional[str] = _AT_OPTION,
) -> None:
    """Record the end of a work session."""
    _record(EventKind.FINISH, at, content)


@app.command("break-start")
def break_start(at: Optional[str] = _AT_OPTION) -> None:
    """Record the start of a break."""
    _record(EventKind.BREAK_START, at)


@app.command("break-end")
def break_end(at: Optional[str] = _AT_OPTION) -> None:
    """Record the end of a break."""
    _record(EventKind.BREAK_END, at)


@app.command()
def summary(
    input_path: Optional[Path] = _INPUT_OPTION,
    rate: Optional[float] = _RATE_OPTION,
    strict: Optional[bool] = _STRICT_OPTION,
    config_path: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Print daily and monthly attendance tables in Markdown."""
    report = _load_report(input_path, config_path, rate, strict)
    SummaryPrinter(sys.stdout).print_summary(report)


@app.command()
def excel(
    output: Path = typer.Option(
        ..., "--output", "-o", path_type=Path, help="Spreadsheet file to write (.xlsx)."
    ),
    month: Optional[str] = typer.Option(
        None, "--month", "-m", help="Month (YYYY-MM) to export. Defaults to the latest one."
    ),
    input_path: Optional[Path] = _INPUT_OPTION,
    rate: Optional[float] = _RATE_OPTION,
    strict: Optional[bool] = _STRICT_OPTION,
    config_path: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Export one month of sessions to a spreadsheet."""
    from .excel import export_month

    target: Optional[datetime] = None
    if month:
        try:
            target = datetime.strptime(month, "%Y-%m")
        except ValueError as exc:
            raise typer.BadParameter("expected YYYY-MM", param_hint="--month") from exc

    report = _load_report(input_path, config_path, rate, strict)
    if target is None:
        latest = report.latest_month()
        if latest is None:
            _fail("No sessions recorded; nothing to export.")
        target = datetime(latest.year, latest.month, 1)

    try:
        path = export_month(report, target.year, target.month, output)
    except LookupError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Cannot write {output}: {exc}")
    typer.echo(f"Wrote {path}")


def _record(kind: EventKind, at: Optional[str], content: Optional[str] = None) -> None:
    if at is None:
        timestamp = datetime.now().astimezone().replace(microsecond=0)
    else:
        try:
            timestamp = parse_timestamp(at)
        except BadTimestamp as exc:
            raise typer.BadParameter(exc.reason, param_hint="--at") from exc
    typer.echo(encode_event(Event(timestamp=timestamp, kind=kind, note=content)))


def _load_report(
    input_path: Optional[Path],
    config_path: Optional[Path],
    rate: Optional[float],
    strict: Optional[bool],
) -> AttendanceReport:
    try:
        settings: ReportSettings = load_settings(config_path).override(rate=rate, strict=strict)
    except ConfigError as exc:
        _fail(f"Configuration error: {exc}")

    try:
        lines = read_lines(input_path)
    except OSError as exc:
        _fail(f"Cannot read {input_path}: {exc}")

    report = build_report(lines, settings.hourly_rate)
    level = logging.ERROR if settings.strict else logging.WARNING
    for error in report.errors:
        logger.log(level, "%s", describe_error(error))
    if settings.strict and report.errors:
        _fail(f"{len(report.errors)} problem(s) found in the log; no report written.")
    return report


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)
