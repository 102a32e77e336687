import io
from decimal import Decimal

import pytest

from kintai.aggregation import summarize_days, summarize_months
from kintai.engine import build_report
from kintai.errors import UnexpectedStart
from kintai.models import EventKind
from kintai.reporting import (
    SummaryPrinter,
    describe_error,
    format_hours,
    format_salary,
    render_daily_table,
    render_monthly_table,
)

from helpers import event, session


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, "0h00m (0.00h)"),
        (480, "8h00m (8.00h)"),
        (525, "8h45m (8.75h)"),
        (61, "1h01m (1.02h)"),
        (6001, "100h01m (100.02h)"),
    ],
)
def test_format_hours(minutes, expected):
    assert format_hours(minutes) == expected


def test_format_salary():
    assert format_salary(Decimal("280")) == "280.00"


def test_daily_table_joins_sessions_and_notes():
    days, _ = summarize_days(
        [
            session("2024-05-02", "09:00", "12:00", note="mail"),
            session("2024-05-02", "13:00", "18:00", ("15:00", "15:30"), note="a|b"),
        ]
    )

    table = render_daily_table(days)

    assert table.splitlines()[2] == (
        "| 2024/05/02 | 09:00~12:00,13:00~15:00,15:30~18:00 | 7h30m (7.50h) | mail / a\\|b |"
    )


def test_monthly_table():
    days, _ = summarize_days([session("2024-05-02", "09:00", "18:00", ("12:00", "13:00"))])
    months = summarize_months(days, Decimal("35"))

    assert render_monthly_table(months).splitlines() == [
        "| month | hours | salary |",
        "|-------|-------|--------|",
        "| 2024-05 | 8h00m (8.00h) | 280.00 |",
    ]


def test_summary_printer_writes_both_tables(workday_lines):
    stream = io.StringIO()

    SummaryPrinter(stream).print_summary(build_report(workday_lines, Decimal("35")))

    output = stream.getvalue()
    assert "| 2024/05/02 | 09:00~12:00,13:00~18:00 | 8h00m (8.00h) | wrote invoices |" in output
    assert "| 2024-05 | 8h00m (8.00h) | 280.00 |" in output
    assert "\n\n| month |" in output


def test_describe_error_names_the_error_type():
    error = UnexpectedStart(event(EventKind.START, "2024-05-02", "10:00"), "working")

    assert describe_error(error).startswith("UnexpectedStart: unexpected start at 2024-05-02T10:00:00+09:00")


def test_hours_agree_with_the_clock_times_shown():
    lines = [
        "ts=2024-05-02T09:00:45+09:00 type=start",
        "ts=2024-05-02T12:00:50+09:00 type=break_start",
        "ts=2024-05-02T13:00:10+09:00 type=break_end",
        "ts=2024-05-02T18:00:15+09:00 type=finish",
    ]

    report = build_report(lines)

    assert report.days[0].net_minutes == 480
    assert render_daily_table(report.days).splitlines()[2] == (
        "| 2024/05/02 | 09:00~12:00,13:00~18:00 | 8h00m (8.00h) |  |"
    )
