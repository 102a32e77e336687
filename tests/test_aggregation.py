from datetime import date
from decimal import Decimal

import pytest

from kintai.aggregation import (
    compute_salary,
    session_net_minutes,
    summarize_days,
    summarize_months,
)
from kintai.errors import NegativeDurationError
from kintai.models import Interval, Session

from helpers import at, session


def test_net_minutes_subtracts_breaks():
    item = session("2024-05-02", "09:00", "18:00", ("12:00", "13:00"), ("15:00", "15:15"))

    assert session_net_minutes(item) == 9 * 60 - 75


def test_breaks_longer_than_span_are_flagged_not_clamped():
    day = "2024-05-02"
    item = Session(
        span=Interval(at(day, "09:00"), at(day, "10:00")),
        breaks=(
            Interval(at(day, "09:00"), at(day, "10:00")),
            Interval(at(day, "09:00"), at(day, "09:30")),
        ),
    )

    with pytest.raises(NegativeDurationError):
        session_net_minutes(item)

    days, errors = summarize_days([item, session(day, "11:00", "12:00")])
    assert [e.session for e in errors] == [item]
    assert days[0].net_minutes == 60


def test_sessions_group_by_start_date():
    late = session("2024-05-03", "22:00", "23:59")
    early = session("2024-05-02", "09:00", "17:00")
    overnight = Session(span=Interval(at("2024-05-02", "20:00"), at("2024-05-03", "02:00")))

    days, errors = summarize_days([late, overnight, early])

    assert errors == []
    assert [d.date for d in days] == [date(2024, 5, 2), date(2024, 5, 3)]
    assert days[0].sessions == (early, overnight)
    assert days[0].net_minutes == 8 * 60 + 6 * 60
    assert days[1].net_minutes == 119


def test_two_days_in_one_month_roll_up():
    days, _ = summarize_days(
        [
            session("2024-05-02", "09:00", "17:00"),
            session("2024-05-20", "10:00", "12:30"),
            session("2024-06-01", "09:00", "10:00"),
        ]
    )

    months = summarize_months(days, Decimal("10"))

    assert [(m.year, m.month) for m in months] == [(2024, 5), (2024, 6)]
    may = months[0]
    assert may.net_minutes == 480 + 150
    assert may.net_minutes == sum(d.net_minutes for d in may.days)
    assert may.salary == Decimal("105.00")
    assert may.label == "2024-05"


def test_single_eight_hour_month_at_35():
    days, _ = summarize_days([session("2024-05-02", "09:00", "18:00", ("12:00", "13:00"))])

    (month,) = summarize_months(days, Decimal("35.0"))

    assert month.hours == "8h00m (8.00h)"
    assert month.salary == 280


def test_rate_defaults_to_zero():
    days, _ = summarize_days([session("2024-05-02", "09:00", "10:00")])

    assert summarize_months(days)[0].salary == 0


@pytest.mark.parametrize(
    "minutes, rate, expected",
    [
        (1, "1", "0.02"),
        (90, "33.33", "50.00"),
        (3, "0.1", "0.01"),
        (1, "0.3", "0.01"),
    ],
)
def test_salary_rounds_half_up_once(minutes, rate, expected):
    assert compute_salary(minutes, Decimal(rate)) == Decimal(expected)


def test_interval_cannot_end_before_it_starts():
    with pytest.raises(ValueError):
        Interval(at("2024-05-02", "10:00"), at("2024-05-02", "09:00"))


def test_minutes_count_whole_clock_minutes():
    start = at("2024-05-02", "09:00").replace(second=59)
    end = at("2024-05-02", "10:30").replace(second=1)

    item = Session(span=Interval(start, end))

    assert item.net_duration.total_seconds() == 89 * 60 + 2
    assert session_net_minutes(item) == 90
