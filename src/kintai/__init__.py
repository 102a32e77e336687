"""Attendance log recorder and reporter."""

from .engine import AttendanceReport, build_report
from .models import DailySummary, Event, EventKind, Interval, MonthlySummary, Session

__all__ = [
    "AttendanceReport",
    "DailySummary",
    "Event",
    "EventKind",
    "Interval",
    "MonthlySummary",
    "Session",
    "build_report",
]

__version__ = "0.1.0"
