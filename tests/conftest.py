import pytest


@pytest.fixture
def workday_lines() -> list[str]:
    return [
        "ts=2024-05-02T09:00:00+09:00 type=start",
        "ts=2024-05-02T12:00:00+09:00 type=break_start",
        "ts=2024-05-02T13:00:00+09:00 type=break_end",
        'ts=2024-05-02T18:00:00+09:00 type=finish content="wrote invoices"',
    ]
