"""
Due date normalization tests.
"""

from datetime import date, datetime, timezone

import pytest

from invoicedesk.utils.dates import normalize_due_date, parse_due_date


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-11-18", "2026-11-18"),
        ("2026-11-18T00:00:00.000Z", "2026-11-18"),
        ("2026-11-18T23:30:00+05:00", "2026-11-18"),
        ("  2026-11-18 ", "2026-11-18"),
        (date(2026, 11, 18), "2026-11-18"),
        (datetime(2026, 11, 18, 15, 0, tzinfo=timezone.utc), "2026-11-18"),
    ],
)
def test_normalize_to_bare_date(value, expected):
    assert normalize_due_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "tomorrow", "2026-13-01", "2026-02-30T10:00:00", 42])
def test_unreadable_values_give_none(value):
    assert normalize_due_date(value) is None


def test_parse_due_date_returns_date():
    assert parse_due_date("2026-11-18T10:00:00Z") == date(2026, 11, 18)
    assert parse_due_date("nope") is None
