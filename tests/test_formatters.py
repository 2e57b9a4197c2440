"""Unit tests for the money and date formatters."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from disbursement_report import formatters
from disbursement_report.exceptions import InvalidAmountError, InvalidDateError, ReportError


REPORT_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \+07:00$")


# ---------------------------------------------------------------------------
# format_money
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0.00"),
        (1500.5, "1500.50"),
        (-3, "-3.00"),
        (Decimal("2.345"), "2.35"),
        (Decimal("-2.345"), "-2.35"),
        ("12.5", "12.50"),
        (" 7 ", "7.00"),
        (1234567.891, "1234567.89"),
        (0.1, "0.10"),
        (-0.001, "0.00"),
    ],
)
def test_format_money_renders_two_fixed_decimals(value, expected):
    """Amounts render with two decimals, half-up rounding and no grouping."""

    assert formatters.format_money(value) == expected


@pytest.mark.parametrize("value", ["abc", "", None, True, float("nan"), float("inf"), Decimal("NaN"), [1]])
def test_format_money_rejects_non_numeric_input(value):
    """Anything that is not a finite number fails fast."""

    with pytest.raises(InvalidAmountError) as excinfo:
        formatters.format_money(value)
    assert excinfo.value.value is value


def test_invalid_amount_error_is_a_report_error():
    """Callers can catch every formatting failure through ReportError."""

    assert issubclass(InvalidAmountError, ReportError)
    assert issubclass(InvalidAmountError, ValueError)


# ---------------------------------------------------------------------------
# format_date
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2023-01-01T00:00:00Z", "2023-01-01 07:00:00 +07:00"),
        ("2023-01-01T00:00:00.000Z", "2023-01-01 07:00:00 +07:00"),
        ("2023-01-01T10:00:00+09:00", "2023-01-01 08:00:00 +07:00"),
        ("2023-01-01", "2023-01-01 07:00:00 +07:00"),
        (datetime(2023, 1, 1, 20, 0), "2023-01-02 03:00:00 +07:00"),
        (datetime(2023, 1, 1, 20, 0, tzinfo=timezone(timedelta(hours=7))), "2023-01-01 20:00:00 +07:00"),
        (date(2023, 1, 1), "2023-01-01 07:00:00 +07:00"),
        (0, "1970-01-01 07:00:00 +07:00"),
        (1672531200000, "2023-01-01 07:00:00 +07:00"),
    ],
)
def test_format_date_renders_in_utc_plus_seven(value, expected):
    """Every timestamp is shifted to UTC+7 whatever offset it came with."""

    assert formatters.format_date(value) == expected


def test_format_date_matches_report_pattern():
    """Formatted dates follow ``YYYY-MM-DD HH:mm:ss +07:00``."""

    assert REPORT_DATE_PATTERN.match(formatters.format_date("2023-06-15T12:34:56-05:00"))


@pytest.mark.parametrize(
    "value",
    ["2023-01-01T00:00:00Z", "2023-06-15T12:34:56-05:00", datetime(2024, 2, 29, 23, 59, 59)],
)
def test_format_date_is_idempotent(value):
    """Re-formatting a formatted date yields the same string."""

    once = formatters.format_date(value)
    assert formatters.format_date(once) == once


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", "2023-13-45", None, True, object(), float("nan")])
def test_format_date_raises_invalid_date_error(value):
    """Unparseable timestamps raise InvalidDateError carrying the raw value."""

    with pytest.raises(InvalidDateError) as excinfo:
        formatters.format_date(value)
    assert excinfo.value.value is value


def test_invalid_date_error_message_mentions_value():
    """The error message names the offending input."""

    with pytest.raises(InvalidDateError, match="not-a-date"):
        formatters.format_date("not-a-date")


# ---------------------------------------------------------------------------
# parse_timestamp / format_report_date
# ---------------------------------------------------------------------------


def test_parse_timestamp_treats_naive_values_as_utc():
    """Naive datetimes are pinned to UTC so host timezones never leak in."""

    parsed = formatters.parse_timestamp("2023-01-01T00:00:00")
    assert parsed.utcoffset() == timedelta(0)


def test_parse_timestamp_orders_instants_across_offsets():
    """Timestamps with different offsets compare by their instant."""

    earlier = formatters.parse_timestamp("2023-01-01T10:00:00+09:00")
    later = formatters.parse_timestamp("2023-01-01T02:00:00Z")
    assert earlier < later


def test_format_report_date_uses_day_month_year_in_utc_plus_seven():
    """The file name date rolls over at midnight UTC+7."""

    assert formatters.format_report_date("2023-01-31T18:00:00Z") == "01-02-2023"
    assert formatters.format_report_date("2023-01-31") == "31-01-2023"


def test_format_date_out_of_range_instant_raises_invalid_date_error():
    """An instant that cannot be shifted to UTC+7 is an invalid date."""

    with pytest.raises(InvalidDateError) as excinfo:
        formatters.format_date("9999-12-31T23:00:00Z")
    assert excinfo.value.value == "9999-12-31T23:00:00Z"


def test_format_report_date_out_of_range_instant_raises_invalid_date_error():
    with pytest.raises(InvalidDateError):
        formatters.format_report_date("9999-12-31T23:00:00Z")
