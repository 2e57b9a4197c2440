"""Cell formatters for monetary amounts and timestamps.

Both formatters are pure and fail loudly: a value that cannot be rendered
raises instead of producing a blank or ``NaN`` cell, because a report with
silently malformed rows is worse than no report at all.
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .constants import DATE_FORMAT, FILENAME_DATE_FORMAT, REPORT_TIMEZONE, REPORT_UTC_OFFSET
from .exceptions import InvalidAmountError, InvalidDateError


TimestampLike = Union[str, datetime, date, int, float]
AmountLike = Union[Decimal, int, float, str]

_CENTS = Decimal("0.01")
# Pattern produced by format_date, accepted back so formatting is idempotent.
_REPORT_PARSE_FORMAT = f"{DATE_FORMAT} %z"


def to_decimal(value: AmountLike) -> Decimal:
    """Coerce ``value`` into a finite :class:`~decimal.Decimal`.

    Args:
        value (Decimal | int | float | str): Raw amount as delivered by the
            upstream payment summary.

    Returns:
        Decimal: Exact decimal representation of ``value``.

    Raises:
        InvalidAmountError: If ``value`` is a boolean, ``None``, a string that
            is not a number, or a non-finite number.
    """

    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # str() keeps the shortest repr so 0.1 stays 0.1 instead of its binary expansion
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidAmountError(value) from exc
    else:
        raise InvalidAmountError(value)

    if not amount.is_finite():
        raise InvalidAmountError(value)
    return amount


def format_money(value: AmountLike) -> str:
    """Render an amount with two fixed decimals and no digit grouping.

    The output mirrors a ``0.00`` number pattern: at least one integer digit,
    exactly two fractional digits, half-up rounding, and a leading minus sign
    for negative values. ``format_money(1500.5)`` gives ``"1500.50"``.

    Raises:
        InvalidAmountError: If ``value`` is not a finite number.
    """

    quantized = to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    if quantized.is_zero():
        quantized = quantized.copy_abs()
    return f"{quantized:.2f}"


def parse_timestamp(value: TimestampLike) -> datetime:
    """Parse a raw timestamp into a timezone-aware :class:`datetime`.

    Accepted inputs are ``datetime`` and ``date`` objects, ISO-8601 strings,
    strings in the report's own ``YYYY-MM-DD HH:mm:ss +07:00`` pattern, and
    integer or float epoch milliseconds. Naive values are taken as UTC.

    Args:
        value (str | datetime | date | int | float): Raw timestamp.

    Returns:
        datetime: Aware datetime representing the same instant.

    Raises:
        InvalidDateError: If ``value`` cannot be interpreted as a date/time.
    """

    if isinstance(value, bool) or value is None:
        raise InvalidDateError(value)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidDateError(value)
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidDateError(value) from exc
    elif isinstance(value, str):
        parsed = _parse_timestamp_text(value)
    else:
        raise InvalidDateError(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_timestamp_text(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise InvalidDateError(value)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, _REPORT_PARSE_FORMAT)
    except ValueError as exc:
        raise InvalidDateError(value) from exc


def _to_report_timezone(value: TimestampLike) -> datetime:
    parsed = parse_timestamp(value)
    try:
        return parsed.astimezone(REPORT_TIMEZONE)
    except OverflowError as exc:
        # Instants at the edge of the datetime range cannot be shifted to UTC+7.
        raise InvalidDateError(value) from exc


def format_date(value: TimestampLike) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:mm:ss +07:00``.

    The instant is always shifted to UTC+7, independent of the offset carried
    by ``value`` and of the host timezone.

    Raises:
        InvalidDateError: If ``value`` cannot be parsed or shown in UTC+7.
    """

    localized = _to_report_timezone(value)
    return f"{localized.strftime(DATE_FORMAT)} {REPORT_UTC_OFFSET}"


def format_report_date(value: TimestampLike) -> str:
    """Render the report date as ``DD-MM-YYYY`` in UTC+7 for file names."""

    return _to_report_timezone(value).strftime(FILENAME_DATE_FORMAT)

