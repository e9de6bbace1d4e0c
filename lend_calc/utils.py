"""Utility functions for the lending calculator.

This module provides the single money rounding routine shared by the
amortization and penalty paths, calendar-aware period arithmetic and helpers
for parsing user input into ``Decimal`` and ``datetime.date`` values.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

from .config import DAYS_PER_WEEK, DECIMAL_PRECISION, MONEY_QUANTUM
from .data_models import TERM_UNIT_MONTHS, TERM_UNIT_WEEKS, TERM_UNITS
from .exceptions import AmountOutOfRangeError, UnsupportedOptionError

getcontext().prec = DECIMAL_PRECISION  # increase precision for financial calculations

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Return ``value`` as a ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    """Round a monetary amount to cents, half away from zero.

    ``Decimal`` keeps inputs such as ``2.005`` exact, so the value rounds to
    ``2.01`` without any epsilon adjustment.

    Raises
    ------
    AmountOutOfRangeError
        If the rounded amount needs more digits than the working precision.
    """
    try:
        return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise AmountOutOfRangeError(value) from exc


def to_date(value: Union[date, datetime]) -> date:
    """Strip the time of day from ``value``."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_periods(dt: date, periods: int, term_unit: str) -> date:
    """Advance ``dt`` by a number of weekly or monthly periods.

    Monthly periods keep the day of month and clamp it to the end of shorter
    months (Jan 31 plus one month is Feb 28), they never roll over into the
    following month.
    """
    if term_unit == TERM_UNIT_WEEKS:
        return dt + timedelta(days=DAYS_PER_WEEK * periods)
    if term_unit == TERM_UNIT_MONTHS:
        return add_months(dt, periods)
    raise UnsupportedOptionError("term unit", term_unit, TERM_UNITS)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date`` object.

    Raises
    ------
    ValueError
        If the string is not a valid ISO date.
    """
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails or the value is not
    finite.
    """
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result
