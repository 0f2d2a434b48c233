"""Utility functions for the loan math package.

This module provides helpers for coercing user input into ``Decimal`` values,
converting loan terms expressed in years into months and rounding results to
whole currency units at the output boundary.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

from .errors import InvalidInputError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Convert a numeric value into a ``Decimal``.

    Floats go through their string form so that ``0.1`` becomes exactly
    ``Decimal("0.1")``. Strings may carry thousands separators. NaN and
    infinity are rejected.
    """
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "must be a number")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(field, value, "must be a number") from exc
    if not result.is_finite():
        raise InvalidInputError(field, value, "must be a finite number")
    return result


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual percentage rate into a monthly decimal rate."""
    return annual_rate / HUNDRED / MONTHS_PER_YEAR


def whole_months(value: Number, field: str = "months") -> int:
    """Return a month count as ``int``.

    Fractions, NaN, infinity, strings and booleans are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInputError(field, value, "must be a whole number")
    result = to_decimal(value, field)
    if result != result.to_integral_value():
        raise InvalidInputError(field, value, "must be a whole number")
    return int(result)


def months_from_years(years: Number) -> int:
    """Return the number of months in ``years``, rounded half up.

    ``2.5`` years gives 30 months; ``1.04`` years gives 12 months.
    """
    value = to_decimal(years, "years") * MONTHS_PER_YEAR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_currency(value: Decimal, places: int = 0) -> Decimal:
    """Round a currency amount for display (whole units by default)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
