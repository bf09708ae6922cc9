"""
Decimal parsing for loosely typed numeric input (form fields arrive as text).
"""

from decimal import Decimal, InvalidOperation
from typing import Any


ZERO = Decimal("0")


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty once stripped."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_decimal(value: Any) -> Decimal | None:
    """
    Parse a number into a finite Decimal.

    Returns None for blank input, booleans, non-numeric text, NaN and infinities.
    """
    if is_blank(value) or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        # str() avoids dragging binary float noise into the decimal
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not parsed.is_finite():
        return None
    return parsed


def is_valid_number(value: Any) -> bool:
    """
    A value is valid when it is blank (left to required checks)
    or parses to a real number >= 0.
    """
    if is_blank(value):
        return True
    parsed = parse_decimal(value)
    return parsed is not None and parsed >= 0


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Parse a number, falling back to ``default`` for blank or bad input."""
    parsed = parse_decimal(value)
    return default if parsed is None else parsed


def fits_numeric(value: Any, precision: int, scale: int) -> bool:
    """
    True when ``value`` can be stored in a NUMERIC(precision, scale) column
    without rounding or overflow. Blank and unparseable input is left to the
    other checks.
    """
    parsed = parse_decimal(value)
    if parsed is None:
        return True
    if parsed.normalize().as_tuple().exponent < -scale:
        return False
    return abs(parsed) < Decimal(10) ** (precision - scale)
