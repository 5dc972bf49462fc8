"""Decimal helpers for Naira amounts"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_DOWN, ROUND_HALF_UP

from uvwie_revenue.domain.exceptions import InvalidArgumentError

WHOLE_UNIT = Decimal("1")
KOBO = Decimal("0.01")


def _round(amount: Decimal, unit: Decimal) -> Decimal:
    # Ties go towards +infinity on both signs: 2.5 -> 3, -2.5 -> -2
    rounding = ROUND_HALF_UP if amount >= 0 else ROUND_HALF_DOWN
    result = amount.quantize(unit, rounding=rounding)
    return result.copy_abs() if result.is_zero() else result


def round_to_unit(amount: Decimal) -> Decimal:
    """Round to the nearest whole Naira, ties upwards (an overpaid -0.5 becomes 0)"""
    return _round(amount, WHOLE_UNIT)


def round_to_kobo(amount: Decimal) -> Decimal:
    """Round to two decimal places (storage precision), ties upwards"""
    return _round(amount, KOBO)


def to_decimal(value, name: str = "amount") -> Decimal:
    """
    Coerce a numeric input to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Booleans, strings and
    non-finite values are rejected.

    Raises:
        InvalidArgumentError: If the value is missing or not a finite number
    """
    if value is None:
        raise InvalidArgumentError(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidArgumentError(f"{name} must be a number, got {type(value).__name__}")

    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidArgumentError(f"{name} must be a number: {value!r}") from e

    if not result.is_finite():
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return result
