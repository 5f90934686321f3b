"""
Decimal-places precision helpers.

Precision throughout the package is a non-negative count of digits after the
decimal point. Venues publish it either directly as an integer or indirectly
as a step size ("0.001" -> 3).

Rounding modes:
    TRUNCATE: Drop extra digits (used for order quantities, so an order never
        exceeds the requested amount).
    ROUND: Round half away from zero (used for prices and fee estimates).
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Union

from exchange_normalizer.utils.safe import to_decimal

TRUNCATE = "truncate"
ROUND = "round"

_ROUNDING = {
    TRUNCATE: ROUND_DOWN,
    ROUND: ROUND_HALF_UP,
}


def precision_from_string(step: str) -> int:
    """
    Count the decimal places implied by a step-size string.

    Trailing zeros are ignored and integer steps yield zero.

    Args:
        step: Step size such as "0.00100000", "1" or "1e-8".

    Returns:
        int: Number of decimal places.

    Raises:
        ValueError: If ``step`` is not a number.

    Example:
        >>> precision_from_string("0.00100000")
        3
        >>> precision_from_string("10")
        0
    """
    value = to_decimal(step)
    if value is None or not value.is_finite():
        raise ValueError(f"Invalid step size: {step!r}")
    exponent = value.normalize().as_tuple().exponent
    return max(-int(exponent), 0)


def decimal_to_precision(
    value: Union[Decimal, str, int, float],
    rounding_mode: str,
    precision: int,
) -> str:
    """
    Round or truncate ``value`` to ``precision`` decimal places.

    Args:
        value: Number to format.
        rounding_mode: TRUNCATE or ROUND.
        precision: Decimal places to keep (>= 0).

    Returns:
        str: Plain decimal string without exponent, e.g. "0.012".

    Raises:
        ValueError: On an unknown rounding mode, a negative precision or
            a non-numeric value.
    """
    if rounding_mode not in _ROUNDING:
        raise ValueError(f"Unknown rounding mode: {rounding_mode!r}")
    if precision < 0:
        raise ValueError(f"Precision must be non-negative, got {precision}")

    number = to_decimal(value)
    if number is None or not number.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")

    quantum = Decimal(1).scaleb(-precision)
    result = number.quantize(quantum, rounding=_ROUNDING[rounding_mode])
    if result.is_zero():
        # Avoid "-0.00" after truncating small negatives
        result = abs(result)
    return format(result, "f")
