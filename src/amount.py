"""
Monetary amounts: Decimal values fixed at four fractional digits.

Only construction rounds. Balance arithmetic uses exact_sum, which refuses
results the decimal context could only store rounded.
"""
from decimal import Decimal, Inexact, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from errors import InvalidAmount

PRECISION = Decimal("0.0001")
ZERO = Decimal("0.0000")

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """
    Build an amount, rounding half away from zero to four places.

    Floats go through their shortest repr so that 1.23455 rounds to 1.2346
    rather than to the binary approximation 1.23454999...
    """
    if isinstance(value, bool):
        raise InvalidAmount(value)

    try:
        if isinstance(value, float):
            decimal_value = Decimal(repr(value))
        elif isinstance(value, str):
            decimal_value = Decimal(value.strip())
        else:
            decimal_value = Decimal(value)

        if not decimal_value.is_finite():
            raise InvalidAmount(value)

        # ROUND_HALF_UP is half away from zero for negative values too
        return decimal_value.quantize(PRECISION, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(value) from None


def format_amount(value: Decimal) -> str:
    """Format with exactly four decimal places."""
    return f"{value.quantize(PRECISION, rounding=ROUND_HALF_UP):f}"


def exact_sum(*terms: Decimal) -> Decimal:
    """Add amounts, raising InvalidAmount instead of silently rounding."""
    with localcontext() as ctx:
        ctx.traps[Inexact] = True
        try:
            return sum(terms, ZERO)
        except Inexact:
            raise InvalidAmount(terms[-1]) from None
