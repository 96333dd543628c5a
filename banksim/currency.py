"""
Money Amount Module

Decimal helpers for monetary values. Balances are kept at full internal
precision so that monthly compounding does not drift; rounding to cents
happens only for display. NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import Union

from .errors import InvalidAmountError

# Set global decimal context for financial precision
getcontext().prec = 28  # High precision for financial calculations

DISPLAY_PRECISION = 2
ZERO = Decimal('0')
HUNDRED = Decimal('100')
MONTHS_PER_YEAR = Decimal('12')

AmountLike = Union[Decimal, int, str, float]


def to_decimal(value: AmountLike) -> Decimal:
    """
    Coerce a value into Decimal without going through binary floating point

    Args:
        value: Decimal, int, numeric string, or float (converted via str)

    Returns:
        Decimal value

    Raises:
        ValueError: If the value cannot be represented as a finite Decimal
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    elif isinstance(value, (int, str, float)):
        try:
            result = Decimal(str(value).strip())
        except ArithmeticError:
            raise ValueError(f"Cannot convert {value!r} to Decimal")
    else:
        raise ValueError(f"Cannot convert {type(value).__name__} to Decimal")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to display precision (cents)"""
    return value.quantize(
        Decimal('0.1') ** DISPLAY_PRECISION,
        rounding=ROUND_HALF_UP
    )


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual percentage rate (e.g. 12 for 12%) into a monthly fraction"""
    return annual_rate_percent / HUNDRED / MONTHS_PER_YEAR


def format_money(value: Decimal) -> str:
    """Format for display"""
    return f"{round_money(value):,.{DISPLAY_PRECISION}f}"


def require_positive(amount: AmountLike, what: str = "Amount") -> Decimal:
    """
    Coerce an amount and refuse zero, negative or malformed values

    Raises:
        InvalidAmountError: If the amount is not a positive number
    """
    try:
        value = to_decimal(amount)
    except ValueError as e:
        raise InvalidAmountError(str(e))
    if value <= ZERO:
        raise InvalidAmountError(f"{what} must be positive, got {value}")
    return value


def require_non_negative(amount: AmountLike, what: str = "Amount") -> Decimal:
    """Coerce an amount and refuse negative or malformed values"""
    try:
        value = to_decimal(amount)
    except ValueError as e:
        raise InvalidAmountError(str(e))
    if value < ZERO:
        raise InvalidAmountError(f"{what} cannot be negative, got {value}")
    return value
