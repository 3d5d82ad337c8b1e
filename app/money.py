"""Decimal helpers shared by split resolution, balances and settlement."""

import os
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from dotenv import load_dotenv

load_dotenv()

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Amount columns are Numeric(10, 2)
MAX_AMOUNT = Decimal("1e8")

# Below this a balance or transfer counts as settled
EPSILON = Decimal(os.getenv("SETTLEMENT_EPSILON", "0.01"))


class InvalidAmountError(ValueError):
    """Raised for NaN, infinite, negative, oversized or unparseable amounts."""


def to_amount(value, allow_negative: bool = False) -> Decimal:
    """Parse a monetary value at the boundary, rejecting malformed input.

    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    The result is rounded to cents and must fit the amount columns.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {value!r}")
    if amount < 0 and not allow_negative:
        raise InvalidAmountError(f"Amount must not be negative: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise InvalidAmountError(f"Amount too large: {value!r}")
    return quantize(amount)


def quantize(amount: Decimal) -> Decimal:
    """Round half up to whole cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    return int(quantize(amount) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def is_negligible(amount: Decimal, epsilon: Decimal = EPSILON) -> bool:
    return abs(amount) <= epsilon


def sum_amounts(amounts) -> Decimal:
    return sum(amounts, ZERO)


def format_amount(amount: Decimal) -> str:
    rounded = quantize(amount)
    if rounded == 0:
        rounded = ZERO.quantize(CENT)  # avoid "-0.00"
    return str(rounded)
