"""
Bounded unsigned integer arithmetic.

Every amount the pool stores is a "coins" value: a non-negative int no larger
than ``MAX_COINS`` (a 120-bit unsigned integer). Intermediate products may be
wider; only stored results are bounded.

Rounding is always explicit. Division uses Python's ``//`` on non-negative
operands (floor), and ``Rounding.CEIL`` uses the ``(n + d - 1) // d`` form.
"""

from __future__ import annotations

import math
from enum import Enum

from ..errors import MathError


MAX_COINS = 2**120 - 1
FEE_DIVIDER = 10_000
MAX_FEE_BPS = 200


class Rounding(Enum):
    FLOOR = "floor"
    CEIL = "ceil"


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_coins(name: str, value: int) -> int:
    """Check that ``value`` fits the coins domain ``[0, MAX_COINS]``."""
    require_int(name, value)
    if value < 0:
        raise MathError(f"{name} must be non-negative: {value}")
    if value > MAX_COINS:
        raise MathError(f"{name} exceeds MAX_COINS: {value}")
    return value


def ceil_div(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise MathError("denominator must be positive")
    if numerator < 0:
        raise MathError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


def mul_div(a: int, b: int, denominator: int, rounding: Rounding = Rounding.FLOOR) -> int:
    """
    Compute ``a * b / denominator`` with the requested rounding.

    The product is computed exactly (Python ints are unbounded), so there is no
    intermediate overflow; callers bound the result with ``require_coins``.
    """
    require_int("a", a)
    require_int("b", b)
    require_int("denominator", denominator)
    if a < 0 or b < 0:
        raise MathError(f"operands must be non-negative: ({a}, {b})")
    if denominator <= 0:
        raise MathError("denominator must be positive")
    if rounding is Rounding.CEIL:
        return ceil_div(a * b, denominator)
    return (a * b) // denominator


def checked_add(a: int, b: int) -> int:
    result = a + b
    if result < 0 or result > MAX_COINS:
        raise MathError(f"addition out of range: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    result = a - b
    if result < 0:
        raise MathError(f"subtraction underflow: {a} - {b}")
    if result > MAX_COINS:
        raise MathError(f"subtraction out of range: {a} - {b}")
    return result


def isqrt(n: int) -> int:
    """Exact ``floor(sqrt(n))``; float sqrt loses precision above 2**53."""
    require_int("n", n)
    if n < 0:
        raise MathError(f"isqrt of negative value: {n}")
    return math.isqrt(n)


def fee_amount(amount: int, fee_bps: int) -> int:
    """``ceil(amount * fee_bps / FEE_DIVIDER)``; fees never round in the payer's favour."""
    require_int("fee_bps", fee_bps)
    if not (0 <= fee_bps <= FEE_DIVIDER):
        raise MathError(f"fee_bps must be in [0, {FEE_DIVIDER}]: {fee_bps}")
    return mul_div(amount, fee_bps, FEE_DIVIDER, Rounding.CEIL)
