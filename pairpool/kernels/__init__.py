"""
Kernel layer.

Deterministic, integer-only arithmetic shared by the pool engines. Kernels are
pure functions over plain ints and carry no pool state.
"""

from .fixed_point import (
    FEE_DIVIDER,
    MAX_COINS,
    MAX_FEE_BPS,
    Rounding,
    ceil_div,
    checked_add,
    checked_sub,
    fee_amount,
    isqrt,
    mul_div,
    require_coins,
    require_int,
)

__all__ = [
    "FEE_DIVIDER",
    "MAX_COINS",
    "MAX_FEE_BPS",
    "Rounding",
    "ceil_div",
    "checked_add",
    "checked_sub",
    "fee_amount",
    "isqrt",
    "mul_div",
    "require_coins",
    "require_int",
]
