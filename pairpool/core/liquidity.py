"""
Liquidity operations: LP-share minting on deposit, pro-rata burn on withdrawal.

First deposit:
    lp = isqrt(amount0 * amount1), rejected below ``min_liquidity``

Subsequent deposits use ratio-preserving amounts; the over-supplied token is
refunded instead of being added to reserves:
    lp = min(floor(used0 * supply / reserve0), floor(used1 * supply / reserve1))

Withdrawal:
    amountI = floor(lp_amount * reserveI / supply)

No fee is charged on liquidity operations.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import LowAmountError, LowLiquidityError, MathError, ZeroOutputError
from ..kernels.fixed_point import checked_add, checked_sub, isqrt, mul_div, require_coins
from ..state.reserves import ReserveState


@dataclass(frozen=True)
class AddLiquidityResult:
    lp_minted: int
    amount0_used: int
    amount1_used: int
    amount0_refund: int
    amount1_refund: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    lp_burned: int
    amount0: int
    amount1: int


def _ratio_amounts(amount0: int, amount1: int, reserve0: int, reserve1: int) -> tuple[int, int]:
    amount1_from_amount0 = mul_div(amount0, reserve1, reserve0)
    if amount1_from_amount0 <= amount1:
        return amount0, amount1_from_amount0
    return mul_div(amount1, reserve0, reserve1), amount1


def compute_add(
    amount0: int,
    amount1: int,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    *,
    min_liquidity: int,
) -> AddLiquidityResult:
    """
    Compute LP shares to mint for a deposit of ``(amount0, amount1)``.

    Raises:
        LowAmountError: If either amount is zero
        LowLiquidityError: If the first deposit is below ``min_liquidity`` or
            the deposit is too small to mint a single share
        MathError: If reserves or supply would exceed MAX_COINS
    """
    for name, v in (
        ("amount0", amount0),
        ("amount1", amount1),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        require_coins(name, v)
    if amount0 == 0 or amount1 == 0:
        raise LowAmountError(f"deposit amounts must be positive: ({amount0}, {amount1})")

    if total_supply == 0:
        if reserve0 != 0 or reserve1 != 0:
            raise MathError(f"reserves without supply: ({reserve0}, {reserve1})")
        lp_minted = isqrt(amount0 * amount1)
        if lp_minted < min_liquidity:
            raise LowLiquidityError(
                f"initial liquidity below minimum: isqrt({amount0} * {amount1}) = {lp_minted} < {min_liquidity}"
            )
        used0, used1 = amount0, amount1
    else:
        if reserve0 == 0 or reserve1 == 0:
            raise MathError(f"supply without reserves: ({reserve0}, {reserve1})")
        used0, used1 = _ratio_amounts(amount0, amount1, reserve0, reserve1)
        lp_minted = min(
            mul_div(used0, total_supply, reserve0),
            mul_div(used1, total_supply, reserve1),
        )
        if lp_minted <= 0:
            raise LowLiquidityError(f"deposit too small to mint LP: ({amount0}, {amount1})")

    checked_add(reserve0, used0)
    checked_add(reserve1, used1)
    checked_add(total_supply, lp_minted)

    return AddLiquidityResult(
        lp_minted=lp_minted,
        amount0_used=used0,
        amount1_used=used1,
        amount0_refund=amount0 - used0,
        amount1_refund=amount1 - used1,
    )


def compute_remove(
    lp_amount: int,
    reserve0: int,
    reserve1: int,
    total_supply: int,
) -> RemoveLiquidityResult:
    """
    Compute the pro-rata withdrawal for burning ``lp_amount`` shares.

    Raises:
        LowAmountError: If lp_amount is zero
        LowLiquidityError: If lp_amount exceeds the outstanding supply
        ZeroOutputError: If the burn is too small to return anything
    """
    require_coins("lp_amount", lp_amount)
    require_coins("reserve0", reserve0)
    require_coins("reserve1", reserve1)
    require_coins("total_supply", total_supply)
    if lp_amount == 0:
        raise LowAmountError("lp_amount must be positive")
    if lp_amount > total_supply:
        raise LowLiquidityError(f"cannot burn more LP than supply: {lp_amount} > {total_supply}")

    amount0 = mul_div(lp_amount, reserve0, total_supply)
    amount1 = mul_div(lp_amount, reserve1, total_supply)
    if amount0 == 0 and amount1 == 0:
        raise ZeroOutputError(f"burn of {lp_amount} LP returns nothing")

    return RemoveLiquidityResult(lp_burned=lp_amount, amount0=amount0, amount1=amount1)


def apply_add(reserves: ReserveState, result: AddLiquidityResult) -> ReserveState:
    return reserves.with_reserves(
        checked_add(reserves.reserve0, result.amount0_used),
        checked_add(reserves.reserve1, result.amount1_used),
        checked_add(reserves.total_supply, result.lp_minted),
    )


def apply_remove(reserves: ReserveState, result: RemoveLiquidityResult) -> ReserveState:
    return reserves.with_reserves(
        checked_sub(reserves.reserve0, result.amount0),
        checked_sub(reserves.reserve1, result.amount1),
        checked_sub(reserves.total_supply, result.lp_burned),
    )
