"""
Constant-product swap engine.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap
- Invariant: (reserve_in + amount_in) * (reserve_out - base_out) >= reserve_in * reserve_out

Fees are charged on the output leg. The gross output ``base_out`` is priced on
the full input, then the three fee tiers are carved out of it:

    base_out     = floor(amount_in * reserve_out / (reserve_in + amount_in))
    provider_fee = ceil(base_out * lp_fee_bps / 10_000)
    protocol_fee = ceil(base_out * protocol_fee_bps / 10_000)
    ref_fee      = ceil(base_out * ref_fee_bps / 10_000)   (only with a referrer)
    amount_out   = base_out - provider_fee - protocol_fee - ref_fee

Fees round up and the output rounds down, so the pool never under-collects and
the trader never receives more than the curve allows. The referral fee is
additive: it does not shrink the provider or protocol shares.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import LowAmountError, MathError, NoLiquidityError, WrongKError, ZeroOutputError
from ..kernels.fixed_point import (
    MAX_COINS,
    checked_add,
    checked_sub,
    fee_amount,
    mul_div,
    require_coins,
    require_int,
)
from ..state.fees import FeeSchedule
from ..state.reserves import ReserveState, Side


@dataclass(frozen=True)
class SwapResult:
    amount_in: int
    base_out: int
    amount_out: int
    provider_fee: int
    protocol_fee: int
    ref_fee: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def compute_swap(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    has_ref: bool,
    fees: FeeSchedule,
    *,
    min_amount_in: int = 1,
) -> SwapResult:
    """
    Quote an exact-in swap and the resulting reserves.

    Args:
        amount_in: Gross input amount
        reserve_in: Current reserve of the input token
        reserve_out: Current reserve of the output token
        has_ref: Whether a referral fee applies
        fees: Fee schedule in force
        min_amount_in: Smallest accepted input (never below 1)

    Returns:
        SwapResult with the output, the fee split and the post-trade reserves

    Raises:
        NoLiquidityError: If either reserve is zero
        LowAmountError: If amount_in is below the floor
        ZeroOutputError: If nothing is left for the trader after fees
        WrongKError: If the trade would decrease the constant product
        MathError: If a reserve would leave the coins domain
    """
    for name, v in (
        ("amount_in", amount_in),
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("min_amount_in", min_amount_in),
    ):
        require_int(name, v)
    if not isinstance(has_ref, bool):
        raise TypeError("has_ref must be a bool")

    require_coins("reserve_in", reserve_in)
    require_coins("reserve_out", reserve_out)
    if reserve_in == 0 or reserve_out == 0:
        raise NoLiquidityError(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_in < max(min_amount_in, 1):
        raise LowAmountError(f"amount_in below minimum: {amount_in} < {max(min_amount_in, 1)}")
    if amount_in > MAX_COINS:
        raise MathError(f"amount_in exceeds MAX_COINS: {amount_in}")

    new_reserve_in = checked_add(reserve_in, amount_in)
    base_out = mul_div(amount_in, reserve_out, new_reserve_in)

    provider_fee = fee_amount(base_out, fees.lp_fee_bps)
    protocol_fee = fee_amount(base_out, fees.protocol_fee_bps)
    ref_fee = fee_amount(base_out, fees.ref_fee_bps) if has_ref else 0

    amount_out = base_out - provider_fee - protocol_fee - ref_fee
    if amount_out <= 0:
        raise ZeroOutputError(f"amount_out is zero after fees (base_out={base_out})")

    new_reserve_out = checked_sub(reserve_out, base_out)

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise WrongKError(f"constant product decreased: {k_after} < {k_before}")

    return SwapResult(
        amount_in=amount_in,
        base_out=base_out,
        amount_out=amount_out,
        provider_fee=provider_fee,
        protocol_fee=protocol_fee,
        ref_fee=ref_fee,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def quote_swap(
    reserves: ReserveState,
    side_in: Side,
    amount_in: int,
    fees: FeeSchedule,
    *,
    has_ref: bool = False,
    min_amount_in: int = 1,
) -> SwapResult:
    """Read-only quote against a reserve snapshot (the ``get_expected_outputs`` query)."""
    return compute_swap(
        amount_in,
        reserves.reserve(side_in),
        reserves.reserve(side_in.other),
        has_ref,
        fees,
        min_amount_in=min_amount_in,
    )


def apply_swap(reserves: ReserveState, side_in: Side, result: SwapResult) -> ReserveState:
    """
    Apply a computed swap to the reserve ledger.

    Provider and protocol fees are denominated in the output token and accrue
    to that side's accumulators. The referral fee is paid out immediately and
    never touches pool state.
    """
    side_out = side_in.other
    if side_in is Side.TOKEN0:
        updated = reserves.with_reserves(result.new_reserve_in, result.new_reserve_out)
    else:
        updated = reserves.with_reserves(result.new_reserve_out, result.new_reserve_in)

    return updated.with_side_fees(
        side_out,
        provider=checked_add(reserves.provider_fees(side_out), result.provider_fee),
        protocol=checked_add(reserves.protocol_fees(side_out), result.protocol_fee),
    )
