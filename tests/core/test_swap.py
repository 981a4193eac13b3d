from __future__ import annotations

import pytest

import pairpool.core.swap as swap_mod
from pairpool.core.swap import apply_swap, compute_swap, quote_swap
from pairpool.errors import LowAmountError, MathError, NoLiquidityError, WrongKError, ZeroOutputError
from pairpool.kernels.fixed_point import MAX_COINS
from pairpool.state import FeeSchedule, ReserveState, Side


def _fees(lp: int = 30, protocol: int = 5, ref: int = 0) -> FeeSchedule:
    return FeeSchedule(
        lp_fee_bps=lp,
        protocol_fee_bps=protocol,
        ref_fee_bps=ref,
        provider_fee_address="providers",
        protocol_fee_address="treasury",
    )


def test_reference_scenario() -> None:
    res = compute_swap(1000, 1_000_000, 1_000_000, False, _fees())
    # floor(1000 * 1_000_000 / 1_001_000) = floor(999.000999...) = 999
    assert res.base_out == 999
    assert res.provider_fee == 3   # ceil(999 * 30 / 10_000)
    assert res.protocol_fee == 1   # ceil(999 * 5 / 10_000)
    assert res.ref_fee == 0
    assert res.amount_out == 995
    assert res.new_reserve_in == 1_001_000
    assert res.new_reserve_out == 999_001
    assert res.k_after >= res.k_before


def test_referral_fee_is_additive() -> None:
    fees = _fees(ref=10)
    with_ref = compute_swap(1000, 1_000_000, 1_000_000, True, fees)
    without_ref = compute_swap(1000, 1_000_000, 1_000_000, False, fees)

    assert with_ref.ref_fee == 1
    assert without_ref.ref_fee == 0
    assert with_ref.provider_fee == without_ref.provider_fee == 3
    assert with_ref.protocol_fee == without_ref.protocol_fee == 1
    assert with_ref.amount_out == 994
    assert with_ref.new_reserve_out == without_ref.new_reserve_out


def test_zero_fees_give_full_curve_output() -> None:
    res = compute_swap(1000, 1_000_000, 1_000_000, True, _fees(0, 0, 0))
    assert res.amount_out == res.base_out == 999


@pytest.mark.parametrize("reserve_in, reserve_out", [(0, 1_000), (1_000, 0), (0, 0)])
def test_empty_reserve_is_no_liquidity(reserve_in: int, reserve_out: int) -> None:
    with pytest.raises(NoLiquidityError):
        compute_swap(100, reserve_in, reserve_out, False, _fees())


def test_zero_amount_is_low_amount() -> None:
    with pytest.raises(LowAmountError):
        compute_swap(0, 1_000, 1_000, False, _fees())


def test_amount_below_configured_floor() -> None:
    with pytest.raises(LowAmountError, match="below minimum"):
        compute_swap(999, 1_000_000, 1_000_000, False, _fees(), min_amount_in=1000)
    assert compute_swap(1000, 1_000_000, 1_000_000, False, _fees(), min_amount_in=1000).amount_out == 995


@pytest.mark.parametrize("amount_in", [1, 2])
def test_dust_swap_is_zero_output(amount_in: int) -> None:
    # amount 1 prices to 0; amount 2 prices to 1, which the ceil-rounded LP fee consumes.
    with pytest.raises(ZeroOutputError):
        compute_swap(amount_in, 1_000_000, 1_000_000, False, _fees())


def test_reserve_overflow_is_math_error() -> None:
    with pytest.raises(MathError):
        compute_swap(1, MAX_COINS, 1_000, False, _fees())
    with pytest.raises(MathError):
        compute_swap(MAX_COINS + 1, 1_000, 1_000, False, _fees())


def test_wrong_k_guard(monkeypatch: pytest.MonkeyPatch) -> None:
    # Over-deliver by one unit to simulate a pricing bug; the k check must catch it.
    monkeypatch.setattr(swap_mod, "mul_div", lambda a, b, d, *args: (a * b) // d + 1)
    with pytest.raises(WrongKError):
        compute_swap(1000, 1_000_000, 1_000_000, False, _fees())


def test_type_checks() -> None:
    with pytest.raises(TypeError):
        compute_swap(1000, 1_000_000, 1_000_000, 1, _fees())  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        compute_swap(1000.0, 1_000_000, 1_000_000, False, _fees())  # type: ignore[arg-type]


def test_apply_swap_token0_in() -> None:
    reserves = ReserveState(reserve0=1_000_000, reserve1=1_000_000, total_supply=1_000_000)
    res = compute_swap(1000, 1_000_000, 1_000_000, False, _fees())
    post = apply_swap(reserves, Side.TOKEN0, res)

    assert (post.reserve0, post.reserve1) == (1_001_000, 999_001)
    assert (post.provider_fees1, post.protocol_fees1) == (3, 1)
    assert (post.provider_fees0, post.protocol_fees0) == (0, 0)
    assert post.total_supply == 1_000_000


def test_apply_swap_token1_in_accrues_token0_fees() -> None:
    reserves = ReserveState(reserve0=1_000_000, reserve1=1_000_000, total_supply=1_000_000, provider_fees0=7)
    res = compute_swap(1000, 1_000_000, 1_000_000, False, _fees())
    post = apply_swap(reserves, Side.TOKEN1, res)

    assert (post.reserve0, post.reserve1) == (999_001, 1_001_000)
    assert (post.provider_fees0, post.protocol_fees0) == (10, 1)
    assert (post.provider_fees1, post.protocol_fees1) == (0, 0)


def test_quote_matches_compute() -> None:
    reserves = ReserveState(reserve0=500_000, reserve1=2_000_000, total_supply=1_000_000)
    quote = quote_swap(reserves, Side.TOKEN1, 10_000, _fees(ref=10), has_ref=True)
    assert quote == compute_swap(10_000, 2_000_000, 500_000, True, _fees(ref=10))
