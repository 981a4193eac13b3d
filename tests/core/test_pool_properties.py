"""Property tests: pricing, liquidity and collection hold their accounting
guarantees across random inputs and random operation sequences.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from pairpool.config import PoolConfig
from pairpool.core.collector import collect
from pairpool.core.controller import PoolController
from pairpool.core.invariants import check_all
from pairpool.core.liquidity import compute_add, compute_remove
from pairpool.core.requests import (
    BurnNotificationRequest,
    CollectFeesRequest,
    ProvideLiquidityRequest,
    SetFeesRequest,
    SwapRequest,
)
from pairpool.core.swap import compute_swap
from pairpool.errors import LowLiquidityError, ZeroOutputError
from pairpool.state import FeeSchedule, ReserveState

bps = st.integers(min_value=0, max_value=200)
amounts = st.integers(min_value=1, max_value=10**18)


@st.composite
def fee_schedules(draw) -> FeeSchedule:
    return FeeSchedule(
        lp_fee_bps=draw(bps),
        protocol_fee_bps=draw(bps),
        ref_fee_bps=draw(bps),
        provider_fee_address="providers",
        protocol_fee_address="treasury",
    )


@settings(max_examples=300, deadline=None)
@given(amount_in=amounts, reserve_in=amounts, reserve_out=amounts, has_ref=st.booleans(), fees=fee_schedules())
def test_swap_never_decreases_k(amount_in, reserve_in, reserve_out, has_ref, fees) -> None:
    try:
        res = compute_swap(amount_in, reserve_in, reserve_out, has_ref, fees)
    except ZeroOutputError:
        return
    assert res.k_after >= res.k_before
    assert res.amount_out + res.provider_fee + res.protocol_fee + res.ref_fee == res.base_out
    assert 0 < res.amount_out <= res.base_out < reserve_out
    if not has_ref:
        assert res.ref_fee == 0


@settings(max_examples=300, deadline=None)
@given(
    reserve0=st.integers(min_value=1, max_value=10**15),
    reserve1=st.integers(min_value=1, max_value=10**15),
    supply=st.integers(min_value=1, max_value=10**15),
    amount0=st.integers(min_value=1, max_value=10**15),
    amount1=st.integers(min_value=1, max_value=10**15),
)
def test_add_then_remove_never_profits(reserve0, reserve1, supply, amount0, amount1) -> None:
    try:
        added = compute_add(amount0, amount1, reserve0, reserve1, supply, min_liquidity=1000)
    except LowLiquidityError:
        return
    assert added.amount0_used + added.amount0_refund == amount0
    assert added.amount1_used + added.amount1_refund == amount1
    try:
        removed = compute_remove(
            added.lp_minted,
            reserve0 + added.amount0_used,
            reserve1 + added.amount1_used,
            supply + added.lp_minted,
        )
    except ZeroOutputError:
        return
    assert removed.amount0 <= added.amount0_used
    assert removed.amount1 <= added.amount1_used


fee_vars = st.integers(min_value=0, max_value=10**9)


@settings(max_examples=200, deadline=None)
@given(p0=fee_vars, q0=fee_vars, p1=fee_vars, q1=fee_vars)
def test_collect_conserves_and_is_idempotent(p0, q0, p1, q1) -> None:
    reserves = ReserveState(provider_fees0=p0, protocol_fees0=q0, provider_fees1=p1, protocol_fees1=q1)
    fees = FeeSchedule(30, 5, 10, "providers", "treasury")
    result = collect(reserves, fees, "keeper")
    if result is None:
        assert max(p0, q0, p1, q1) < 1_000_000
        return
    owed = sum(c.provider + c.protocol for c in result.collected)
    assert sum(p.amount for p in result.payouts) == owed
    assert all(p.amount > 0 for p in result.payouts)
    assert collect(result.reserves, fees, "keeper") is None


CONFIG = PoolConfig(
    wallet0="wallet0",
    wallet1="wallet1",
    router_address="router",
    provider_fee_address="providers",
    protocol_fee_address="treasury",
    lp_fee_bps=30,
    protocol_fee_bps=5,
    ref_fee_bps=10,
    min_collect_fees=100,
)

small = st.integers(min_value=0, max_value=10**9)

requests = st.one_of(
    st.builds(
        SwapRequest,
        sender=st.just("router"),
        from_address=st.just("trader"),
        token_wallet=st.sampled_from(["wallet0", "wallet1"]),
        amount_in=small,
        min_out=st.integers(min_value=0, max_value=10**6),
        has_ref=st.booleans(),
        ref_address=st.just("referrer"),
    ),
    st.builds(
        ProvideLiquidityRequest,
        sender=st.just("router"),
        from_address=st.just("lp"),
        amount0=small,
        amount1=small,
    ),
    st.builds(
        BurnNotificationRequest,
        sender=st.just("router"),
        lp_amount=small,
        from_address=st.just("lp"),
    ),
    st.builds(CollectFeesRequest, sender=st.just("keeper"), gas=st.just(10**9)),
    st.builds(
        SetFeesRequest,
        sender=st.sampled_from(["router", "mallory"]),
        new_lp_fee=st.integers(min_value=-5, max_value=205),
        new_protocol_fee=bps,
        new_ref_fee=bps,
        new_protocol_fee_address=st.just("treasury"),
        new_provider_fee_address=st.just("providers"),
    ),
)


@settings(max_examples=100, deadline=None)
@given(ops=st.lists(requests, max_size=25))
def test_random_sequences_keep_invariants(ops) -> None:
    ctl = PoolController(CONFIG)
    for req in ops:
        before = ctl.state
        res = ctl.step(req)
        assert check_all(ctl.state) == []
        if not res.accepted:
            assert ctl.state == before
        elif isinstance(req, SwapRequest) and before.reserves.total_supply > 0 and ctl.state != before:
            assert ctl.state.reserves.constant_product() >= before.reserves.constant_product()
