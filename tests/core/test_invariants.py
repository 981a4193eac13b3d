from __future__ import annotations

from pairpool.core.invariants import INVARIANTS, check_all
from pairpool.state import FeeSchedule, PoolState, ReserveState

FEES = FeeSchedule(30, 5, 10, "providers", "treasury")


def test_empty_pool_is_valid() -> None:
    assert check_all(PoolState(fees=FEES)) == []


def test_funded_pool_is_valid() -> None:
    s = PoolState(fees=FEES, reserves=ReserveState(reserve0=10, reserve1=20, total_supply=14))
    assert check_all(s) == []


def test_supply_without_reserves() -> None:
    s = PoolState(fees=FEES, reserves=ReserveState(reserve0=0, reserve1=20, total_supply=14))
    assert check_all(s) == ["supply_zero_iff_empty"]


def test_reserves_without_supply() -> None:
    s = PoolState(fees=FEES, reserves=ReserveState(reserve0=10, reserve1=20))
    assert check_all(s) == ["supply_zero_iff_empty"]


def test_fee_rates_checked_even_when_schedule_is_bypassed() -> None:
    fees = FeeSchedule(30, 5, 10, "providers", "treasury")
    object.__setattr__(fees, "ref_fee_bps", 201)
    assert check_all(PoolState(fees=fees)) == ["fee_rates_bounded"]


def test_registry_names() -> None:
    assert set(INVARIANTS) == {
        "fee_rates_bounded",
        "supply_zero_iff_empty",
        "coins_bounded",
        "fee_recipients_present",
    }
