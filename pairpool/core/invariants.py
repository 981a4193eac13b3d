"""Invariant checkers for the pool state.

Each function returns True when the invariant holds, and ``check_all()``
returns the list of violated invariant names (empty = all pass). The
constant-product check is per-swap and lives in the swap engine, since it
needs the pre-trade reserves.
"""

from __future__ import annotations

from typing import Callable

from ..kernels.fixed_point import MAX_COINS, MAX_FEE_BPS
from ..state.pool import PoolState
from ..state.reserves import ReserveState


def inv_fee_rates_bounded(s: PoolState) -> bool:
    f = s.fees
    return all(0 <= v <= MAX_FEE_BPS for v in (f.lp_fee_bps, f.protocol_fee_bps, f.ref_fee_bps))


def inv_supply_zero_iff_empty(s: PoolState) -> bool:
    r = s.reserves
    if r.total_supply == 0:
        return r.reserve0 == 0 and r.reserve1 == 0
    return r.reserve0 > 0 and r.reserve1 > 0


def inv_coins_bounded(s: PoolState) -> bool:
    r = s.reserves
    return all(0 <= getattr(r, name) <= MAX_COINS for name in ReserveState.__dataclass_fields__)


def inv_fee_recipients_present(s: PoolState) -> bool:
    return bool(s.fees.provider_fee_address) and bool(s.fees.protocol_fee_address)


INVARIANTS: dict[str, Callable[[PoolState], bool]] = {
    "fee_rates_bounded": inv_fee_rates_bounded,
    "supply_zero_iff_empty": inv_supply_zero_iff_empty,
    "coins_bounded": inv_coins_bounded,
    "fee_recipients_present": inv_fee_recipients_present,
}


def check_all(s: PoolState) -> list[str]:
    return [name for name, fn in INVARIANTS.items() if not fn(s)]
