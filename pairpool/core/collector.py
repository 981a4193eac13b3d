"""
Fee collection: turn accrued provider/protocol fees into payout instructions.

Threshold policy is per accumulator. A token side is collected when its
provider accumulator or its protocol accumulator reaches the threshold on its
own; the two are never summed for the threshold test. If no side qualifies,
collection is a no-op (``None``), not an error.

For every collected side:
    total  = provider + protocol
    reward = min(floor(total / 1000), protocol)     (0.1%, paid out of the protocol share)

and the payouts are, in order: provider share, protocol share minus reward,
reward to the caller. Both accumulators of the side are zeroed, and the
payouts always sum to exactly what was zeroed.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import COLLECTOR_REWARD_DIVIDER, REQUIRED_MIN_COLLECT_FEES
from ..kernels.fixed_point import require_coins
from ..state.fees import FeeSchedule
from ..state.reserves import ReserveState, Side
from .instructions import Instruction, InstructionKind, transfer


@dataclass(frozen=True)
class SideCollection:
    side: Side
    provider: int
    protocol: int
    reward: int


@dataclass(frozen=True)
class CollectResult:
    reserves: ReserveState
    payouts: tuple[Instruction, ...]
    collected: tuple[SideCollection, ...]


def side_qualifies(reserves: ReserveState, side: Side, threshold: int) -> bool:
    return reserves.provider_fees(side) >= threshold or reserves.protocol_fees(side) >= threshold


def collector_reward(provider: int, protocol: int) -> int:
    return min((provider + protocol) // COLLECTOR_REWARD_DIVIDER, protocol)


def collect(
    reserves: ReserveState,
    fees: FeeSchedule,
    collector: str,
    *,
    threshold: int = REQUIRED_MIN_COLLECT_FEES,
) -> CollectResult | None:
    """
    Compute payouts for every side whose fees reached ``threshold``.

    Returns None when nothing qualifies. The returned reserves carry the zeroed
    accumulators; committing them is the caller's decision.
    """
    require_coins("threshold", threshold)
    if threshold == 0:
        raise ValueError("threshold must be positive")

    payouts: list[Instruction] = []
    collected: list[SideCollection] = []
    post = reserves

    for side in Side:
        if not side_qualifies(reserves, side, threshold):
            continue
        provider = reserves.provider_fees(side)
        protocol = reserves.protocol_fees(side)
        reward = collector_reward(provider, protocol)

        for kind, to, amount in (
            (InstructionKind.FEE_PAYOUT, fees.provider_fee_address, provider),
            (InstructionKind.FEE_PAYOUT, fees.protocol_fee_address, protocol - reward),
            (InstructionKind.COLLECTOR_REWARD, collector, reward),
        ):
            if amount > 0:
                payouts.append(transfer(kind, to, side, amount))

        collected.append(SideCollection(side=side, provider=provider, protocol=protocol, reward=reward))
        post = post.with_side_fees(side, provider=0, protocol=0)

    if not collected:
        return None

    paid = sum(p.amount for p in payouts)
    owed = sum(c.provider + c.protocol for c in collected)
    if paid != owed:
        raise AssertionError(f"fee payouts ({paid}) do not match collected fees ({owed})")

    return CollectResult(reserves=post, payouts=tuple(payouts), collected=tuple(collected))
