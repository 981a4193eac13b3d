"""Outbound instructions and step results.

The engine never moves tokens itself. Every external effect of an operation is
an ``Instruction`` value, returned in dispatch order after the state change has
committed. The dispatch layer executes them and owns their failure/retry rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Optional

from ..errors import ErrorKind
from ..state.reserves import Side


@unique
class InstructionKind(Enum):
    TRANSFER_OUT = "transfer_out"        # swap output to the trader
    REF_PAYOUT = "ref_payout"            # referral fee to the referrer
    REFUND = "refund"                    # inbound tokens returned unused
    MINT_LP = "mint_lp"                  # LP shares to the provider
    WITHDRAW = "withdraw"                # burn proceeds to the LP holder
    FEE_PAYOUT = "fee_payout"            # collected fees to a fee recipient
    COLLECTOR_REWARD = "collector_reward"
    GAS_REFUND = "gas_refund"            # excess operating balance


@unique
class Event(Enum):
    SWAPPED = "Swapped"
    SWAP_REFUNDED = "SwapRefunded"
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REFUNDED = "LiquidityRefunded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    FEES_COLLECTED = "FeesCollected"
    NOTHING_TO_COLLECT = "NothingToCollect"
    FEES_UPDATED = "FeesUpdated"
    RESERVES_UPDATED = "ReservesUpdated"
    LOCK_STATUS_CHANGED = "LockStatusChanged"
    AUTHORIZED_ADDED = "AuthorizedAdded"
    AUTHORIZED_REMOVED = "AuthorizedRemoved"
    GAS_RESET = "GasReset"
    QUERY = "Query"


@dataclass(frozen=True)
class Instruction:
    """
    One outbound effect.

    ``side`` is None for effects that are not denominated in a pool token
    (LP mint, gas refund).
    """

    kind: InstructionKind
    to: str
    amount: int
    side: Optional[Side] = None


def transfer(kind: InstructionKind, to: str, side: Side, amount: int) -> Instruction:
    return Instruction(kind=kind, to=to, amount=amount, side=side)


@dataclass(frozen=True)
class StepResult:
    """Result of a single controller step."""

    accepted: bool
    event: Optional[Event] = None
    instructions: tuple[Instruction, ...] = ()
    data: Any = None
    rejection: Optional[ErrorKind] = None
    message: str = ""
