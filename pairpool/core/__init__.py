"""
Core pool engines: swap pricing, liquidity accounting, fee collection and the
controller that serializes them.
"""

from .collector import CollectResult, collect
from .controller import PoolController, initial_state
from .instructions import Event, Instruction, InstructionKind, StepResult
from .invariants import check_all
from .liquidity import AddLiquidityResult, RemoveLiquidityResult, compute_add, compute_remove
from .requests import Opcode
from .swap import SwapResult, compute_swap, quote_swap

__all__ = [
    "CollectResult",
    "collect",
    "PoolController",
    "initial_state",
    "Event",
    "Instruction",
    "InstructionKind",
    "StepResult",
    "check_all",
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    "compute_add",
    "compute_remove",
    "Opcode",
    "SwapResult",
    "compute_swap",
    "quote_swap",
]
