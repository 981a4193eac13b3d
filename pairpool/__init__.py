"""
pairpool: accounting and pricing core of a two-asset constant-product pool.

Public API:
- `PoolConfig` / `load_config(path)`
- `PoolController(config)` with `step(request)` and `step_or_raise(request)`
- `compute_swap`, `compute_add`, `compute_remove`, `collect` (pure engines)
"""

from .config import PoolConfig, load_config
from .core import (
    AddLiquidityResult,
    CollectResult,
    Event,
    Instruction,
    InstructionKind,
    Opcode,
    PoolController,
    RemoveLiquidityResult,
    StepResult,
    SwapResult,
    collect,
    compute_add,
    compute_remove,
    compute_swap,
    quote_swap,
)
from .errors import ErrorKind, PoolError
from .integration import parse_request
from .state import FeeSchedule, PoolState, PoolStatus, ReserveState, Side

__all__ = [
    "PoolConfig",
    "load_config",
    "AddLiquidityResult",
    "CollectResult",
    "Event",
    "Instruction",
    "InstructionKind",
    "Opcode",
    "PoolController",
    "RemoveLiquidityResult",
    "StepResult",
    "SwapResult",
    "collect",
    "compute_add",
    "compute_remove",
    "compute_swap",
    "quote_swap",
    "ErrorKind",
    "PoolError",
    "parse_request",
    "FeeSchedule",
    "PoolState",
    "PoolStatus",
    "ReserveState",
    "Side",
]
