"""
Pool state: reserve ledger, fee schedule and the aggregate pool value.
"""

from .fees import FeeSchedule
from .pool import PoolState, PoolStatus, state_from_dict, state_to_dict
from .reserves import ReserveState, Side

__all__ = [
    "FeeSchedule",
    "PoolState",
    "PoolStatus",
    "ReserveState",
    "Side",
    "state_from_dict",
    "state_to_dict",
]
