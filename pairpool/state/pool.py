"""
Pool aggregate state and snapshot serialization.

``PoolState`` binds the reserve ledger to the fee schedule, the lock flag and
the set of identities allowed to run administrative operations. It is frozen:
the controller builds a new value per operation and swaps it in only after
every check has passed.

Round-trip property (tested): ``state_from_dict(state_to_dict(s)) == s``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .fees import FeeSchedule
from .reserves import ReserveState


class PoolStatus(Enum):
    """Pool status enumeration."""
    ACTIVE = "ACTIVE"
    LOCKED = "LOCKED"


@dataclass(frozen=True)
class PoolState:
    fees: FeeSchedule
    reserves: ReserveState = field(default_factory=ReserveState)
    is_locked: bool = False
    authorized: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.is_locked, bool):
            raise TypeError("is_locked must be a bool")
        if not isinstance(self.authorized, frozenset):
            object.__setattr__(self, "authorized", frozenset(self.authorized))

    @property
    def status(self) -> PoolStatus:
        return PoolStatus.LOCKED if self.is_locked else PoolStatus.ACTIVE

    def is_authorized(self, identity: str | None) -> bool:
        return identity is not None and identity in self.authorized

    def __repr__(self) -> str:
        r = self.reserves
        return (
            f"PoolState(reserves=({r.reserve0}, {r.reserve1}), "
            f"total_supply={r.total_supply}, status={self.status.value})"
        )


RESERVE_VAR_NAMES: tuple[str, ...] = tuple(ReserveState.__dataclass_fields__)


def state_to_dict(state: PoolState) -> dict[str, Any]:
    """Serialize a PoolState to a plain dict (the ``get_pool_data`` snapshot)."""
    out: dict[str, Any] = {name: getattr(state.reserves, name) for name in RESERVE_VAR_NAMES}
    out.update(state.fees.to_dict())
    out["is_locked"] = state.is_locked
    out["status"] = state.status.value
    out["authorized"] = sorted(state.authorized)
    return out


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a snapshot. Raises KeyError on missing fields."""
    reserve_kwargs: dict[str, int] = {}
    for name in RESERVE_VAR_NAMES:
        val = d[name]
        if not isinstance(val, int) or isinstance(val, bool):
            raise TypeError(f"state var {name!r} must be int, got {type(val).__name__}")
        reserve_kwargs[name] = int(val)
    fees = FeeSchedule(
        lp_fee_bps=d["lp_fee_bps"],
        protocol_fee_bps=d["protocol_fee_bps"],
        ref_fee_bps=d["ref_fee_bps"],
        provider_fee_address=d["provider_fee_address"],
        protocol_fee_address=d["protocol_fee_address"],
    )
    return PoolState(
        fees=fees,
        reserves=ReserveState(**reserve_kwargs),
        is_locked=bool(d["is_locked"]),
        authorized=frozenset(d["authorized"]),
    )
