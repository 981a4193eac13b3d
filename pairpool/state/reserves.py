"""
Reserve state for a two-asset pool.

Holds the two reserves, the total LP supply and the accrued-but-uncollected fee
accumulators (provider and protocol, per token side). Per-holder LP balances
live in the external LP token ledger; this state only knows the total.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from ..kernels.fixed_point import require_coins


class Side(IntEnum):
    """Token side of the pool."""
    TOKEN0 = 0
    TOKEN1 = 1

    @property
    def other(self) -> "Side":
        return Side.TOKEN1 if self is Side.TOKEN0 else Side.TOKEN0


@dataclass(frozen=True)
class ReserveState:
    """
    Attributes:
        reserve0: Pool balance of token0
        reserve1: Pool balance of token1
        total_supply: Outstanding LP shares
        provider_fees0: Uncollected LP-provider fees in token0
        provider_fees1: Uncollected LP-provider fees in token1
        protocol_fees0: Uncollected protocol fees in token0
        protocol_fees1: Uncollected protocol fees in token1
    """
    reserve0: int = 0
    reserve1: int = 0
    total_supply: int = 0
    provider_fees0: int = 0
    provider_fees1: int = 0
    protocol_fees0: int = 0
    protocol_fees1: int = 0

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            require_coins(name, getattr(self, name))

    def reserve(self, side: Side) -> int:
        return self.reserve0 if side is Side.TOKEN0 else self.reserve1

    def provider_fees(self, side: Side) -> int:
        return self.provider_fees0 if side is Side.TOKEN0 else self.provider_fees1

    def protocol_fees(self, side: Side) -> int:
        return self.protocol_fees0 if side is Side.TOKEN0 else self.protocol_fees1

    def constant_product(self) -> int:
        return self.reserve0 * self.reserve1

    @property
    def is_empty(self) -> bool:
        return self.total_supply == 0

    def with_reserves(self, reserve0: int, reserve1: int, total_supply: int | None = None) -> "ReserveState":
        if total_supply is None:
            total_supply = self.total_supply
        return replace(self, reserve0=reserve0, reserve1=reserve1, total_supply=total_supply)

    def with_side_fees(self, side: Side, *, provider: int, protocol: int) -> "ReserveState":
        """Return a copy with the accumulators of ``side`` set to the given values."""
        if side is Side.TOKEN0:
            return replace(self, provider_fees0=provider, protocol_fees0=protocol)
        return replace(self, provider_fees1=provider, protocol_fees1=protocol)
