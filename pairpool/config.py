"""
Pool configuration.

A pool is configured once, at initialization, from a YAML document or a plain
mapping:

    wallet0: EQ...token0-wallet
    wallet1: EQ...token1-wallet
    router_address: EQ...router
    provider_fee_address: EQ...providers
    protocol_fee_address: EQ...treasury
    lp_fee_bps: 20
    protocol_fee_bps: 10
    ref_fee_bps: 10

Amount-like settings are in the smallest unit of the respective asset; gas
settings are in the host's native-coin unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .constants import (
    MIN_LIQUIDITY,
    MIN_OPERATING_RESERVE,
    MIN_SWAP_AMOUNT,
    REQUIRED_MIN_COLLECT_FEES,
    TRANSFER_GAS,
)
from .state.fees import FeeSchedule, validate_recipient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolConfig:
    wallet0: str
    wallet1: str
    router_address: str
    provider_fee_address: str
    protocol_fee_address: str
    lp_fee_bps: int = 20
    protocol_fee_bps: int = 10
    ref_fee_bps: int = 10
    min_liquidity: int = MIN_LIQUIDITY
    min_swap_amount: int = MIN_SWAP_AMOUNT
    min_collect_fees: int = REQUIRED_MIN_COLLECT_FEES
    transfer_gas: int = TRANSFER_GAS
    min_operating_reserve: int = MIN_OPERATING_RESERVE

    def __post_init__(self) -> None:
        for name in ("wallet0", "wallet1", "router_address"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string")
        if self.wallet0 == self.wallet1:
            raise ValueError("wallet0 and wallet1 must differ")
        for name in (
            "min_liquidity",
            "min_swap_amount",
            "min_collect_fees",
            "transfer_gas",
            "min_operating_reserve",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")
        if self.min_swap_amount < 1:
            raise ValueError("min_swap_amount must be at least 1")
        if self.min_collect_fees < 1:
            raise ValueError("min_collect_fees must be at least 1")
        # Fee bounds and recipients are validated by the schedule itself.
        self.fee_schedule()
        validate_recipient("router_address", self.router_address)

    def fee_schedule(self) -> FeeSchedule:
        return FeeSchedule(
            lp_fee_bps=self.lp_fee_bps,
            protocol_fee_bps=self.protocol_fee_bps,
            ref_fee_bps=self.ref_fee_bps,
            provider_fee_address=self.provider_fee_address,
            protocol_fee_address=self.protocol_fee_address,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PoolConfig":
        if not isinstance(data, Mapping):
            raise ValueError(f"pool config must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown pool config keys: {', '.join(map(str, unknown))}")
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: str | Path) -> "PoolConfig":
        """Load a pool config from a YAML file."""
        path = Path(path)
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
        if obj is None:
            raise ValueError(f"pool config {path} is empty")
        if isinstance(obj, Mapping) and "pool" in obj and isinstance(obj["pool"], Mapping):
            obj = obj["pool"]
        config = cls.from_dict(obj)
        logger.info("Loaded pool config from %s (wallets %s/%s)", path, config.wallet0, config.wallet1)
        return config


def load_config(path: str | Path) -> PoolConfig:
    return PoolConfig.from_file(path)
