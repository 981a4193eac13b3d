"""
Fee schedule: three fee tiers and two recipient identities.

All rates are basis points of the swap's gross output, bounded by
``MAX_FEE_BPS`` (2%). A schedule is immutable; updating fees means building a
new one, so a rejected update can never leave a half-applied schedule behind.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import FeeOutOfRangeError, InvalidRecipientError
from ..kernels.fixed_point import MAX_FEE_BPS


def validate_fee_bps(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= value <= MAX_FEE_BPS):
        raise FeeOutOfRangeError(f"{name} must be in [0, {MAX_FEE_BPS}]: {value}")
    return value


def validate_recipient(name: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecipientError(f"{name} must be a non-empty address")
    return value


@dataclass(frozen=True)
class FeeSchedule:
    lp_fee_bps: int
    protocol_fee_bps: int
    ref_fee_bps: int
    provider_fee_address: str
    protocol_fee_address: str

    def __post_init__(self) -> None:
        for name, v in (
            ("lp_fee_bps", self.lp_fee_bps),
            ("protocol_fee_bps", self.protocol_fee_bps),
            ("ref_fee_bps", self.ref_fee_bps),
        ):
            validate_fee_bps(name, v)
        validate_recipient("provider_fee_address", self.provider_fee_address)
        validate_recipient("protocol_fee_address", self.protocol_fee_address)

    @property
    def total_bps(self) -> int:
        """Worst-case fee take, with a referral present."""
        return self.lp_fee_bps + self.protocol_fee_bps + self.ref_fee_bps

    def to_dict(self) -> dict[str, int | str]:
        return {
            "lp_fee_bps": self.lp_fee_bps,
            "protocol_fee_bps": self.protocol_fee_bps,
            "ref_fee_bps": self.ref_fee_bps,
            "provider_fee_address": self.provider_fee_address,
            "protocol_fee_address": self.protocol_fee_address,
        }
