"""Typed operation requests accepted by the pool controller.

Each request is a frozen dataclass tagged with the numeric opcode it travels
under. ``sender`` is the identity the host reports as the message source; it is
what authorization checks look at. Token-carrying requests (swap, deposit,
burn notification) must arrive from an authorized identity such as the router
or the LP token ledger. ``from_address`` is the end user on whose
behalf the router forwarded the tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import ClassVar, Optional


@unique
class Opcode(IntEnum):
    SWAP = 0x25938561
    PROVIDE_LIQUIDITY = 0xFCF9E58F
    BURN_NOTIFICATION = 0x7BDD97DE
    COLLECT_FEES = 0x1FCB7D3D
    SET_FEES = 0x355423E5
    RESET_GAS = 0x42A0FB43
    GET_POOL_DATA = 0x43C034E6
    GET_EXPECTED_OUTPUTS = 0xED4D8B67
    UPDATE_RESERVES = 104
    SET_LOCK_STATUS = 105
    ADD_AUTHORIZED = 107
    REMOVE_AUTHORIZED = 108


@dataclass(frozen=True)
class SwapRequest:
    opcode: ClassVar[Opcode] = Opcode.SWAP
    sender: str
    from_address: str
    token_wallet: str
    amount_in: int
    min_out: int = 0
    has_ref: bool = False
    ref_address: Optional[str] = None


@dataclass(frozen=True)
class ProvideLiquidityRequest:
    opcode: ClassVar[Opcode] = Opcode.PROVIDE_LIQUIDITY
    sender: str
    from_address: str
    amount0: int
    amount1: int
    min_lp_out: int = 0


@dataclass(frozen=True)
class BurnNotificationRequest:
    opcode: ClassVar[Opcode] = Opcode.BURN_NOTIFICATION
    sender: str
    lp_amount: int
    from_address: str
    response_address: Optional[str] = None


@dataclass(frozen=True)
class CollectFeesRequest:
    opcode: ClassVar[Opcode] = Opcode.COLLECT_FEES
    sender: str
    gas: int


@dataclass(frozen=True)
class SetFeesRequest:
    opcode: ClassVar[Opcode] = Opcode.SET_FEES
    sender: str
    new_lp_fee: int
    new_protocol_fee: int
    new_ref_fee: int
    new_protocol_fee_address: Optional[str]
    new_provider_fee_address: Optional[str] = None


@dataclass(frozen=True)
class ResetGasRequest:
    """``balance`` is the pool's native-coin balance as reported by the host."""

    opcode: ClassVar[Opcode] = Opcode.RESET_GAS
    sender: str
    balance: int


@dataclass(frozen=True)
class UpdateReservesRequest:
    """Overwrite both reserves; supply and fee accumulators are kept."""

    opcode: ClassVar[Opcode] = Opcode.UPDATE_RESERVES
    sender: str
    new_reserve0: int
    new_reserve1: int


@dataclass(frozen=True)
class SetLockStatusRequest:
    opcode: ClassVar[Opcode] = Opcode.SET_LOCK_STATUS
    sender: str
    locked: bool


@dataclass(frozen=True)
class AddAuthorizedRequest:
    opcode: ClassVar[Opcode] = Opcode.ADD_AUTHORIZED
    sender: str
    address: str


@dataclass(frozen=True)
class RemoveAuthorizedRequest:
    opcode: ClassVar[Opcode] = Opcode.REMOVE_AUTHORIZED
    sender: str
    address: str


@dataclass(frozen=True)
class GetPoolDataRequest:
    opcode: ClassVar[Opcode] = Opcode.GET_POOL_DATA


@dataclass(frozen=True)
class GetExpectedOutputsRequest:
    opcode: ClassVar[Opcode] = Opcode.GET_EXPECTED_OUTPUTS
    amount: int
    token_wallet: str
    has_ref: bool = False


Request = (
    SwapRequest
    | ProvideLiquidityRequest
    | BurnNotificationRequest
    | CollectFeesRequest
    | SetFeesRequest
    | ResetGasRequest
    | UpdateReservesRequest
    | SetLockStatusRequest
    | AddAuthorizedRequest
    | RemoveAuthorizedRequest
    | GetPoolDataRequest
    | GetExpectedOutputsRequest
)
