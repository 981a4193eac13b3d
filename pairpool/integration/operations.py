"""
Boundary parsing: turn inbound message payloads into typed requests.

The dispatch collaborator decodes the wire format and hands over a plain
mapping with an ``op`` field (numeric opcode or its lower-case name) plus the
payload fields. Parsing is structural only: types, presence and non-negativity.
Domain rules (token identity, fee bounds, authorization) are enforced by the
controller.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional

from ..core.requests import (
    AddAuthorizedRequest,
    BurnNotificationRequest,
    CollectFeesRequest,
    GetExpectedOutputsRequest,
    GetPoolDataRequest,
    Opcode,
    ProvideLiquidityRequest,
    RemoveAuthorizedRequest,
    Request,
    ResetGasRequest,
    SetFeesRequest,
    SetLockStatusRequest,
    SwapRequest,
    UpdateReservesRequest,
)


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _optional_str(value: Any, *, name: str) -> Optional[str]:
    if value is None:
        return None
    return _require_str(value, name=name)


def _require_int(value: Any, *, name: str, non_negative: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a bool")
    return value


def parse_opcode(value: Any) -> Opcode:
    """Accept a numeric opcode, a decimal/hex string, or the operation name."""
    if isinstance(value, bool):
        raise ValueError("op must not be a bool")
    if isinstance(value, int):
        try:
            return Opcode(value)
        except ValueError as exc:
            raise ValueError(f"unknown opcode: {value:#x}") from exc
    if isinstance(value, str) and value:
        text = value.strip()
        if text.lower().startswith("0x"):
            return parse_opcode(int(text, 16))
        if text.isdigit():
            return parse_opcode(int(text))
        try:
            return Opcode[text.upper()]
        except KeyError as exc:
            raise ValueError(f"unknown operation: {text!r}") from exc
    raise ValueError(f"op must be an int or string, got {type(value).__name__}")


def _parse_swap(d: Dict[str, Any]) -> SwapRequest:
    has_ref = _require_bool(d.get("has_ref", False), name="has_ref")
    return SwapRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        from_address=_require_str(d.get("from_address"), name="from_address"),
        token_wallet=_require_str(d.get("token_wallet"), name="token_wallet"),
        amount_in=_require_int(d.get("amount_in"), name="amount_in"),
        min_out=_require_int(d.get("min_out", 0), name="min_out"),
        has_ref=has_ref,
        ref_address=_optional_str(d.get("ref_address"), name="ref_address"),
    )


def _parse_provide_liquidity(d: Dict[str, Any]) -> ProvideLiquidityRequest:
    return ProvideLiquidityRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        from_address=_require_str(d.get("from_address"), name="from_address"),
        amount0=_require_int(d.get("amount0"), name="amount0"),
        amount1=_require_int(d.get("amount1"), name="amount1"),
        min_lp_out=_require_int(d.get("min_lp_out", 0), name="min_lp_out"),
    )


def _parse_burn_notification(d: Dict[str, Any]) -> BurnNotificationRequest:
    return BurnNotificationRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        lp_amount=_require_int(d.get("lp_amount"), name="lp_amount"),
        from_address=_require_str(d.get("from_address"), name="from_address"),
        response_address=_optional_str(d.get("response_address"), name="response_address"),
    )


def _parse_collect_fees(d: Dict[str, Any]) -> CollectFeesRequest:
    return CollectFeesRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        gas=_require_int(d.get("gas"), name="gas"),
    )


def _parse_set_fees(d: Dict[str, Any]) -> SetFeesRequest:
    # Fee bounds and recipient presence are domain rules; leave them to the controller.
    return SetFeesRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        new_lp_fee=_require_int(d.get("new_lp_fee"), name="new_lp_fee", non_negative=False),
        new_protocol_fee=_require_int(d.get("new_protocol_fee"), name="new_protocol_fee", non_negative=False),
        new_ref_fee=_require_int(d.get("new_ref_fee"), name="new_ref_fee", non_negative=False),
        new_protocol_fee_address=d.get("new_protocol_fee_address"),
        new_provider_fee_address=d.get("new_provider_fee_address"),
    )


def _parse_reset_gas(d: Dict[str, Any]) -> ResetGasRequest:
    return ResetGasRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        balance=_require_int(d.get("balance"), name="balance"),
    )


def _parse_update_reserves(d: Dict[str, Any]) -> UpdateReservesRequest:
    return UpdateReservesRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        new_reserve0=_require_int(d.get("new_reserve0"), name="new_reserve0"),
        new_reserve1=_require_int(d.get("new_reserve1"), name="new_reserve1"),
    )


def _parse_set_lock_status(d: Dict[str, Any]) -> SetLockStatusRequest:
    return SetLockStatusRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        locked=_require_bool(d.get("locked"), name="locked"),
    )


def _parse_add_authorized(d: Dict[str, Any]) -> AddAuthorizedRequest:
    return AddAuthorizedRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        address=_require_str(d.get("address"), name="address"),
    )


def _parse_remove_authorized(d: Dict[str, Any]) -> RemoveAuthorizedRequest:
    return RemoveAuthorizedRequest(
        sender=_require_str(d.get("sender"), name="sender"),
        address=_require_str(d.get("address"), name="address"),
    )


def _parse_get_pool_data(d: Dict[str, Any]) -> GetPoolDataRequest:
    return GetPoolDataRequest()


def _parse_get_expected_outputs(d: Dict[str, Any]) -> GetExpectedOutputsRequest:
    return GetExpectedOutputsRequest(
        amount=_require_int(d.get("amount"), name="amount"),
        token_wallet=_require_str(d.get("token_wallet"), name="token_wallet"),
        has_ref=_require_bool(d.get("has_ref", False), name="has_ref"),
    )


_PARSERS = {
    Opcode.SWAP: _parse_swap,
    Opcode.PROVIDE_LIQUIDITY: _parse_provide_liquidity,
    Opcode.BURN_NOTIFICATION: _parse_burn_notification,
    Opcode.COLLECT_FEES: _parse_collect_fees,
    Opcode.SET_FEES: _parse_set_fees,
    Opcode.RESET_GAS: _parse_reset_gas,
    Opcode.UPDATE_RESERVES: _parse_update_reserves,
    Opcode.SET_LOCK_STATUS: _parse_set_lock_status,
    Opcode.ADD_AUTHORIZED: _parse_add_authorized,
    Opcode.REMOVE_AUTHORIZED: _parse_remove_authorized,
    Opcode.GET_POOL_DATA: _parse_get_pool_data,
    Opcode.GET_EXPECTED_OUTPUTS: _parse_get_expected_outputs,
}


def parse_request(payload: Mapping) -> Request:
    """
    Parse one inbound message into a typed request.

    Args:
        payload: Mapping with an ``op`` field and the operation's fields

    Returns:
        The matching request dataclass

    Raises:
        ValueError: If the payload is structurally invalid
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"payload must be an object, got {type(payload)}")
    for k in payload.keys():
        if not isinstance(k, str):
            raise ValueError("payload keys must be strings")
    if "op" not in payload:
        raise ValueError("payload is missing 'op'")

    opcode = parse_opcode(payload["op"])
    try:
        return _PARSERS[opcode](dict(payload))
    except ValueError as e:
        raise ValueError(f"Failed to parse {opcode.name.lower()}: {e}") from e
