"""Pool controller: the single entry point that binds every operation to the pool.

``PoolController.step(request)`` is the dispatch-table engine. It:

1. Resolves the handler for the request's opcode.
2. Checks lock status and authorization.
3. Lets the engine compute a result and builds the next (immutable) state.
4. Checks all invariants on the post-state.
5. Commits the state and returns the outbound instructions.

Nothing is committed unless every step succeeds, so a rejected request leaves
the pool exactly as it was. Operations are serialized by a non-reentrant lock;
no handler performs I/O.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Callable

from ..config import PoolConfig
from ..errors import (
    InsufficientGasError,
    InvalidCallerError,
    InvalidRecipientError,
    InvalidTokenError,
    PoolError,
    PoolInvariantError,
    PoolLockedError,
)
from ..kernels.fixed_point import require_coins
from ..state.fees import FeeSchedule, validate_recipient
from ..state.pool import PoolState, PoolStatus, state_to_dict
from ..state.reserves import ReserveState, Side
from .collector import collect
from .instructions import Event, Instruction, InstructionKind, StepResult, transfer
from .invariants import check_all
from .liquidity import apply_add, apply_remove, compute_add, compute_remove
from .requests import (
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
from .swap import apply_swap, compute_swap, quote_swap

logger = logging.getLogger(__name__)

# (next_state, event, instructions, data); next_state None means read-only or no-op.
Outcome = tuple[PoolState | None, Event, tuple[Instruction, ...], object]

_ADMIN_OPS = frozenset({
    Opcode.SET_FEES,
    Opcode.SET_LOCK_STATUS,
    Opcode.RESET_GAS,
    Opcode.ADD_AUTHORIZED,
    Opcode.REMOVE_AUTHORIZED,
    Opcode.UPDATE_RESERVES,
})
# Forwarded by the router (swap, deposit) or the LP token ledger (burn).
_FORWARDED_OPS = frozenset({
    Opcode.SWAP,
    Opcode.PROVIDE_LIQUIDITY,
    Opcode.BURN_NOTIFICATION,
})
_AUTHORIZED_OPS = _ADMIN_OPS | _FORWARDED_OPS
_READ_ONLY_OPS = frozenset({Opcode.GET_POOL_DATA, Opcode.GET_EXPECTED_OUTPUTS})


def initial_state(config: PoolConfig) -> PoolState:
    """Empty, active pool with the router as the only authorized identity."""
    return PoolState(
        fees=config.fee_schedule(),
        reserves=ReserveState(),
        is_locked=False,
        authorized=frozenset({config.router_address}),
    )


class PoolController:
    def __init__(self, config: PoolConfig, state: PoolState | None = None) -> None:
        self.config = config
        self._state = initial_state(config) if state is None else state
        self._lock = threading.Lock()
        self._handlers: dict[Opcode, Callable[[PoolState, object], Outcome]] = {
            Opcode.SWAP: self._swap,
            Opcode.PROVIDE_LIQUIDITY: self._provide_liquidity,
            Opcode.BURN_NOTIFICATION: self._burn_notification,
            Opcode.COLLECT_FEES: self._collect_fees,
            Opcode.SET_FEES: self._set_fees,
            Opcode.RESET_GAS: self._reset_gas,
            Opcode.UPDATE_RESERVES: self._update_reserves,
            Opcode.SET_LOCK_STATUS: self._set_lock_status,
            Opcode.ADD_AUTHORIZED: self._add_authorized,
            Opcode.REMOVE_AUTHORIZED: self._remove_authorized,
            Opcode.GET_POOL_DATA: self._get_pool_data,
            Opcode.GET_EXPECTED_OUTPUTS: self._get_expected_outputs,
        }

    @classmethod
    def from_config(cls, config: PoolConfig) -> "PoolController":
        return cls(config)

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def status(self) -> PoolStatus:
        return self._state.status

    # -- Getters ---------------------------------------------------------------

    def get_reserves(self) -> tuple[int, int]:
        r = self._state.reserves
        return r.reserve0, r.reserve1

    def get_total_supply(self) -> int:
        return self._state.reserves.total_supply

    def get_pool_data(self) -> dict[str, object]:
        return state_to_dict(self._state)

    # -- Entry points ----------------------------------------------------------

    def step_or_raise(self, request: Request) -> StepResult:
        """Execute one request; raises the typed ``PoolError`` on rejection."""
        opcode = getattr(request, "opcode", None)
        handler = self._handlers.get(opcode)  # type: ignore[arg-type]
        if handler is None:
            raise TypeError(f"unsupported request: {type(request).__name__}")

        with self._lock:
            state = self._state
            self._check_access(state, opcode, request)
            next_state, event, instructions, data = handler(state, request)
            if next_state is not None and next_state is not state:
                violations = check_all(next_state)
                if violations:
                    raise PoolInvariantError(violations)
                self._state = next_state
                self._log_commit(request, event, data)
        return StepResult(accepted=True, event=event, instructions=instructions, data=data)

    def step(self, request: Request) -> StepResult:
        """Like ``step_or_raise()`` but returns rejections as a ``StepResult``."""
        try:
            return self.step_or_raise(request)
        except PoolError as exc:
            logger.warning("Rejected %s: %s (%s)", type(request).__name__, exc.kind.value, exc)
            return StepResult(accepted=False, rejection=exc.kind, message=str(exc))

    # -- Guards ----------------------------------------------------------------

    def _check_access(self, state: PoolState, opcode: Opcode, request: object) -> None:
        if opcode in _READ_ONLY_OPS:
            return
        if opcode in _AUTHORIZED_OPS and not state.is_authorized(getattr(request, "sender", None)):
            raise InvalidCallerError(f"{getattr(request, 'sender', None)!r} is not authorized")
        if state.is_locked and opcode is not Opcode.SET_LOCK_STATUS:
            raise PoolLockedError("pool is locked")

    def _log_commit(self, request: Any, event: Event, data: Any) -> None:
        if event is Event.SWAPPED:
            logger.info(
                "Swap %s in via %s -> %s out (fees provider=%s protocol=%s ref=%s)",
                data.amount_in, request.token_wallet, data.amount_out,
                data.provider_fee, data.protocol_fee, data.ref_fee,
            )
        elif event is Event.LIQUIDITY_ADDED:
            logger.info(
                "Liquidity added by %s: (%s, %s) -> %s LP",
                request.from_address, data.amount0_used, data.amount1_used, data.lp_minted,
            )
        elif event is Event.LIQUIDITY_REMOVED:
            logger.info(
                "Liquidity removed by %s: %s LP -> (%s, %s)",
                request.from_address, data.lp_burned, data.amount0, data.amount1,
            )
        elif event is Event.FEES_COLLECTED:
            for c in data:
                logger.info(
                    "Fees collected on %s: provider=%s protocol=%s reward=%s",
                    c.side.name, c.provider, c.protocol, c.reward,
                )
        elif event is Event.FEES_UPDATED:
            logger.info(
                "Fees updated: lp=%s protocol=%s ref=%s",
                data.lp_fee_bps, data.protocol_fee_bps, data.ref_fee_bps,
            )
        elif event is Event.RESERVES_UPDATED:
            logger.info("Reserves set to (%s, %s) by %s", data[0], data[1], request.sender)
        elif event is Event.LOCK_STATUS_CHANGED:
            logger.info("Pool %s by %s", data.value, request.sender)
        elif event is Event.AUTHORIZED_ADDED:
            logger.info("Authorized %s", data)
        elif event is Event.AUTHORIZED_REMOVED:
            logger.info("Deauthorized %s", data)

    def _side_for_wallet(self, token_wallet: str) -> Side:
        if token_wallet == self.config.wallet0:
            return Side.TOKEN0
        if token_wallet == self.config.wallet1:
            return Side.TOKEN1
        raise InvalidTokenError(f"unknown token wallet: {token_wallet!r}")

    # -- Handlers --------------------------------------------------------------

    def _swap(self, state: PoolState, req: SwapRequest) -> Outcome:
        side_in = self._side_for_wallet(req.token_wallet)
        side_out = side_in.other
        validate_recipient("from_address", req.from_address)
        require_coins("min_out", req.min_out)
        if req.has_ref:
            validate_recipient("ref_address", req.ref_address)

        r = state.reserves
        result = compute_swap(
            req.amount_in,
            r.reserve(side_in),
            r.reserve(side_out),
            req.has_ref,
            state.fees,
            min_amount_in=self.config.min_swap_amount,
        )

        if result.amount_out < req.min_out:
            logger.debug(
                "Swap refunded: amount_out %s < min_out %s for %s",
                result.amount_out, req.min_out, req.from_address,
            )
            refund = transfer(InstructionKind.REFUND, req.from_address, side_in, req.amount_in)
            return None, Event.SWAP_REFUNDED, (refund,), result

        instructions = [transfer(InstructionKind.TRANSFER_OUT, req.from_address, side_out, result.amount_out)]
        if result.ref_fee > 0:
            instructions.append(transfer(InstructionKind.REF_PAYOUT, req.ref_address, side_out, result.ref_fee))

        next_state = replace(state, reserves=apply_swap(r, side_in, result))
        return next_state, Event.SWAPPED, tuple(instructions), result

    def _provide_liquidity(self, state: PoolState, req: ProvideLiquidityRequest) -> Outcome:
        validate_recipient("from_address", req.from_address)
        require_coins("min_lp_out", req.min_lp_out)
        r = state.reserves
        result = compute_add(
            req.amount0,
            req.amount1,
            r.reserve0,
            r.reserve1,
            r.total_supply,
            min_liquidity=self.config.min_liquidity,
        )

        if result.lp_minted < req.min_lp_out:
            logger.debug(
                "Liquidity refunded: lp %s < min_lp_out %s for %s",
                result.lp_minted, req.min_lp_out, req.from_address,
            )
            refunds = (
                transfer(InstructionKind.REFUND, req.from_address, Side.TOKEN0, req.amount0),
                transfer(InstructionKind.REFUND, req.from_address, Side.TOKEN1, req.amount1),
            )
            return None, Event.LIQUIDITY_REFUNDED, refunds, result

        instructions = [Instruction(kind=InstructionKind.MINT_LP, to=req.from_address, amount=result.lp_minted)]
        for side, refund in ((Side.TOKEN0, result.amount0_refund), (Side.TOKEN1, result.amount1_refund)):
            if refund > 0:
                instructions.append(transfer(InstructionKind.REFUND, req.from_address, side, refund))

        next_state = replace(state, reserves=apply_add(r, result))
        return next_state, Event.LIQUIDITY_ADDED, tuple(instructions), result

    def _burn_notification(self, state: PoolState, req: BurnNotificationRequest) -> Outcome:
        recipient = req.response_address or req.from_address
        validate_recipient("from_address", recipient)
        r = state.reserves
        result = compute_remove(req.lp_amount, r.reserve0, r.reserve1, r.total_supply)

        instructions = tuple(
            transfer(InstructionKind.WITHDRAW, recipient, side, amount)
            for side, amount in ((Side.TOKEN0, result.amount0), (Side.TOKEN1, result.amount1))
            if amount > 0
        )
        next_state = replace(state, reserves=apply_remove(r, result))
        return next_state, Event.LIQUIDITY_REMOVED, instructions, result

    def _collect_fees(self, state: PoolState, req: CollectFeesRequest) -> Outcome:
        validate_recipient("sender", req.sender)
        require_coins("gas", req.gas)
        result = collect(state.reserves, state.fees, req.sender, threshold=self.config.min_collect_fees)
        if result is None:
            logger.debug("Fee collection skipped: no accumulator reached %s", self.config.min_collect_fees)
            return None, Event.NOTHING_TO_COLLECT, (), None

        gas_needed = len(result.payouts) * self.config.transfer_gas
        if req.gas - gas_needed < self.config.min_operating_reserve:
            raise InsufficientGasError(
                f"gas {req.gas} cannot cover {len(result.payouts)} payouts "
                f"and keep reserve {self.config.min_operating_reserve}"
            )

        next_state = replace(state, reserves=result.reserves)
        return next_state, Event.FEES_COLLECTED, result.payouts, result.collected

    def _set_fees(self, state: PoolState, req: SetFeesRequest) -> Outcome:
        # An omitted provider address keeps the current one; a blank one is rejected.
        provider_fee_address = req.new_provider_fee_address
        if provider_fee_address is None:
            provider_fee_address = state.fees.provider_fee_address
        fees = FeeSchedule(
            lp_fee_bps=req.new_lp_fee,
            protocol_fee_bps=req.new_protocol_fee,
            ref_fee_bps=req.new_ref_fee,
            provider_fee_address=provider_fee_address,
            protocol_fee_address=req.new_protocol_fee_address,  # type: ignore[arg-type]
        )
        return replace(state, fees=fees), Event.FEES_UPDATED, (), fees

    def _reset_gas(self, state: PoolState, req: ResetGasRequest) -> Outcome:
        require_coins("balance", req.balance)
        excess = req.balance - self.config.min_operating_reserve
        if excess <= 0:
            return None, Event.GAS_RESET, (), 0
        logger.info("Gas reset: returning %s to %s", excess, req.sender)
        refund = Instruction(kind=InstructionKind.GAS_REFUND, to=req.sender, amount=excess)
        return None, Event.GAS_RESET, (refund,), excess

    def _update_reserves(self, state: PoolState, req: UpdateReservesRequest) -> Outcome:
        """Administrative reserve override. Supply and fee accumulators are left as they are."""
        require_coins("new_reserve0", req.new_reserve0)
        require_coins("new_reserve1", req.new_reserve1)
        next_state = replace(state, reserves=state.reserves.with_reserves(req.new_reserve0, req.new_reserve1))
        return next_state, Event.RESERVES_UPDATED, (), (req.new_reserve0, req.new_reserve1)

    def _set_lock_status(self, state: PoolState, req: SetLockStatusRequest) -> Outcome:
        if not isinstance(req.locked, bool):
            raise TypeError("locked must be a bool")
        next_state = replace(state, is_locked=req.locked)
        return next_state, Event.LOCK_STATUS_CHANGED, (), next_state.status

    def _add_authorized(self, state: PoolState, req: AddAuthorizedRequest) -> Outcome:
        address = validate_recipient("address", req.address)
        next_state = replace(state, authorized=state.authorized | {address})
        return next_state, Event.AUTHORIZED_ADDED, (), address

    def _remove_authorized(self, state: PoolState, req: RemoveAuthorizedRequest) -> Outcome:
        if req.address not in state.authorized:
            raise InvalidRecipientError(f"{req.address!r} is not authorized")
        if state.authorized == {req.address}:
            raise InvalidCallerError("cannot remove the last authorized identity")
        next_state = replace(state, authorized=state.authorized - {req.address})
        return next_state, Event.AUTHORIZED_REMOVED, (), req.address

    def _get_pool_data(self, state: PoolState, req: GetPoolDataRequest) -> Outcome:
        return None, Event.QUERY, (), state_to_dict(state)

    def _get_expected_outputs(self, state: PoolState, req: GetExpectedOutputsRequest) -> Outcome:
        side_in = self._side_for_wallet(req.token_wallet)
        result = quote_swap(
            state.reserves,
            side_in,
            req.amount,
            state.fees,
            has_ref=req.has_ref,
            min_amount_in=self.config.min_swap_amount,
        )
        return None, Event.QUERY, (), result
