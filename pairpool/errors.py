"""Exception types for the pool engine.

Every rejection is a ``PoolError`` carrying an ``ErrorKind``. Rejections are
deterministic: the same request against the same state fails the same way, so
callers must change the request rather than retry it.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    NO_LIQUIDITY = "NoLiquidity"
    ZERO_OUTPUT = "ZeroOutput"
    INVALID_CALLER = "InvalidCaller"
    INSUFFICIENT_GAS = "InsufficientGas"
    FEE_OUT_OF_RANGE = "FeeOutOfRange"
    INVALID_TOKEN = "InvalidToken"
    LOW_AMOUNT = "LowAmount"
    LOW_LIQUIDITY = "LowLiquidity"
    WRONG_K = "WrongK"
    MATH_ERROR = "MathError"
    INVALID_RECIPIENT = "InvalidRecipient"
    LOCKED = "Locked"
    INVARIANT = "Invariant"


class PoolError(ValueError):
    """Base class for every typed pool rejection."""

    kind: ErrorKind


class NoLiquidityError(PoolError):
    kind = ErrorKind.NO_LIQUIDITY


class ZeroOutputError(PoolError):
    kind = ErrorKind.ZERO_OUTPUT


class InvalidCallerError(PoolError):
    kind = ErrorKind.INVALID_CALLER


class InsufficientGasError(PoolError):
    kind = ErrorKind.INSUFFICIENT_GAS


class FeeOutOfRangeError(PoolError):
    kind = ErrorKind.FEE_OUT_OF_RANGE


class InvalidTokenError(PoolError):
    kind = ErrorKind.INVALID_TOKEN


class LowAmountError(PoolError):
    kind = ErrorKind.LOW_AMOUNT


class LowLiquidityError(PoolError):
    kind = ErrorKind.LOW_LIQUIDITY


class WrongKError(PoolError):
    """Raised when a swap would decrease the constant product."""

    kind = ErrorKind.WRONG_K


class MathError(PoolError):
    """Raised on overflow past ``MAX_COINS`` or underflow below zero."""

    kind = ErrorKind.MATH_ERROR


class InvalidRecipientError(PoolError):
    kind = ErrorKind.INVALID_RECIPIENT


class PoolLockedError(PoolError):
    kind = ErrorKind.LOCKED


class PoolInvariantError(PoolError):
    """Raised when a post-state violates one or more invariants."""

    kind = ErrorKind.INVARIANT

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
