"""Exception types for the pricing and position engine.

Every error means "do not submit this transaction". Each carries an
``ErrorKind`` so the caller can map it to a specific message without
string matching.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    OVERFLOW = "overflow"
    DIVISION_BY_ZERO = "division_by_zero"
    POOL_PAUSED = "pool_paused"
    INSUFFICIENT_REAL_LIQUIDITY = "insufficient_real_liquidity"
    NO_ROUTE_AVAILABLE = "no_route_available"
    INVALID_LIQUIDITY_AMOUNT = "invalid_liquidity_amount"
    INSUFFICIENT_COLLATERAL = "insufficient_collateral"
    INVALID_VAULT_STATE = "invalid_vault_state"
    INSUFFICIENT_AVAILABLE_BALANCE = "insufficient_available_balance"
    LEVERAGE_OUT_OF_BOUNDS = "leverage_out_of_bounds"


class EngineError(Exception):
    """Base class for all recoverable engine rejections."""

    kind: ErrorKind


# -- Arithmetic ---------------------------------------------------------------

class ArithmeticOverflowError(EngineError, ArithmeticError):
    """An operand or result does not fit the widened 256-bit word."""

    kind = ErrorKind.OVERFLOW


class DivisionByZeroError(EngineError, ZeroDivisionError):
    kind = ErrorKind.DIVISION_BY_ZERO


# -- Pools / routing ----------------------------------------------------------

class PoolPausedError(EngineError):
    kind = ErrorKind.POOL_PAUSED

    def __init__(self, pair: str) -> None:
        self.pair = pair
        super().__init__(f"pool {pair} is paused")


class InsufficientRealLiquidityError(EngineError):
    kind = ErrorKind.INSUFFICIENT_REAL_LIQUIDITY

    def __init__(self, pair: str, amount_out: int, real_reserve_out: int) -> None:
        self.pair = pair
        self.amount_out = amount_out
        self.real_reserve_out = real_reserve_out
        super().__init__(
            f"pool {pair}: amount_out ({amount_out}) exceeds real reserve ({real_reserve_out})"
        )


class NoRouteAvailableError(EngineError):
    kind = ErrorKind.NO_ROUTE_AVAILABLE

    def __init__(self, from_symbol: str, to_symbol: str, reason: str = "") -> None:
        self.from_symbol = from_symbol
        self.to_symbol = to_symbol
        msg = f"no route from {from_symbol} to {to_symbol}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


# -- Liquidity ----------------------------------------------------------------

class InvalidLiquidityAmountError(EngineError):
    kind = ErrorKind.INVALID_LIQUIDITY_AMOUNT


# -- Vault --------------------------------------------------------------------

class InsufficientCollateralError(EngineError):
    kind = ErrorKind.INSUFFICIENT_COLLATERAL

    def __init__(self, collateral_amount: int, debt_amount: int, min_ratio_pct: int) -> None:
        self.collateral_amount = collateral_amount
        self.debt_amount = debt_amount
        self.min_ratio_pct = min_ratio_pct
        super().__init__(
            f"collateral {collateral_amount} does not cover debt {debt_amount} "
            f"at {min_ratio_pct}% minimum ratio"
        )


class InvalidVaultStateError(EngineError):
    kind = ErrorKind.INVALID_VAULT_STATE


# -- Perps --------------------------------------------------------------------

class InsufficientAvailableBalanceError(EngineError):
    kind = ErrorKind.INSUFFICIENT_AVAILABLE_BALANCE

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(f"requested {requested} but only {available} available")


class LeverageOutOfBoundsError(EngineError):
    kind = ErrorKind.LEVERAGE_OUT_OF_BOUNDS

    def __init__(self, leverage: int, max_leverage: int) -> None:
        self.leverage = leverage
        self.max_leverage = max_leverage
        super().__init__(f"leverage {leverage} outside [1, {max_leverage}]")
