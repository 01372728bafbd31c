"""Leveraged perpetual position accounting.

Every function is stateless and operates on frozen snapshots and plain ints.

Conventions:
- `*_e8` prices are quote-per-base scaled by 1e8.
- `*_bps` rates are basis points (1/10_000).
- Sizes, collateral and PnL are base-asset units.
- Signed results are computed as a floored magnitude with the sign applied
  afterwards, so a long and a short of equal size see PnL of equal magnitude.

Positions are isolated: closing or repricing one position never changes the
liquidation price of another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from ..state.positions import PerpAccountBalance, PerpPosition
from .errors import InsufficientAvailableBalanceError, LeverageOutOfBoundsError
from .fixed_point import BPS_DENOM, Rounding, mul_div


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionMetrics:
    position_id: str
    current_price_e8: int
    unrealized_pnl: int
    margin_ratio_pct: int
    margin_ratio_bps: int
    liquidation_price_e8: int
    liquidatable: bool


# -- Basic helpers -----------------------------------------------------------

def _signed_ratio(numerator: int, scale: int, denominator: int) -> int:
    """``numerator * scale / denominator`` truncated toward zero."""
    mag = mul_div(abs(numerator), scale, denominator, Rounding.DOWN)
    return mag if numerator >= 0 else -mag


def _require_price(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise ValueError(f"{name} must be positive: {value}")
    return value


# -- PnL / margin ------------------------------------------------------------

def unrealized_pnl(position: PerpPosition, current_price_e8: int) -> int:
    """
    Long: ``size * (current - entry) / entry``; short: the negation.
    """
    _require_price(current_price_e8, name="current_price_e8")
    entry = position.entry_price_e8
    mag = mul_div(position.size_base, abs(current_price_e8 - entry), entry, Rounding.DOWN)
    price_up = current_price_e8 >= entry
    profitable = price_up if position.is_long else not price_up
    return mag if profitable else -mag


def margin_ratio_pct(position: PerpPosition, pnl: int) -> int:
    """``(collateral + pnl) * 100 / size`` truncated toward zero."""
    return _signed_ratio(position.collateral_base + pnl, 100, position.size_base)


def margin_ratio_bps(position: PerpPosition, pnl: int) -> int:
    """Same ratio as `margin_ratio_pct`, in basis points."""
    return _signed_ratio(position.collateral_base + pnl, BPS_DENOM, position.size_base)


def liquidation_price(position: PerpPosition, maintenance_margin_bps: int) -> int:
    """
    Price at which the margin ratio reaches `maintenance_margin_bps`.

    Solving ``(collateral + pnl) * 10_000 = m * size`` for the price:

        long:  p = entry * (10_000*size + m*size - 10_000*collateral) / (10_000*size)
        short: p = entry * (10_000*size - m*size + 10_000*collateral) / (10_000*size)

    Longs round up and shorts round down, so the reported price is never past
    the true threshold. A position that cannot be liquidated at any positive
    price reports 0.
    """
    if not isinstance(maintenance_margin_bps, int) or isinstance(maintenance_margin_bps, bool):
        raise TypeError("maintenance_margin_bps must be an int")
    if not (0 <= maintenance_margin_bps <= BPS_DENOM):
        raise ValueError(f"maintenance_margin_bps must be in [0, 10000]: {maintenance_margin_bps}")

    size = position.size_base
    base = BPS_DENOM * size
    if position.is_long:
        numerator = base + maintenance_margin_bps * size - BPS_DENOM * position.collateral_base
        rounding = Rounding.UP
    else:
        numerator = base - maintenance_margin_bps * size + BPS_DENOM * position.collateral_base
        rounding = Rounding.DOWN
    if numerator <= 0:
        return 0
    return mul_div(position.entry_price_e8, numerator, base, rounding)


def is_liquidatable(position: PerpPosition, pnl: int, maintenance_margin_bps: int) -> bool:
    """True once equity has fallen to the maintenance requirement."""
    return (position.collateral_base + pnl) * BPS_DENOM <= maintenance_margin_bps * position.size_base


def position_metrics(position: PerpPosition, current_price_e8: int, maintenance_margin_bps: int) -> PositionMetrics:
    pnl = unrealized_pnl(position, current_price_e8)
    return PositionMetrics(
        position_id=position.id,
        current_price_e8=current_price_e8,
        unrealized_pnl=pnl,
        margin_ratio_pct=margin_ratio_pct(position, pnl),
        margin_ratio_bps=margin_ratio_bps(position, pnl),
        liquidation_price_e8=liquidation_price(position, maintenance_margin_bps),
        liquidatable=is_liquidatable(position, pnl, maintenance_margin_bps),
    )


# -- Open / close ------------------------------------------------------------

def validate_leverage(leverage: int, max_leverage: int) -> None:
    """Reject leverage outside ``[1, max_leverage]``; never clamps."""
    if not isinstance(leverage, int) or isinstance(leverage, bool):
        raise TypeError("leverage must be an int")
    if leverage < 1 or leverage > max_leverage:
        raise LeverageOutOfBoundsError(leverage, max_leverage)


def validate_open(balance: PerpAccountBalance, requested_size_base: int) -> None:
    """
    Raises:
        InsufficientAvailableBalanceError: requested size exceeds the available balance
    """
    if not isinstance(requested_size_base, int) or isinstance(requested_size_base, bool):
        raise TypeError("requested_size_base must be an int")
    if requested_size_base <= 0:
        raise ValueError(f"requested_size_base must be positive: {requested_size_base}")
    if requested_size_base > balance.available_base:
        logger.info(
            "open rejected: size %d > available %d", requested_size_base, balance.available_base
        )
        raise InsufficientAvailableBalanceError(requested_size_base, balance.available_base)


def plan_open_position(
    balance: PerpAccountBalance,
    *,
    position_id: str,
    is_long: bool,
    collateral_base: int,
    leverage: int,
    entry_price_e8: int,
    max_leverage: int,
    opened_at: int = 0,
) -> Tuple[PerpPosition, PerpAccountBalance]:
    """
    Position and post-open balance for ``size = collateral * leverage``.

    The collateral moves from available to locked; `total_base` is unchanged.
    """
    validate_leverage(leverage, max_leverage)
    _require_price(entry_price_e8, name="entry_price_e8")
    if not isinstance(collateral_base, int) or isinstance(collateral_base, bool) or collateral_base <= 0:
        raise ValueError(f"collateral_base must be a positive int: {collateral_base}")
    size = collateral_base * leverage
    validate_open(balance, size)

    position = PerpPosition(
        id=position_id,
        is_long=is_long,
        size_base=size,
        collateral_base=collateral_base,
        leverage=leverage,
        entry_price_e8=entry_price_e8,
        opened_at=opened_at,
        updated_at=opened_at,
    )
    post = replace(balance, available_base=balance.available_base - collateral_base)
    logger.debug(
        "open %s %s: size=%d collateral=%d leverage=%dx",
        "long" if is_long else "short", position_id, size, collateral_base, leverage,
    )
    return position, post


def settle_close(balance: PerpAccountBalance, position: PerpPosition, current_price_e8: int) -> PerpAccountBalance:
    """
    Balance after closing `position` at `current_price_e8`.

    Equity (collateral + PnL, floored at zero) returns to the available balance.
    """
    if balance.locked_base < position.collateral_base:
        raise ValueError(
            f"position {position.id} collateral {position.collateral_base} "
            f"exceeds locked balance {balance.locked_base}"
        )
    pnl = unrealized_pnl(position, current_price_e8)
    payout = max(0, position.collateral_base + pnl)
    return PerpAccountBalance(
        available_base=balance.available_base + payout,
        total_base=balance.total_base - position.collateral_base + payout,
    )


def account_equity(
    balance: PerpAccountBalance,
    positions: Iterable[PerpPosition],
    current_price_e8: int,
) -> int:
    """``available + sum(collateral + pnl)`` over open positions."""
    total = balance.available_base
    for position in positions:
        total += position.collateral_base + unrealized_pnl(position, current_price_e8)
    return total


def find_position(positions: Iterable[PerpPosition], position_id: str) -> Optional[PerpPosition]:
    for position in positions:
        if position.id == position_id:
            return position
    return None
