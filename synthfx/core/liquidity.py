"""
Liquidity add/remove planning that mirrors the pool contract's integer math.

The paired-deposit contract recomputes the ratio itself and reverts when the
submitted amounts disagree with its own integer result, after the user has
already approved spend. Every formula here therefore goes through
`fixed_point.mul_div` / `fixed_point.isqrt` with the contract's rounding:

    amount_b  = floor(amount_a * real_b / real_a)                      (paired deposit)
    lp_first  = isqrt(amount_a * amount_b) - min_liquidity             (empty pool)
    lp        = min(floor(a * supply / real_a), floor(b * supply / real_b))
    out_x     = floor(lp * real_x / supply)                            (removal)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..state.pools import ORACLE_SCALE, Pool
from .errors import DivisionByZeroError, InvalidLiquidityAmountError, PoolPausedError
from .fixed_point import Rounding, isqrt, mul_div


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidityPlan:
    amount_a: int
    amount_b: int
    lp_minted: int


@dataclass(frozen=True)
class RemovalPlan:
    lp_amount: int
    amount_a: int
    amount_b: int


def _require_positive(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise InvalidLiquidityAmountError(f"{name} must be positive: {value}")
    return value


def derive_proportional_amount(pool: Pool, amount_a: int) -> Optional[int]:
    """
    Token-B amount that pairs with `amount_a` at the pool's current real ratio.

    Returns None on the first deposit (``total_lp_supply == 0``): any ratio is
    accepted and establishes the initial price.
    """
    _require_positive(amount_a, name="amount_a")
    if pool.total_lp_supply == 0:
        return None
    if pool.real_reserve_a == 0:
        raise InvalidLiquidityAmountError(f"pool {pool.pair} has LP supply but no token A reserve")
    return mul_div(amount_a, pool.real_reserve_b, pool.real_reserve_a, Rounding.DOWN)


def estimate_lp_minted(pool: Pool, amount_a: int, amount_b: int, min_liquidity: int = 0) -> int:
    """
    LP shares minted for depositing (amount_a, amount_b).

    First deposit mints ``isqrt(amount_a * amount_b) - min_liquidity``
    (`min_liquidity` shares are locked by contracts that do so).
    """
    _require_positive(amount_a, name="amount_a")
    _require_positive(amount_b, name="amount_b")
    if min_liquidity < 0:
        raise ValueError(f"min_liquidity must be non-negative: {min_liquidity}")

    if pool.total_lp_supply == 0:
        root = isqrt(amount_a * amount_b)
        if root <= min_liquidity:
            raise InvalidLiquidityAmountError(
                f"initial liquidity too small: isqrt(amount_a*amount_b)={root} <= {min_liquidity}"
            )
        return root - min_liquidity

    try:
        lp_a = mul_div(amount_a, pool.total_lp_supply, pool.real_reserve_a, Rounding.DOWN)
        lp_b = mul_div(amount_b, pool.total_lp_supply, pool.real_reserve_b, Rounding.DOWN)
    except DivisionByZeroError as exc:
        raise InvalidLiquidityAmountError(f"pool {pool.pair} has LP supply but an empty reserve") from exc
    return min(lp_a, lp_b)


def estimate_remove_amounts(pool: Pool, lp_amount: int) -> Tuple[int, int]:
    """
    Tokens returned for burning `lp_amount` shares.

    Raises:
        InvalidLiquidityAmountError: non-positive amount, empty supply, or more than supply
    """
    _require_positive(lp_amount, name="lp_amount")
    if pool.total_lp_supply == 0:
        raise InvalidLiquidityAmountError(f"pool {pool.pair} has no LP supply")
    if lp_amount > pool.total_lp_supply:
        raise InvalidLiquidityAmountError(
            f"cannot burn more LP than supply: {lp_amount} > {pool.total_lp_supply}"
        )
    amount_a = mul_div(lp_amount, pool.real_reserve_a, pool.total_lp_supply, Rounding.DOWN)
    amount_b = mul_div(lp_amount, pool.real_reserve_b, pool.total_lp_supply, Rounding.DOWN)
    return amount_a, amount_b


def ratio_deviation_pct(pool: Pool, amount_a: int, amount_b: int) -> int:
    """
    Whole-percent deviation between the deposit ratio and the virtual reserves.

    Mirrors the contract's pre-check:
        ratio_x   = amount_x * 1e18 / virtual_x
        deviation = |ratio_a - ratio_b| * 100 / min(ratio_a, ratio_b)
    """
    _require_positive(amount_a, name="amount_a")
    _require_positive(amount_b, name="amount_b")
    ratio_a = mul_div(amount_a, ORACLE_SCALE, pool.virtual_reserve_a)
    ratio_b = mul_div(amount_b, ORACLE_SCALE, pool.virtual_reserve_b)
    if ratio_a >= ratio_b:
        return mul_div(ratio_a - ratio_b, 100, ratio_b)
    return mul_div(ratio_b - ratio_a, 100, ratio_a)


def plan_add_liquidity(
    pool: Pool,
    amount_a: int,
    amount_b: Optional[int] = None,
    *,
    max_deviation_pct: int = 2,
    min_liquidity: int = 0,
) -> LiquidityPlan:
    """
    Build a paired deposit the contract will accept.

    For an existing pool `amount_b` is derived from the real reserves; a
    caller-supplied value must equal it exactly. On the first deposit
    `amount_b` is required and sets the price.

    Raises:
        PoolPausedError: the pool is paused
        InvalidLiquidityAmountError: amounts mismatch, or the contract's virtual
            ratio check would revert
    """
    if pool.paused:
        raise PoolPausedError(pool.pair)

    derived = derive_proportional_amount(pool, amount_a)
    if derived is None:
        if amount_b is None:
            raise InvalidLiquidityAmountError("first deposit requires an explicit amount_b")
        paired_b = amount_b
    else:
        if amount_b is not None and amount_b != derived:
            raise InvalidLiquidityAmountError(
                f"amount_b {amount_b} does not match the pool ratio (expected {derived})"
            )
        paired_b = derived
        if paired_b == 0:
            raise InvalidLiquidityAmountError(f"amount_a {amount_a} pairs with zero token B")
        deviation = ratio_deviation_pct(pool, amount_a, paired_b)
        if deviation >= max_deviation_pct:
            logger.info(
                "pool %s: deposit ratio deviates %d%% from virtual reserves (max %d%%)",
                pool.pair, deviation, max_deviation_pct,
            )
            raise InvalidLiquidityAmountError(
                f"ratio deviation {deviation}% >= {max_deviation_pct}% against virtual reserves"
            )

    lp = estimate_lp_minted(pool, amount_a, paired_b, min_liquidity)
    logger.debug("pool %s: add (%d, %d) -> %d LP", pool.pair, amount_a, paired_b, lp)
    return LiquidityPlan(amount_a=amount_a, amount_b=paired_b, lp_minted=lp)


def plan_remove_liquidity(pool: Pool, lp_amount: int) -> RemovalPlan:
    amount_a, amount_b = estimate_remove_amounts(pool, lp_amount)
    return RemovalPlan(lp_amount=lp_amount, amount_a=amount_a, amount_b=amount_b)
