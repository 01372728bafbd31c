"""
Oracle-anchored AMM pool quotes.

The pool prices swaps on its *virtual* reserves (constant product) while only
its *real* reserves can actually be paid out:

    after_fee  = floor(amount_in * (10_000 - fee_bps) / 10_000)
    k          = virtual_in * virtual_out
    amount_out = virtual_out - floor(k / (virtual_in + after_fee))

An output above the real reserve is rejected, never clamped. The fee is
retained by the pool, so the post-swap virtual reserves are
``(virtual_in + amount_in, virtual_out - amount_out)``.

Flooring the new output reserve rounds `amount_out` up, so the virtual
product is only guaranteed not to fall when the retained fee covers it:

    fee_amount * virtual_in * virtual_out
        >= (virtual_in + amount_in) * (virtual_in + after_fee - 1)

Tiny pools break this: reserves (1, 1) swapping 2 end at (3, 0).
"""

from __future__ import annotations

from dataclasses import replace

from ..state.pools import ORACLE_SCALE, Pool, Symbol
from .errors import InsufficientRealLiquidityError, PoolPausedError
from .fixed_point import BPS_DENOM, Rounding, mul_div
from .types import DirectHop, Quote


def apply_fee(amount_in: int, fee_bps: int) -> int:
    """Input remaining after the swap fee (truncating)."""
    return mul_div(amount_in, BPS_DENOM - fee_bps, BPS_DENOM, Rounding.DOWN)


def oracle_expected_out(pool: Pool, token_in: Symbol, amount_in: int) -> int:
    """
    Output implied by the oracle price alone (no fee, no curve).

    Returns 0 when the pool has no oracle price.
    """
    if pool.oracle_price_e18 == 0:
        return 0
    if token_in == pool.token_a:
        return mul_div(amount_in, pool.oracle_price_e18, ORACLE_SCALE)
    if token_in == pool.token_b:
        return mul_div(amount_in, ORACLE_SCALE, pool.oracle_price_e18)
    raise ValueError(f"{token_in} is not in pool {pool.pair}")


def price_impact_bps(pool: Pool, token_in: Symbol, amount_in: int, amount_out: int) -> int:
    """``1 - (amount_out / amount_in) / oracle_rate`` in basis points (signed)."""
    if pool.oracle_price_e18 == 0 or amount_in == 0:
        return 0
    # Compare against the unrounded oracle rate:
    #   impact = 1 - out * scale / (in * price)        for A -> B
    #   impact = 1 - out * price / (in * scale)        for B -> A
    if token_in == pool.token_a:
        num, den = amount_out * ORACLE_SCALE, amount_in * pool.oracle_price_e18
    else:
        num, den = amount_out * pool.oracle_price_e18, amount_in * ORACLE_SCALE
    realized_bps = mul_div(num, BPS_DENOM, den, Rounding.DOWN)
    return BPS_DENOM - realized_bps


def quote_swap_exact_in(pool: Pool, token_in: Symbol, amount_in: int) -> Quote:
    """
    Quote an exact-in swap against one pool snapshot.

    Raises:
        PoolPausedError: the pool is paused
        InsufficientRealLiquidityError: the curve output exceeds the real reserve
        ValueError: `token_in` is not in the pool or `amount_in` is not positive
        DivisionByZeroError: both the virtual input reserve and the net input are zero
    """
    if not isinstance(amount_in, int) or isinstance(amount_in, bool):
        raise TypeError("amount_in must be an int")
    if amount_in <= 0:
        raise ValueError(f"amount_in must be positive: {amount_in}")
    token_out = pool.other(token_in)
    if pool.paused:
        raise PoolPausedError(pool.pair)

    virtual_in, virtual_out, _real_in, real_out = pool.oriented(token_in)
    after_fee = apply_fee(amount_in, pool.fee_bps)
    fee_amount = amount_in - after_fee

    new_virtual_out = mul_div(virtual_in, virtual_out, virtual_in + after_fee, Rounding.DOWN)
    amount_out = virtual_out - new_virtual_out

    if amount_out > real_out:
        raise InsufficientRealLiquidityError(pool.pair, amount_out, real_out)

    return Quote(
        input_amount=amount_in,
        output_amount=amount_out,
        fee_amount=fee_amount,
        price_impact_bps=price_impact_bps(pool, token_in, amount_in, amount_out),
        route=DirectHop(pool, token_in, token_out),
        snapshot_timestamp=pool.oracle_timestamp,
    )


def spot_rate_e18(pool: Pool, token_in: Symbol) -> int:
    """Marginal virtual-reserve rate (out per in, 1e18 scaled), before fees."""
    virtual_in, virtual_out, _, _ = pool.oriented(token_in)
    return mul_div(virtual_out, ORACLE_SCALE, virtual_in)


def oracle_deviation_bps(pool: Pool) -> int:
    """
    Distance between the real reserve ratio and the oracle price, in bps.

    ``|real_b / real_a - price| / price``; 0 when the pool has no oracle price
    or no token A reserve.
    """
    if pool.oracle_price_e18 == 0 or pool.real_reserve_a == 0:
        return 0
    real_rate = mul_div(pool.real_reserve_b, ORACLE_SCALE, pool.real_reserve_a)
    diff = abs(real_rate - pool.oracle_price_e18)
    return mul_div(diff, BPS_DENOM, pool.oracle_price_e18, Rounding.UP)


def min_amount_out(amount_out: int, slippage_bps: int) -> int:
    """Slippage floor forwarded to the swap contract (truncating)."""
    if not (0 <= slippage_bps <= BPS_DENOM):
        raise ValueError(f"slippage_bps must be in [0, 10000]: {slippage_bps}")
    return mul_div(amount_out, BPS_DENOM - slippage_bps, BPS_DENOM, Rounding.DOWN)


def apply_quote(pool: Pool, quote: Quote) -> Pool:
    """
    Pool snapshot after `quote` settles (what-if only; the chain is authoritative).

    Real and virtual reserves both receive the full input (fee included) and
    pay out `quote.output_amount`.
    """
    if not isinstance(quote.route, DirectHop) or quote.route.pool != pool:
        raise ValueError("quote was not computed against this pool")
    amount_in = quote.input_amount
    amount_out = quote.output_amount
    if quote.token_in == pool.token_a:
        return replace(
            pool,
            real_reserve_a=pool.real_reserve_a + amount_in,
            real_reserve_b=pool.real_reserve_b - amount_out,
            virtual_reserve_a=pool.virtual_reserve_a + amount_in,
            virtual_reserve_b=pool.virtual_reserve_b - amount_out,
        )
    return replace(
        pool,
        real_reserve_a=pool.real_reserve_a - amount_out,
        real_reserve_b=pool.real_reserve_b + amount_in,
        virtual_reserve_a=pool.virtual_reserve_a - amount_out,
        virtual_reserve_b=pool.virtual_reserve_b + amount_in,
    )
