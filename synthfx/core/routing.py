"""
Hub routing for synthetic currency swaps.

Every synthetic is paired with a single hub currency (``pUSD`` in production),
so a route is either:
- a direct hop through the pair's own pool, or
- exactly two hops ``from -> hub -> to``.

Selection rule: a direct pool always wins when it exists. Two-hop routing is a
fallback, not a competing option priced against the direct pool.

Composition: hop 2 is quoted on hop 1's output amount, so
``quote_route(TwoHop).output_amount == quote(hop2, quote(hop1, x).output_amount)``.
A hop 1 output of zero yields a zero-output quote with only the first hop
quoted.
"""

from __future__ import annotations

import logging
from typing import List

from ..state.pools import PoolIndex, Symbol
from .errors import NoRouteAvailableError, PoolPausedError
from .pool import quote_swap_exact_in
from .types import DirectHop, Quote, Route, TwoHop


logger = logging.getLogger(__name__)


def needs_multi_hop(from_symbol: Symbol, to_symbol: Symbol, pool_index: PoolIndex) -> bool:
    """True iff no direct pool exists for the pair."""
    if from_symbol == to_symbol:
        return False
    return not pool_index.has_pair(from_symbol, to_symbol)


def plan_route(from_symbol: Symbol, to_symbol: Symbol, pool_index: PoolIndex, hub_symbol: Symbol) -> Route:
    """
    Choose the route for a pair.

    Raises:
        NoRouteAvailableError: identical symbols, or a hub leg is missing
    """
    if from_symbol == to_symbol:
        raise NoRouteAvailableError(from_symbol, to_symbol, "source and destination are the same")

    direct = pool_index.get(from_symbol, to_symbol)
    if direct is not None:
        logger.debug("route %s -> %s: direct via %s", from_symbol, to_symbol, direct.pair)
        return DirectHop(direct, from_symbol, to_symbol)

    if hub_symbol in (from_symbol, to_symbol):
        raise NoRouteAvailableError(from_symbol, to_symbol, f"no direct pool with hub {hub_symbol}")

    first = pool_index.get(from_symbol, hub_symbol)
    second = pool_index.get(hub_symbol, to_symbol)
    missing: List[str] = []
    if first is None:
        missing.append(f"{from_symbol}/{hub_symbol}")
    if second is None:
        missing.append(f"{hub_symbol}/{to_symbol}")
    if missing:
        raise NoRouteAvailableError(from_symbol, to_symbol, "missing hub leg " + ", ".join(missing))

    logger.debug(
        "route %s -> %s: two-hop via %s (%s, %s)",
        from_symbol, to_symbol, hub_symbol, first.pair, second.pair,
    )
    return TwoHop(first, second, hub_symbol, from_symbol, to_symbol)


def quote_route(route: Route, amount_in: int) -> Quote:
    """Quote a route by chaining per-hop exact-in quotes."""
    if isinstance(route, DirectHop):
        return quote_swap_exact_in(route.pool, route.token_in, amount_in)

    if isinstance(route, TwoHop):
        q1 = quote_swap_exact_in(route.first, route.token_in, amount_in)
        if q1.output_amount == 0:
            # Dust input: hop 1 pays nothing.
            if route.second.paused:
                raise PoolPausedError(route.second.pair)
            logger.debug("route %s -> %s: first leg %s returns 0", route.token_in, route.token_out, route.first.pair)
            return Quote(
                input_amount=amount_in,
                output_amount=0,
                fee_amount=q1.fee_amount,
                price_impact_bps=q1.price_impact_bps,
                route=route,
                snapshot_timestamp=min(q1.snapshot_timestamp, route.second.oracle_timestamp),
                hop_quotes=(q1,),
            )
        q2 = quote_swap_exact_in(route.second, route.hub, q1.output_amount)
        return Quote(
            input_amount=amount_in,
            output_amount=q2.output_amount,
            fee_amount=q1.fee_amount + q2.fee_amount,
            price_impact_bps=q1.price_impact_bps + q2.price_impact_bps,
            route=route,
            snapshot_timestamp=min(q1.snapshot_timestamp, q2.snapshot_timestamp),
            hop_quotes=(q1, q2),
        )

    raise TypeError(f"unsupported route type: {type(route).__name__}")
