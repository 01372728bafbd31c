"""Value types produced by the quoting and routing layer.

All types are frozen dataclasses. A `Route` is a closed sum type: callers
dispatch on `DirectHop` / `TwoHop` and there is no third shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..state.pools import Pool, Symbol


@dataclass(frozen=True)
class DirectHop:
    pool: Pool
    token_in: Symbol
    token_out: Symbol

    def __post_init__(self) -> None:
        if self.pool.other(self.token_in) != self.token_out:
            raise ValueError(f"pool {self.pool.pair} does not connect {self.token_in} -> {self.token_out}")

    @property
    def pools(self) -> Tuple[Pool, ...]:
        return (self.pool,)


@dataclass(frozen=True)
class TwoHop:
    first: Pool
    second: Pool
    hub: Symbol
    token_in: Symbol
    token_out: Symbol

    def __post_init__(self) -> None:
        if self.first.other(self.token_in) != self.hub:
            raise ValueError(f"first leg {self.first.pair} does not connect {self.token_in} -> {self.hub}")
        if self.second.other(self.hub) != self.token_out:
            raise ValueError(f"second leg {self.second.pair} does not connect {self.hub} -> {self.token_out}")

    @property
    def pools(self) -> Tuple[Pool, ...]:
        return (self.first, self.second)

    @property
    def legs(self) -> Tuple[DirectHop, DirectHop]:
        return (
            DirectHop(self.first, self.token_in, self.hub),
            DirectHop(self.second, self.hub, self.token_out),
        )


Route = Union[DirectHop, TwoHop]


@dataclass(frozen=True)
class Quote:
    """
    Pure swap quote. Never persisted.

    `snapshot_timestamp` is the oldest oracle timestamp the quote depends on,
    so callers can discard stale quotes before submission.
    `price_impact_bps` is signed: negative means better than the oracle rate.
    """

    input_amount: int
    output_amount: int
    fee_amount: int
    price_impact_bps: int
    route: Route
    snapshot_timestamp: int
    hop_quotes: Tuple["Quote", ...] = ()

    @property
    def token_in(self) -> Symbol:
        return self.route.token_in

    @property
    def token_out(self) -> Symbol:
        return self.route.token_out

    @property
    def is_multi_hop(self) -> bool:
        return isinstance(self.route, TwoHop)
