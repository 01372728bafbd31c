"""
Pool snapshots and the pair index used for routing.

A pool is keyed by its ordered currency pair (``"pUSD/pEUR"``). Lookups by
pair are order-insensitive: ``index.get("pEUR", "pUSD")`` finds the same pool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple


# Type aliases
Symbol = str
Amount = int  # Non-negative integer in the token's smallest unit

ORACLE_SCALE = 10**18  # oracle prices: token B per token A, 1e18 fixed point


def pair_key(token_a: Symbol, token_b: Symbol) -> str:
    """Ordered pair key as the pool contract names itself."""
    return f"{token_a}/{token_b}"


def _require_amount(value: object, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    return value


@dataclass(frozen=True)
class Pool:
    """
    Immutable snapshot of one oracle-anchored AMM pool.

    Attributes:
        token_a, token_b: Pool currencies (ordered as the contract stores them)
        real_reserve_a, real_reserve_b: Withdrawable liquidity
        virtual_reserve_a, virtual_reserve_b: Oracle-anchored pricing reserves
        fee_bps: Swap fee in basis points
        oracle_price_e18: Token B per token A, scaled by 1e18
        oracle_timestamp: Timestamp of the oracle/reserve read
        paused: Swaps disabled by the contract
        total_lp_supply: Outstanding LP shares
    """

    token_a: Symbol
    token_b: Symbol
    real_reserve_a: Amount
    real_reserve_b: Amount
    virtual_reserve_a: Amount
    virtual_reserve_b: Amount
    fee_bps: int
    oracle_price_e18: int = 0
    oracle_timestamp: int = 0
    paused: bool = False
    total_lp_supply: Amount = 0

    def __post_init__(self) -> None:
        for name in ("token_a", "token_b"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v:
                raise TypeError(f"{name} must be a non-empty string")
        if self.token_a == self.token_b:
            raise ValueError(f"pool tokens must differ: {self.token_a}")
        for name in (
            "real_reserve_a",
            "real_reserve_b",
            "virtual_reserve_a",
            "virtual_reserve_b",
            "oracle_price_e18",
            "oracle_timestamp",
            "total_lp_supply",
        ):
            _require_amount(getattr(self, name), name=name)
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps <= 10_000):
            raise ValueError(f"fee_bps must be in [0, 10000]: {self.fee_bps}")
        if not isinstance(self.paused, bool):
            raise TypeError("paused must be a bool")

    @property
    def pair(self) -> str:
        return pair_key(self.token_a, self.token_b)

    @property
    def virtual_k(self) -> int:
        return self.virtual_reserve_a * self.virtual_reserve_b

    def has_token(self, symbol: Symbol) -> bool:
        return symbol == self.token_a or symbol == self.token_b

    def other(self, symbol: Symbol) -> Symbol:
        """Return the counter-currency of `symbol` in this pool."""
        if symbol == self.token_a:
            return self.token_b
        if symbol == self.token_b:
            return self.token_a
        raise ValueError(f"{symbol} is not in pool {self.pair}")

    def oriented(self, token_in: Symbol) -> Tuple[Amount, Amount, Amount, Amount]:
        """
        Reserves oriented for a swap from `token_in`.

        Returns:
            (virtual_in, virtual_out, real_in, real_out)
        """
        if token_in == self.token_a:
            return (
                self.virtual_reserve_a,
                self.virtual_reserve_b,
                self.real_reserve_a,
                self.real_reserve_b,
            )
        if token_in == self.token_b:
            return (
                self.virtual_reserve_b,
                self.virtual_reserve_a,
                self.real_reserve_b,
                self.real_reserve_a,
            )
        raise ValueError(f"{token_in} is not in pool {self.pair}")


def _index_key(a: Symbol, b: Symbol) -> Tuple[Symbol, Symbol]:
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class PoolIndex:
    """Order-insensitive pair -> pool lookup over one consistent snapshot."""

    _pools: Mapping[Tuple[Symbol, Symbol], Pool] = field(default_factory=dict)

    @classmethod
    def from_pools(cls, pools: Iterable[Pool]) -> "PoolIndex":
        table: Dict[Tuple[Symbol, Symbol], Pool] = {}
        for pool in pools:
            key = _index_key(pool.token_a, pool.token_b)
            if key in table:
                raise ValueError(f"duplicate pool for pair {pool.pair}")
            table[key] = pool
        return cls(_pools=table)

    def get(self, a: Symbol, b: Symbol) -> Optional[Pool]:
        return self._pools.get(_index_key(a, b))

    def has_pair(self, a: Symbol, b: Symbol) -> bool:
        return _index_key(a, b) in self._pools

    def symbols(self) -> Tuple[Symbol, ...]:
        seen = set()
        for a, b in self._pools:
            seen.add(a)
            seen.add(b)
        return tuple(sorted(seen))

    def __iter__(self) -> Iterator[Pool]:
        # Deterministic order by index key.
        for key in sorted(self._pools):
            yield self._pools[key]

    def __len__(self) -> int:
        return len(self._pools)
