"""
Vault and perpetual position snapshots.

Vault collateral and perp margin are separate balances; nothing here lets one
subsystem read the other's funds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


PRICE_SCALE = 100_000_000  # vault/perp prices are scaled by 1e8


def _require_int(value: object, *, name: str, non_negative: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    return value


@dataclass(frozen=True)
class VaultPosition:
    """
    One user's collateralized-debt position.

    `debt_amount` is expressed in base-asset-equivalent units, so the
    collateral invariant ``collateral * 100 >= debt * min_ratio_pct`` needs no
    price input.
    """

    collateral_amount: int = 0
    debt_amount: int = 0
    minted_balances: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_int(self.collateral_amount, name="collateral_amount")
        _require_int(self.debt_amount, name="debt_amount")
        if not isinstance(self.minted_balances, Mapping):
            raise TypeError("minted_balances must be a mapping")
        frozen = {}
        for symbol, amount in self.minted_balances.items():
            if not isinstance(symbol, str) or not symbol:
                raise TypeError("minted_balances keys must be non-empty strings")
            frozen[symbol] = _require_int(amount, name=f"minted_balances[{symbol!r}]")
        object.__setattr__(self, "minted_balances", MappingProxyType(frozen))

    def minted(self, symbol: str) -> int:
        return self.minted_balances.get(symbol, 0)


@dataclass(frozen=True)
class PerpPosition:
    """A single isolated leveraged position. PnL and risk figures are derived."""

    id: str
    is_long: bool
    size_base: int
    collateral_base: int
    leverage: int
    entry_price_e8: int
    opened_at: int = 0
    updated_at: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise TypeError("id must be a non-empty string")
        if not isinstance(self.is_long, bool):
            raise TypeError("is_long must be a bool")
        _require_int(self.size_base, name="size_base")
        _require_int(self.collateral_base, name="collateral_base")
        _require_int(self.leverage, name="leverage")
        _require_int(self.entry_price_e8, name="entry_price_e8")
        _require_int(self.opened_at, name="opened_at")
        if self.updated_at is not None:
            _require_int(self.updated_at, name="updated_at")
        if self.size_base == 0:
            raise ValueError("size_base must be positive")
        if self.entry_price_e8 == 0:
            raise ValueError("entry_price_e8 must be positive")


@dataclass(frozen=True)
class PerpAccountBalance:
    """Perp-subsystem margin account (distinct from vault collateral)."""

    available_base: int
    total_base: int

    def __post_init__(self) -> None:
        _require_int(self.available_base, name="available_base")
        _require_int(self.total_base, name="total_base")
        if self.available_base > self.total_base:
            raise ValueError(
                f"available_base ({self.available_base}) exceeds total_base ({self.total_base})"
            )

    @property
    def locked_base(self) -> int:
        return self.total_base - self.available_base
