"""
Decode chain-state provider payloads into engine snapshots.

Payloads are plain mappings of ints/bools/strings as read from the contracts.
Decoding is fail-closed: unknown keys, missing keys and wrong types raise.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping

from ..state.pools import Pool, PoolIndex
from ..state.positions import PerpAccountBalance, PerpPosition, VaultPosition


logger = logging.getLogger(__name__)

POOL_REQUIRED_KEYS = frozenset(
    {
        "real_reserve_a",
        "real_reserve_b",
        "virtual_reserve_a",
        "virtual_reserve_b",
        "fee_bps",
        "oracle_price_e18",
        "total_lp_supply",
    }
)
POOL_OPTIONAL_KEYS = frozenset({"token_a", "token_b", "oracle_timestamp", "paused"})


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    return value


def _require_int(value: Any, *, name: str, non_negative: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a bool")
    return value


def _check_keys(payload: Mapping[str, Any], *, required: Iterable[str], optional: Iterable[str], what: str) -> None:
    if not isinstance(payload, Mapping):
        raise TypeError(f"{what} payload must be a mapping")
    required = frozenset(required)
    allowed = required | frozenset(optional)
    keys = set(payload)
    extra = keys - allowed
    missing = required - keys
    if extra:
        raise ValueError(f"{what} payload has unknown keys: {sorted(extra)[:8]}")
    if missing:
        raise ValueError(f"{what} payload missing required keys: {sorted(missing)[:8]}")


def split_pair(pair: str) -> tuple[str, str]:
    parts = _require_str(pair, name="pair").split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"pair must look like 'A/B': {pair!r}")
    return parts[0], parts[1]


def pool_from_payload(pair: str, payload: Mapping[str, Any]) -> Pool:
    """Decode one pool keyed by its pair name (``"pUSD/pEUR"``)."""
    _check_keys(payload, required=POOL_REQUIRED_KEYS, optional=POOL_OPTIONAL_KEYS, what=f"pool {pair}")
    token_a, token_b = split_pair(pair)
    if "token_a" in payload and _require_str(payload["token_a"], name="token_a") != token_a:
        raise ValueError(f"pool {pair}: token_a {payload['token_a']!r} does not match pair")
    if "token_b" in payload and _require_str(payload["token_b"], name="token_b") != token_b:
        raise ValueError(f"pool {pair}: token_b {payload['token_b']!r} does not match pair")
    return Pool(
        token_a=token_a,
        token_b=token_b,
        real_reserve_a=_require_int(payload["real_reserve_a"], name="real_reserve_a"),
        real_reserve_b=_require_int(payload["real_reserve_b"], name="real_reserve_b"),
        virtual_reserve_a=_require_int(payload["virtual_reserve_a"], name="virtual_reserve_a"),
        virtual_reserve_b=_require_int(payload["virtual_reserve_b"], name="virtual_reserve_b"),
        fee_bps=_require_int(payload["fee_bps"], name="fee_bps"),
        oracle_price_e18=_require_int(payload["oracle_price_e18"], name="oracle_price_e18"),
        oracle_timestamp=_require_int(payload.get("oracle_timestamp", 0), name="oracle_timestamp"),
        paused=_require_bool(payload.get("paused", False), name="paused"),
        total_lp_supply=_require_int(payload["total_lp_supply"], name="total_lp_supply"),
    )


def pool_index_from_payload(payloads: Mapping[str, Mapping[str, Any]]) -> PoolIndex:
    """Decode every pool of one provider read into a `PoolIndex`."""
    if not isinstance(payloads, Mapping):
        raise TypeError("pool payloads must be a mapping of pair -> payload")
    pools = [pool_from_payload(pair, payloads[pair]) for pair in sorted(payloads)]
    logger.debug("decoded %d pools", len(pools))
    return PoolIndex.from_pools(pools)


def vault_position_from_payload(payload: Mapping[str, Any]) -> VaultPosition:
    _check_keys(payload, required=("collateral", "debt"), optional=("positions",), what="vault")
    minted: Dict[str, int] = {}
    positions = payload.get("positions", {})
    if not isinstance(positions, Mapping):
        raise TypeError("vault positions must be a mapping of symbol -> amount")
    for symbol, amount in positions.items():
        amount = _require_int(amount, name=f"positions[{symbol!r}]")
        if amount:
            minted[_require_str(symbol, name="symbol")] = amount
    return VaultPosition(
        collateral_amount=_require_int(payload["collateral"], name="collateral"),
        debt_amount=_require_int(payload["debt"], name="debt"),
        minted_balances=minted,
    )


_PERP_POSITION_KEYS = ("id", "is_long", "size", "collateral", "leverage", "entry_price_e8")


def perp_position_from_payload(payload: Mapping[str, Any]) -> PerpPosition:
    _check_keys(payload, required=_PERP_POSITION_KEYS, optional=("opened_at", "updated_at"), what="perp position")
    updated_at = payload.get("updated_at")
    return PerpPosition(
        id=_require_str(payload["id"], name="id"),
        is_long=_require_bool(payload["is_long"], name="is_long"),
        size_base=_require_int(payload["size"], name="size"),
        collateral_base=_require_int(payload["collateral"], name="collateral"),
        leverage=_require_int(payload["leverage"], name="leverage"),
        entry_price_e8=_require_int(payload["entry_price_e8"], name="entry_price_e8"),
        opened_at=_require_int(payload.get("opened_at", 0), name="opened_at"),
        updated_at=None if updated_at is None else _require_int(updated_at, name="updated_at"),
    )


def perp_account_from_payload(payload: Mapping[str, Any]) -> tuple[PerpAccountBalance, List[PerpPosition]]:
    """Decode ``{"total", "available", "positions": [...]}``."""
    _check_keys(payload, required=("total", "available"), optional=("positions",), what="perp account")
    balance = PerpAccountBalance(
        available_base=_require_int(payload["available"], name="available"),
        total_base=_require_int(payload["total"], name="total"),
    )
    raw_positions = payload.get("positions", [])
    if not isinstance(raw_positions, (list, tuple)):
        raise TypeError("perp positions must be a list")
    positions = [perp_position_from_payload(p) for p in raw_positions]
    return balance, positions
