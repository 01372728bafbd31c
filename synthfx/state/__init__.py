"""
Immutable snapshots consumed by the engine.
"""

from .pools import ORACLE_SCALE, Pool, PoolIndex, pair_key
from .positions import PRICE_SCALE, PerpAccountBalance, PerpPosition, VaultPosition

__all__ = [
    "ORACLE_SCALE",
    "PRICE_SCALE",
    "Pool",
    "PoolIndex",
    "pair_key",
    "PerpAccountBalance",
    "PerpPosition",
    "VaultPosition",
]
