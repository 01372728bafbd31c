"""
Boundary with the chain-state provider and the transaction submitter.
"""

from .intents import (
    ChainStateProvider,
    IntentKind,
    LiquidityIntent,
    PerpIntent,
    SubmissionResult,
    SwapIntent,
    TransactionSubmitter,
    VaultIntent,
)
from .snapshot import (
    perp_account_from_payload,
    perp_position_from_payload,
    pool_from_payload,
    pool_index_from_payload,
    vault_position_from_payload,
)

__all__ = [
    "ChainStateProvider",
    "IntentKind",
    "LiquidityIntent",
    "PerpIntent",
    "SubmissionResult",
    "SwapIntent",
    "TransactionSubmitter",
    "VaultIntent",
    "perp_account_from_payload",
    "perp_position_from_payload",
    "pool_from_payload",
    "pool_index_from_payload",
    "vault_position_from_payload",
]
