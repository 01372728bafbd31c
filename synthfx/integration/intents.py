"""
Intent values handed to the transaction layer, and the collaborator interfaces.

The engine only *produces* intents. Submitting them (and reading chain state)
belongs to the caller's shell, which may be asynchronous; the interfaces below
describe what the engine expects of it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, Tuple, Union


class IntentKind(Enum):
    """Intent type enumeration."""
    SWAP = "SWAP"
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"
    DEPOSIT_AND_MINT = "DEPOSIT_AND_MINT"
    BURN_AND_WITHDRAW = "BURN_AND_WITHDRAW"
    OPEN_POSITION = "OPEN_POSITION"
    CLOSE_POSITION = "CLOSE_POSITION"


@dataclass(frozen=True)
class SwapIntent:
    """
    Swap through `pools` (one or two pair keys) with a slippage floor.

    `snapshot_timestamp` is the oldest oracle read behind the quote.
    """
    token_path: Tuple[str, ...]
    pools: Tuple[str, ...]
    amount_in: int
    min_amount_out: int
    expected_amount_out: int
    snapshot_timestamp: int
    kind: IntentKind = IntentKind.SWAP


@dataclass(frozen=True)
class LiquidityIntent:
    kind: IntentKind
    pool: str
    amount_a: int
    amount_b: int
    lp_amount: int

    def __post_init__(self) -> None:
        if self.kind not in (IntentKind.ADD_LIQUIDITY, IntentKind.REMOVE_LIQUIDITY):
            raise ValueError(f"Invalid liquidity intent kind: {self.kind}")


@dataclass(frozen=True)
class VaultIntent:
    kind: IntentKind
    symbol: str
    collateral_amount: int
    token_amount: int
    expected_collateral: int
    expected_debt: int

    def __post_init__(self) -> None:
        if self.kind not in (IntentKind.DEPOSIT_AND_MINT, IntentKind.BURN_AND_WITHDRAW):
            raise ValueError(f"Invalid vault intent kind: {self.kind}")


@dataclass(frozen=True)
class PerpIntent:
    kind: IntentKind
    position_id: str
    is_long: bool
    collateral_base: int
    leverage: int
    expected_available_after: int

    def __post_init__(self) -> None:
        if self.kind not in (IntentKind.OPEN_POSITION, IntentKind.CLOSE_POSITION):
            raise ValueError(f"Invalid perp intent kind: {self.kind}")


AnyIntent = Union[SwapIntent, LiquidityIntent, VaultIntent, PerpIntent]


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    tx_hash: Optional[str] = None
    error: Optional[str] = None


class ChainStateProvider(Protocol):
    """Returns raw on-chain snapshots; decode them with `synthfx.integration.snapshot`."""

    def pool_payloads(self) -> Mapping[str, Mapping[str, Any]]: ...

    def vault_payload(self, account: str) -> Mapping[str, Any]: ...

    def perp_payload(self, account: str) -> Mapping[str, Any]: ...


class TransactionSubmitter(Protocol):
    """Sole writer of authoritative state. The engine never calls it."""

    def submit(self, intent: AnyIntent) -> SubmissionResult: ...
