"""
Config-bound orchestration (functional core).

Wires the pure components into the calls a front-end makes: quote a swap,
plan a liquidity change, a vault mint/burn or a perp open/close. Each `plan_*`
returns an intent for the transaction submitter and never submits it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import EngineConfig
from ..integration.intents import IntentKind, LiquidityIntent, PerpIntent, SwapIntent, VaultIntent
from ..state.pools import Pool, PoolIndex, Symbol
from ..state.positions import PRICE_SCALE, PerpAccountBalance, PerpPosition, VaultPosition
from . import liquidity, perps, vault
from .oracle import is_fresh
from .pool import min_amount_out, oracle_deviation_bps, spot_rate_e18
from .routing import plan_route, quote_route
from .types import Quote


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolSummary:
    pair: str
    spot_rate_a_to_b_e18: int
    spot_rate_b_to_a_e18: int
    oracle_deviation_bps: int
    paused: bool


@dataclass(frozen=True)
class VaultSummary:
    collateral_ratio_pct: vault.CollateralRatio
    health: vault.Health
    max_withdrawable: int


def quote_swap(config: EngineConfig, pool_index: PoolIndex, from_symbol: Symbol, to_symbol: Symbol, amount_in: int) -> Quote:
    route = plan_route(from_symbol, to_symbol, pool_index, config.hub_symbol)
    return quote_route(route, amount_in)


def plan_swap(
    config: EngineConfig,
    pool_index: PoolIndex,
    from_symbol: Symbol,
    to_symbol: Symbol,
    amount_in: int,
    slippage_bps: Optional[int] = None,
) -> SwapIntent:
    quote = quote_swap(config, pool_index, from_symbol, to_symbol, amount_in)
    slippage = config.default_slippage_bps if slippage_bps is None else slippage_bps
    if quote.is_multi_hop:
        path = (from_symbol, config.hub_symbol, to_symbol)
    else:
        path = (from_symbol, to_symbol)
    intent = SwapIntent(
        token_path=path,
        pools=tuple(p.pair for p in quote.route.pools),
        amount_in=amount_in,
        min_amount_out=min_amount_out(quote.output_amount, slippage),
        expected_amount_out=quote.output_amount,
        snapshot_timestamp=quote.snapshot_timestamp,
    )
    logger.debug("swap %s: %d -> %d (min %d)", "->".join(path), amount_in, quote.output_amount, intent.min_amount_out)
    return intent


def is_quote_fresh(config: EngineConfig, quote: Quote, now: int) -> bool:
    return is_fresh(quote.snapshot_timestamp, now, config.max_oracle_staleness_seconds)


def pool_summary(pool: Pool) -> PoolSummary:
    """Display figures for one pool; spot rates are 0 while a virtual reserve is empty."""
    priced = pool.virtual_reserve_a > 0 and pool.virtual_reserve_b > 0
    return PoolSummary(
        pair=pool.pair,
        spot_rate_a_to_b_e18=spot_rate_e18(pool, pool.token_a) if priced else 0,
        spot_rate_b_to_a_e18=spot_rate_e18(pool, pool.token_b) if priced else 0,
        oracle_deviation_bps=oracle_deviation_bps(pool),
        paused=pool.paused,
    )


# -- Liquidity ---------------------------------------------------------------

def plan_add_liquidity(config: EngineConfig, pool: Pool, amount_a: int, amount_b: Optional[int] = None) -> LiquidityIntent:
    plan = liquidity.plan_add_liquidity(
        pool,
        amount_a,
        amount_b,
        max_deviation_pct=config.max_liquidity_ratio_deviation_pct,
        min_liquidity=config.min_liquidity_lock,
    )
    return LiquidityIntent(
        kind=IntentKind.ADD_LIQUIDITY,
        pool=pool.pair,
        amount_a=plan.amount_a,
        amount_b=plan.amount_b,
        lp_amount=plan.lp_minted,
    )


def plan_remove_liquidity(config: EngineConfig, pool: Pool, lp_amount: int) -> LiquidityIntent:
    plan = liquidity.plan_remove_liquidity(pool, lp_amount)
    return LiquidityIntent(
        kind=IntentKind.REMOVE_LIQUIDITY,
        pool=pool.pair,
        amount_a=plan.amount_a,
        amount_b=plan.amount_b,
        lp_amount=plan.lp_amount,
    )


# -- Vault -------------------------------------------------------------------

def vault_summary(config: EngineConfig, position: VaultPosition, collateral_price_in_debt_units: int = PRICE_SCALE) -> VaultSummary:
    ratio = vault.collateral_ratio_pct(position, collateral_price_in_debt_units)
    return VaultSummary(
        collateral_ratio_pct=ratio,
        health=vault.health(position, ratio, config.min_collateral_ratio_pct, config.warning_buffer_pct),
        max_withdrawable=vault.max_withdrawable(position, config.min_collateral_ratio_pct),
    )


def max_mintable(config: EngineConfig, position: VaultPosition, deposit_amount: int, collateral_price: int, token_price: int) -> int:
    return vault.max_additional_mint(
        position, deposit_amount, collateral_price, token_price, config.min_collateral_ratio_pct
    )


def plan_mint(
    config: EngineConfig,
    position: VaultPosition,
    deposit_amount: int,
    symbol: str,
    mint_amount: int,
    collateral_price: int,
    token_price: int,
) -> VaultIntent:
    post = vault.deposit_and_mint(
        position, deposit_amount, symbol, mint_amount,
        collateral_price, token_price, config.min_collateral_ratio_pct,
    )
    return VaultIntent(
        kind=IntentKind.DEPOSIT_AND_MINT,
        symbol=symbol,
        collateral_amount=deposit_amount,
        token_amount=mint_amount,
        expected_collateral=post.collateral_amount,
        expected_debt=post.debt_amount,
    )


def plan_burn(
    config: EngineConfig,
    position: VaultPosition,
    symbol: str,
    burn_amount: int,
    withdraw_amount: int,
    collateral_price: int,
    token_price: int,
) -> VaultIntent:
    post = vault.burn_and_withdraw(
        position, symbol, burn_amount, withdraw_amount,
        collateral_price, token_price, config.min_collateral_ratio_pct,
    )
    return VaultIntent(
        kind=IntentKind.BURN_AND_WITHDRAW,
        symbol=symbol,
        collateral_amount=withdraw_amount,
        token_amount=burn_amount,
        expected_collateral=post.collateral_amount,
        expected_debt=post.debt_amount,
    )


# -- Perps -------------------------------------------------------------------

def plan_open_position(
    config: EngineConfig,
    balance: PerpAccountBalance,
    *,
    position_id: str,
    is_long: bool,
    collateral_base: int,
    leverage: int,
    entry_price_e8: int,
    opened_at: int = 0,
) -> PerpIntent:
    _position, post = perps.plan_open_position(
        balance,
        position_id=position_id,
        is_long=is_long,
        collateral_base=collateral_base,
        leverage=leverage,
        entry_price_e8=entry_price_e8,
        max_leverage=config.max_leverage,
        opened_at=opened_at,
    )
    return PerpIntent(
        kind=IntentKind.OPEN_POSITION,
        position_id=position_id,
        is_long=is_long,
        collateral_base=collateral_base,
        leverage=leverage,
        expected_available_after=post.available_base,
    )


def plan_close_position(
    balance: PerpAccountBalance,
    positions: Sequence[PerpPosition],
    position_id: str,
    current_price_e8: int,
) -> PerpIntent:
    position = perps.find_position(positions, position_id)
    if position is None:
        raise ValueError(f"unknown position: {position_id}")
    post = perps.settle_close(balance, position, current_price_e8)
    return PerpIntent(
        kind=IntentKind.CLOSE_POSITION,
        position_id=position_id,
        is_long=position.is_long,
        collateral_base=position.collateral_base,
        leverage=position.leverage,
        expected_available_after=post.available_base,
    )


def position_metrics(config: EngineConfig, position: PerpPosition, current_price_e8: int) -> perps.PositionMetrics:
    return perps.position_metrics(position, current_price_e8, config.maintenance_margin_bps)
