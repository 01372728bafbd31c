"""
Collateralized-debt vault accounting.

Units:
- `collateral_amount` and `debt_amount` are base-asset units (debt is the
  base-asset value of minted synthetics at mint time).
- Prices are integers scaled by `PRICE_SCALE` (1e8): `collateral_price` is the
  base asset's price and `token_price` the synthetic's price in a common quote
  currency (USD).

Every debt-increasing or collateral-decreasing intent is validated on its
*post* state:

    collateral * 100 >= debt * min_ratio_pct

and rejected locally with `InsufficientCollateralError` before anything is
proposed to the chain.
"""

from __future__ import annotations

import logging
from enum import Enum, unique
from typing import Final, Union

from ..state.positions import PRICE_SCALE, VaultPosition
from .errors import InsufficientCollateralError, InvalidVaultStateError
from .fixed_point import Rounding, mul_div


logger = logging.getLogger(__name__)


@unique
class RatioSentinel(Enum):
    """Non-numeric collateral ratio for a position without debt."""

    INFINITE = "infinite"


INFINITE_RATIO: Final = RatioSentinel.INFINITE

CollateralRatio = Union[int, RatioSentinel]


@unique
class Health(Enum):
    HEALTHY = "HEALTHY"
    AT_RISK = "AT_RISK"


def _require_amount(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise InvalidVaultStateError(f"{name} must be non-negative: {value}")
    return value


def _require_price(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise ValueError(f"{name} must be positive: {value}")
    return value


def _require_min_ratio(min_ratio_pct: int) -> int:
    if not isinstance(min_ratio_pct, int) or isinstance(min_ratio_pct, bool) or min_ratio_pct <= 0:
        raise ValueError(f"min_ratio_pct must be a positive int: {min_ratio_pct}")
    return min_ratio_pct


def collateral_ratio_pct(position: VaultPosition, collateral_price_in_debt_units: int = PRICE_SCALE) -> CollateralRatio:
    """
    ``collateral * price * 100 / debt`` (truncating), or `INFINITE_RATIO` when debt is zero.

    `collateral_price_in_debt_units` converts one unit of collateral to debt
    units, scaled by 1e8. Debt kept in base-asset units uses the default 1:1.
    """
    _require_price(collateral_price_in_debt_units, name="collateral_price_in_debt_units")
    if position.debt_amount == 0:
        return INFINITE_RATIO
    value = position.collateral_amount * collateral_price_in_debt_units * 100
    return mul_div(value, 1, position.debt_amount * PRICE_SCALE, Rounding.DOWN)


def health(
    position: VaultPosition,
    ratio_pct: CollateralRatio,
    min_ratio_pct: int,
    warning_buffer_pct: int = 0,
) -> Health:
    """
    `AT_RISK` iff the ratio is below ``min_ratio_pct + warning_buffer_pct``.

    A position without debt is always `HEALTHY`.
    """
    _require_min_ratio(min_ratio_pct)
    if warning_buffer_pct < 0:
        raise ValueError(f"warning_buffer_pct must be non-negative: {warning_buffer_pct}")
    if position.debt_amount == 0 or ratio_pct is INFINITE_RATIO:
        return Health.HEALTHY
    if ratio_pct < min_ratio_pct + warning_buffer_pct:
        return Health.AT_RISK
    return Health.HEALTHY


def max_additional_mint(
    position: VaultPosition,
    hypothetical_deposit_amount: int,
    collateral_price: int,
    token_price: int,
    min_ratio_pct: int,
) -> int:
    """
    Largest synthetic amount mintable after depositing `hypothetical_deposit_amount`.

        total_value = (collateral + deposit) * collateral_price
        max_debt    = total_value * 100 / min_ratio_pct
        available   = max(0, max_debt - debt * collateral_price)
        mintable    = available / token_price

    The result is further capped so that minting it passes `deposit_and_mint`,
    whose new debt is rounded up in base units:

        budget      = floor((collateral + deposit) * 100 / min_ratio_pct) - debt
        mintable   <= floor(budget * collateral_price / token_price)

    Never negative.
    """
    _require_amount(hypothetical_deposit_amount, name="hypothetical_deposit_amount")
    _require_price(collateral_price, name="collateral_price")
    _require_price(token_price, name="token_price")
    _require_min_ratio(min_ratio_pct)

    total_collateral_value = (position.collateral_amount + hypothetical_deposit_amount) * collateral_price
    max_debt_value = mul_div(total_collateral_value, 100, min_ratio_pct, Rounding.DOWN)
    debt_value = position.debt_amount * collateral_price
    if max_debt_value <= debt_value:
        return 0
    by_value = mul_div(max_debt_value - debt_value, 1, token_price, Rounding.DOWN)

    total_collateral = position.collateral_amount + hypothetical_deposit_amount
    max_debt = mul_div(total_collateral, 100, min_ratio_pct, Rounding.DOWN)
    if max_debt <= position.debt_amount:
        return 0
    by_debt = mul_div(max_debt - position.debt_amount, collateral_price, token_price, Rounding.DOWN)
    return min(by_value, by_debt)


def debt_for_tokens(token_amount: int, token_price: int, collateral_price: int, rounding: Rounding) -> int:
    """Base-asset debt equivalent of `token_amount` synthetics."""
    _require_amount(token_amount, name="token_amount")
    _require_price(token_price, name="token_price")
    _require_price(collateral_price, name="collateral_price")
    return mul_div(token_amount, token_price, collateral_price, rounding)


def is_sufficiently_collateralized(position: VaultPosition, min_ratio_pct: int) -> bool:
    _require_min_ratio(min_ratio_pct)
    return position.collateral_amount * 100 >= position.debt_amount * min_ratio_pct


def max_withdrawable(position: VaultPosition, min_ratio_pct: int) -> int:
    """Collateral that can leave the vault while keeping the minimum ratio."""
    _require_min_ratio(min_ratio_pct)
    required = mul_div(position.debt_amount * min_ratio_pct, 1, 100, Rounding.UP)
    return max(0, position.collateral_amount - required)


def deposit_and_mint(
    position: VaultPosition,
    deposit_amount: int,
    symbol: str,
    mint_amount: int,
    collateral_price: int,
    token_price: int,
    min_ratio_pct: int,
) -> VaultPosition:
    """
    Validated post-state of depositing collateral and minting `symbol`.

    New debt is rounded up so the local check is never looser than the vault's.
    """
    _require_amount(deposit_amount, name="deposit_amount")
    _require_amount(mint_amount, name="mint_amount")
    if not isinstance(symbol, str) or not symbol:
        raise InvalidVaultStateError("symbol must be a non-empty string")
    if deposit_amount == 0 and mint_amount == 0:
        raise InvalidVaultStateError("nothing to deposit or mint")

    new_debt = debt_for_tokens(mint_amount, token_price, collateral_price, Rounding.UP)
    minted = dict(position.minted_balances)
    if mint_amount:
        minted[symbol] = minted.get(symbol, 0) + mint_amount
    post = VaultPosition(
        collateral_amount=position.collateral_amount + deposit_amount,
        debt_amount=position.debt_amount + new_debt,
        minted_balances=minted,
    )
    _check_post_state(post, min_ratio_pct)
    return post


def burn_and_withdraw(
    position: VaultPosition,
    symbol: str,
    burn_amount: int,
    withdraw_amount: int,
    collateral_price: int,
    token_price: int,
    min_ratio_pct: int,
) -> VaultPosition:
    """
    Validated post-state of burning `symbol` and withdrawing collateral.

    Debt repaid is rounded down (and capped at outstanding debt).
    """
    _require_amount(burn_amount, name="burn_amount")
    _require_amount(withdraw_amount, name="withdraw_amount")
    if burn_amount == 0 and withdraw_amount == 0:
        raise InvalidVaultStateError("nothing to burn or withdraw")
    held = position.minted(symbol)
    if burn_amount > held:
        raise InvalidVaultStateError(f"cannot burn {burn_amount} {symbol}: only {held} minted")
    if withdraw_amount > position.collateral_amount:
        raise InvalidVaultStateError(
            f"cannot withdraw {withdraw_amount}: only {position.collateral_amount} deposited"
        )

    repaid = debt_for_tokens(burn_amount, token_price, collateral_price, Rounding.DOWN)
    minted = dict(position.minted_balances)
    if burn_amount:
        remaining = held - burn_amount
        if remaining:
            minted[symbol] = remaining
        else:
            del minted[symbol]
    remaining_debt = max(0, position.debt_amount - repaid)
    post = VaultPosition(
        collateral_amount=position.collateral_amount - withdraw_amount,
        debt_amount=remaining_debt,
        minted_balances=minted,
    )
    _check_post_state(post, min_ratio_pct)
    return post


def _check_post_state(post: VaultPosition, min_ratio_pct: int) -> None:
    if not is_sufficiently_collateralized(post, min_ratio_pct):
        logger.info(
            "vault intent rejected: collateral=%d debt=%d min_ratio=%d%%",
            post.collateral_amount, post.debt_amount, min_ratio_pct,
        )
        raise InsufficientCollateralError(post.collateral_amount, post.debt_amount, min_ratio_pct)
