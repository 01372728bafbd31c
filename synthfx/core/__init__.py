"""
Core pricing and position algorithms
"""

from .errors import (
    ArithmeticOverflowError,
    DivisionByZeroError,
    EngineError,
    ErrorKind,
    InsufficientAvailableBalanceError,
    InsufficientCollateralError,
    InsufficientRealLiquidityError,
    InvalidLiquidityAmountError,
    InvalidVaultStateError,
    LeverageOutOfBoundsError,
    NoRouteAvailableError,
    PoolPausedError,
)
from .fixed_point import Rounding, isqrt, mul_div
from .liquidity import (
    derive_proportional_amount,
    estimate_lp_minted,
    estimate_remove_amounts,
)
from .perps import (
    account_equity,
    liquidation_price,
    margin_ratio_pct,
    unrealized_pnl,
    validate_leverage,
    validate_open,
)
from .pool import quote_swap_exact_in
from .routing import needs_multi_hop, plan_route, quote_route
from .types import DirectHop, Quote, Route, TwoHop
from .vault import (
    INFINITE_RATIO,
    Health,
    burn_and_withdraw,
    collateral_ratio_pct,
    deposit_and_mint,
    health,
    max_additional_mint,
)

__all__ = [
    "ArithmeticOverflowError",
    "DivisionByZeroError",
    "EngineError",
    "ErrorKind",
    "InsufficientAvailableBalanceError",
    "InsufficientCollateralError",
    "InsufficientRealLiquidityError",
    "InvalidLiquidityAmountError",
    "InvalidVaultStateError",
    "LeverageOutOfBoundsError",
    "NoRouteAvailableError",
    "PoolPausedError",
    "Rounding",
    "isqrt",
    "mul_div",
    "derive_proportional_amount",
    "estimate_lp_minted",
    "estimate_remove_amounts",
    "account_equity",
    "liquidation_price",
    "margin_ratio_pct",
    "unrealized_pnl",
    "validate_leverage",
    "validate_open",
    "quote_swap_exact_in",
    "needs_multi_hop",
    "plan_route",
    "quote_route",
    "DirectHop",
    "Quote",
    "Route",
    "TwoHop",
    "INFINITE_RATIO",
    "Health",
    "burn_and_withdraw",
    "collateral_ratio_pct",
    "deposit_and_mint",
    "health",
    "max_additional_mint",
]
