from __future__ import annotations

import logging

import pytest

from synthfx.core.errors import ErrorKind, InvalidLiquidityAmountError, PoolPausedError
from synthfx.core.liquidity import (
    derive_proportional_amount,
    estimate_lp_minted,
    estimate_remove_amounts,
    plan_add_liquidity,
    plan_remove_liquidity,
    ratio_deviation_pct,
)
from synthfx.state.pools import Pool


def _pool(
    real_a: int = 1000,
    real_b: int = 200,
    *,
    virtual_a: int = 5000,
    virtual_b: int = 1000,
    supply: int = 500,
    paused: bool = False,
) -> Pool:
    return Pool(
        token_a="pUSD",
        token_b="pEUR",
        real_reserve_a=real_a,
        real_reserve_b=real_b,
        virtual_reserve_a=virtual_a,
        virtual_reserve_b=virtual_b,
        fee_bps=30,
        paused=paused,
        total_lp_supply=supply,
    )


def _empty() -> Pool:
    return _pool(0, 0, supply=0)


# ---------------------------------------------------------------------------
# derive_proportional_amount
# ---------------------------------------------------------------------------

class TestDeriveProportional:
    @pytest.mark.parametrize(
        "real_a, real_b, amount_a, expected",
        [
            (1000, 200, 100, 20),
            (3, 7, 10, 23),
            (7, 3, 5, 2),
            (1_000_000_000, 1_158_700_000, 12_345_678, 14_304_937),
        ],
    )
    def test_floor_of_exact_ratio(self, real_a, real_b, amount_a, expected):
        assert derive_proportional_amount(_pool(real_a, real_b), amount_a) == expected

    def test_differs_from_float_evaluation(self):
        real_a, real_b, amount_a = 7 * 10**17, 7, 3 * 10**17 - 1
        assert int(amount_a * real_b / real_a) == 3
        assert derive_proportional_amount(_pool(real_a, real_b), amount_a) == 2

    def test_first_deposit_has_no_ratio(self):
        assert derive_proportional_amount(_empty(), 100) is None

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, amount):
        with pytest.raises(InvalidLiquidityAmountError) as exc:
            derive_proportional_amount(_pool(), amount)
        assert exc.value.kind is ErrorKind.INVALID_LIQUIDITY_AMOUNT

    def test_supply_without_reserve(self):
        with pytest.raises(InvalidLiquidityAmountError):
            derive_proportional_amount(_pool(0, 200), 100)


# ---------------------------------------------------------------------------
# estimate_lp_minted
# ---------------------------------------------------------------------------

class TestEstimateLpMinted:
    @pytest.mark.parametrize(
        "amount_a, amount_b, expected",
        [(100, 400, 200), (2, 3, 2), (1, 1, 1)],
    )
    def test_first_deposit_is_integer_sqrt(self, amount_a, amount_b, expected):
        assert estimate_lp_minted(_empty(), amount_a, amount_b) == expected

    def test_first_deposit_large_square(self):
        n = (1 << 70) + 12345
        assert estimate_lp_minted(_empty(), n, n) == n

    def test_first_deposit_locks_minimum(self):
        assert estimate_lp_minted(_empty(), 10**6, 10**6, min_liquidity=1000) == 10**6 - 1000

    def test_first_deposit_below_minimum(self):
        with pytest.raises(InvalidLiquidityAmountError):
            estimate_lp_minted(_empty(), 10, 10, min_liquidity=1000)

    def test_proportional(self):
        assert estimate_lp_minted(_pool(), 100, 20) == 50

    def test_takes_the_smaller_side(self):
        # min(100 * 500 / 1000, 19 * 500 / 200) = min(50, 47)
        assert estimate_lp_minted(_pool(), 100, 19) == 47

    def test_rounds_down(self):
        # min(10 * 10 / 3, 23 * 10 / 7) = min(33, 32)
        assert estimate_lp_minted(_pool(3, 7, supply=10), 10, 23) == 32

    def test_supply_with_empty_reserve(self):
        with pytest.raises(InvalidLiquidityAmountError):
            estimate_lp_minted(_pool(1000, 0), 100, 20)


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------

class TestRemove:
    def test_pro_rata(self):
        assert estimate_remove_amounts(_pool(), 123) == (246, 49)

    def test_full_supply(self):
        assert estimate_remove_amounts(_pool(), 500) == (1000, 200)

    def test_more_than_supply(self):
        with pytest.raises(InvalidLiquidityAmountError):
            estimate_remove_amounts(_pool(), 501)

    def test_empty_pool(self):
        with pytest.raises(InvalidLiquidityAmountError):
            estimate_remove_amounts(_empty(), 1)

    def test_zero_amount(self):
        with pytest.raises(InvalidLiquidityAmountError):
            estimate_remove_amounts(_pool(), 0)

    def test_plan_on_paused_pool(self):
        plan = plan_remove_liquidity(_pool(paused=True), 250)
        assert (plan.lp_amount, plan.amount_a, plan.amount_b) == (250, 500, 100)


# ---------------------------------------------------------------------------
# plan_add_liquidity
# ---------------------------------------------------------------------------

class TestPlanAdd:
    def test_ratio_deviation(self):
        assert ratio_deviation_pct(_pool(), 100, 20) == 0
        assert ratio_deviation_pct(_pool(), 100, 21) == 5

    def test_derives_amount_b(self):
        plan = plan_add_liquidity(_pool(), 100)
        assert (plan.amount_a, plan.amount_b, plan.lp_minted) == (100, 20, 50)

    def test_matching_amount_b_accepted(self):
        assert plan_add_liquidity(_pool(), 100, 20).amount_b == 20

    def test_mismatched_amount_b(self):
        with pytest.raises(InvalidLiquidityAmountError, match="expected 20"):
            plan_add_liquidity(_pool(), 100, 21)

    def test_virtual_ratio_check(self, caplog):
        # Real reserves imply 0.3 pEUR/pUSD while virtual reserves say 0.2.
        with caplog.at_level(logging.INFO, logger="synthfx.core.liquidity"):
            with pytest.raises(InvalidLiquidityAmountError):
                plan_add_liquidity(_pool(1000, 300), 100)
        assert "deviates" in caplog.text

    def test_deviation_threshold_is_configurable(self):
        plan = plan_add_liquidity(_pool(1000, 300), 100, max_deviation_pct=51)
        assert plan.amount_b == 30

    def test_dust_pairs_with_zero(self):
        with pytest.raises(InvalidLiquidityAmountError):
            plan_add_liquidity(_pool(), 4)

    def test_paused(self):
        with pytest.raises(PoolPausedError):
            plan_add_liquidity(_pool(paused=True), 100)

    def test_first_deposit(self):
        plan = plan_add_liquidity(_empty(), 100, 400)
        assert plan.lp_minted == 200

    def test_first_deposit_requires_amount_b(self):
        with pytest.raises(InvalidLiquidityAmountError):
            plan_add_liquidity(_empty(), 100)

    def test_submitted_amounts_reproduce_contract_math(self):
        pool = _pool(1_000_000_000, 1_158_700_000, virtual_a=1_000_000_000, virtual_b=1_158_700_000)
        plan = plan_add_liquidity(pool, 12_345_678)
        assert plan.amount_b == derive_proportional_amount(pool, plan.amount_a)
        assert plan.lp_minted == estimate_lp_minted(pool, plan.amount_a, plan.amount_b)
