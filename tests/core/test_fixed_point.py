"""Tests for synthfx/core/fixed_point.py."""

from __future__ import annotations

import pytest

from synthfx.core.errors import ArithmeticOverflowError, DivisionByZeroError, ErrorKind
from synthfx.core.fixed_point import UINT256_MAX, Rounding, checked_add, checked_sub, div, isqrt, mul_div


# ---------------------------------------------------------------------------
# mul_div
# ---------------------------------------------------------------------------

class TestMulDiv:
    def test_exact(self):
        assert mul_div(6, 7, 3) == 14

    def test_default_rounds_down(self):
        assert mul_div(10, 7, 3) == 23

    def test_round_up(self):
        assert mul_div(10, 7, 3, Rounding.UP) == 24

    def test_round_up_exact_is_unchanged(self):
        assert mul_div(6, 7, 3, Rounding.UP) == 14

    def test_round_nearest(self):
        assert mul_div(10, 7, 3, Rounding.NEAREST) == 23  # 23.33
        assert mul_div(11, 7, 3, Rounding.NEAREST) == 26  # 25.67

    def test_round_nearest_half_goes_up(self):
        assert mul_div(5, 1, 2, Rounding.NEAREST) == 3

    def test_wide_intermediate(self):
        # a * b overflows 256 bits but the quotient fits.
        a = UINT256_MAX
        assert mul_div(a, a, a) == a

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError) as exc:
            mul_div(1, 1, 0)
        assert exc.value.kind is ErrorKind.DIVISION_BY_ZERO
        assert isinstance(exc.value, ZeroDivisionError)

    def test_result_overflow(self):
        with pytest.raises(ArithmeticOverflowError) as exc:
            mul_div(UINT256_MAX, 2, 1)
        assert exc.value.kind is ErrorKind.OVERFLOW

    def test_operand_overflow(self):
        with pytest.raises(ArithmeticOverflowError):
            mul_div(UINT256_MAX + 1, 1, 1)

    def test_negative_operand_rejected(self):
        with pytest.raises(ValueError):
            mul_div(-1, 1, 1)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            mul_div(True, 1, 1)

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            mul_div(1.5, 2, 1)

    def test_matches_integer_not_float_division(self):
        # float(a*b/c) rounds 2.99999999999999999 up to 3.0.
        a, b, c = 3 * 10**17 - 1, 7, 7 * 10**17
        assert int(a * b / c) == 3
        assert mul_div(a, b, c) == 2

    def test_deterministic(self):
        assert mul_div(123456789, 987654321, 1357) == mul_div(123456789, 987654321, 1357)


def test_div_helper():
    assert div(7, 2) == 3
    assert div(7, 2, Rounding.UP) == 4


def test_checked_add_and_sub():
    assert checked_add(2, 3) == 5
    assert checked_sub(5, 3) == 2
    with pytest.raises(ArithmeticOverflowError):
        checked_add(UINT256_MAX, 1)
    with pytest.raises(ArithmeticOverflowError):
        checked_sub(3, 5)


# ---------------------------------------------------------------------------
# isqrt
# ---------------------------------------------------------------------------

class TestIsqrt:
    @pytest.mark.parametrize(
        "x, expected",
        [(0, 0), (1, 1), (3, 1), (4, 2), (15, 3), (16, 4), (40_000, 200), (39_999, 199)],
    )
    def test_small(self, x, expected):
        assert isqrt(x) == expected

    def test_large_square_is_exact(self):
        n = (1 << 70) + 12345
        assert isqrt(n * n) == n
        assert isqrt(n * n - 1) == n - 1

    def test_floor_property_at_uint256_max(self):
        r = isqrt(UINT256_MAX)
        assert r * r <= UINT256_MAX < (r + 1) * (r + 1)

    def test_overflow(self):
        with pytest.raises(ArithmeticOverflowError):
            isqrt(UINT256_MAX + 1)

    def test_negative(self):
        with pytest.raises(ValueError):
            isqrt(-1)
