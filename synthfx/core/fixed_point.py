"""
Fixed-point integer primitives shared by every engine component.

Pool, vault and perp contracts run on an unsigned 256-bit integer VM. Every
rounding-sensitive step in this package goes through `mul_div` / `isqrt` so the
client reproduces the contract's arithmetic to the unit.

Rules:
- Operands and results are unsigned 256-bit words; anything larger raises
  `ArithmeticOverflowError`.
- The product `a * b` is formed at full (512-bit) width before dividing.
- Default rounding is DOWN (truncating), matching Solidity `/`.
- No floating point anywhere: a float sqrt or quotient can land one unit away
  from the contract and trip its ratio check.
"""

from __future__ import annotations

import math
from enum import Enum, unique

from .errors import ArithmeticOverflowError, DivisionByZeroError


UINT256_MAX = (1 << 256) - 1
BPS_DENOM = 10_000


@unique
class Rounding(Enum):
    DOWN = "down"
    UP = "up"
    NEAREST = "nearest"  # half rounds up


def _require_word(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    if value > UINT256_MAX:
        raise ArithmeticOverflowError(f"{name} exceeds uint256: {value}")
    return value


def mul_div(a: int, b: int, denominator: int, rounding: Rounding = Rounding.DOWN) -> int:
    """
    Compute ``a * b / denominator`` without intermediate overflow.

    Raises:
        DivisionByZeroError: denominator is zero
        ArithmeticOverflowError: an operand or the result exceeds uint256
    """
    _require_word(a, name="a")
    _require_word(b, name="b")
    _require_word(denominator, name="denominator")
    if denominator == 0:
        raise DivisionByZeroError(f"mul_div({a}, {b}, 0)")
    if not isinstance(rounding, Rounding):
        raise TypeError("rounding must be a Rounding")

    product = a * b
    q, r = divmod(product, denominator)
    if rounding is Rounding.UP and r:
        q += 1
    elif rounding is Rounding.NEAREST and 2 * r >= denominator:
        q += 1

    if q > UINT256_MAX:
        raise ArithmeticOverflowError(f"mul_div result exceeds uint256: {q}")
    return q


def div(a: int, denominator: int, rounding: Rounding = Rounding.DOWN) -> int:
    """``a / denominator`` with explicit rounding."""
    return mul_div(a, 1, denominator, rounding)


def isqrt(x: int) -> int:
    """Largest ``r`` such that ``r * r <= x``, computed in integer arithmetic."""
    _require_word(x, name="x")
    return math.isqrt(x)


def checked_add(a: int, b: int) -> int:
    _require_word(a, name="a")
    _require_word(b, name="b")
    total = a + b
    if total > UINT256_MAX:
        raise ArithmeticOverflowError(f"addition overflows uint256: {a} + {b}")
    return total


def checked_sub(a: int, b: int) -> int:
    """Unsigned subtraction; underflow is an overflow of the word range."""
    _require_word(a, name="a")
    _require_word(b, name="b")
    if b > a:
        raise ArithmeticOverflowError(f"subtraction underflows: {a} - {b}")
    return a - b
