"""Deterministic binary fixed-point math.

Every node validating a ledger transition has to agree on swap results to
the last base unit, so the weighted curve cannot be evaluated with float
``pow``. This module evaluates powers with integer operations only:

- ``log2`` uses the repeated-squaring digit algorithm (one squaring per
  fractional bit).
- ``exp2`` multiplies together precomputed constants ``2^(2^-i)``, which are
  derived at import with ``math.isqrt`` (exact integer square roots).
- ``pow_raw(x, num, den)`` is ``exp2(log2(x) * num // den)``; the exponent is
  an exact rational so weight ratios are never rounded before use.

All values are integers scaled by 2^128.
"""

from __future__ import annotations

import math
from typing import ClassVar

__all__ = [
    # Classes
    "Fixed",
    # Errors
    "FixedPointError",
    "XOutOfBounds",
    "ExponentOutOfBounds",
    # Functions
    "log2",
    "exp2",
    "pow_raw",
    # Constants
    "PRECISION",
    "ONE",
    "MAX_EXP2_INPUT",
    "MIN_EXP2_INPUT",
]

# =============================================================================
# Constants
# =============================================================================

PRECISION = 128
ONE = 1 << PRECISION
TWO = ONE << 1

# 2^128 is the largest power we hand back; beyond that the caller overflows anyway
MAX_EXP2_INPUT = 128 * ONE
# Below 2^-128 the scaled result floors to zero
MIN_EXP2_INPUT = -PRECISION * ONE


def _build_roots() -> tuple[int, ...]:
    """Return 2^(2^-i) for i = 1..PRECISION, each rounded down."""
    roots = []
    root = TWO
    for _ in range(PRECISION):
        root = math.isqrt(root << PRECISION)
        roots.append(root)
    return tuple(roots)


# _ROOTS[i] == floor(2^(2^-(i+1)) * ONE)
_ROOTS = _build_roots()


# =============================================================================
# Error classes
# =============================================================================


class FixedPointError(ArithmeticError):
    """Base error for fixed-point operations."""

    pass


class XOutOfBounds(FixedPointError):
    """Logarithm argument must be positive."""

    pass


class ExponentOutOfBounds(FixedPointError):
    """Power result does not fit the supported range."""

    pass


# =============================================================================
# Core math functions
# =============================================================================


def log2(x: int) -> int:
    """Compute log2 of a fixed-point value.

    The integer part comes from the bit length. The fractional part is
    produced one bit per iteration: squaring the normalized mantissa doubles
    its logarithm, and a result of 2 or more means the next bit is set.

    Args:
        x: Positive fixed-point value.

    Returns:
        log2(x) as a signed fixed-point integer, rounded down.

    Raises:
        XOutOfBounds: If x <= 0
    """
    if x <= 0:
        raise XOutOfBounds(f"log2 argument must be positive, got {x}")

    n = x.bit_length() - 1 - PRECISION
    mantissa = x >> n if n >= 0 else x << -n
    result = n * ONE

    bit = ONE >> 1
    while bit:
        mantissa = (mantissa * mantissa) >> PRECISION
        if mantissa >= TWO:
            mantissa >>= 1
            result += bit
        bit >>= 1

    return result


def exp2(y: int) -> int:
    """Compute 2^y where y is a signed fixed-point value.

    Args:
        y: Exponent as signed fixed-point.

    Returns:
        2^y as fixed-point, rounded down.

    Raises:
        ExponentOutOfBounds: If y > MAX_EXP2_INPUT
    """
    if y > MAX_EXP2_INPUT:
        raise ExponentOutOfBounds(f"Exponent {y} exceeds {MAX_EXP2_INPUT}")
    if y < MIN_EXP2_INPUT:
        return 0

    # >> floors, so frac is always in [0, ONE)
    whole = y >> PRECISION
    frac = y - (whole << PRECISION)

    result = ONE
    for i, root in enumerate(_ROOTS):
        if frac & (ONE >> (i + 1)):
            result = (result * root) >> PRECISION

    if whole >= 0:
        return result << whole
    return result >> -whole


def pow_raw(x: int, num: int, den: int = 1) -> int:
    """Compute x^(num/den) for a non-negative fixed-point base.

    Args:
        x: Base (non-negative fixed-point)
        num: Exponent numerator (non-negative integer)
        den: Exponent denominator (positive integer)

    Returns:
        x^(num/den) as fixed-point (before any error widening)

    Raises:
        XOutOfBounds: If x is negative
        ExponentOutOfBounds: If the exponent is invalid or the result is too large
    """
    if den <= 0 or num < 0:
        raise ExponentOutOfBounds(f"Exponent {num}/{den} must be a non-negative ratio")
    if x < 0:
        raise XOutOfBounds(f"Base {x} must be non-negative")
    if num == 0:
        return ONE
    if x == 0:
        return 0

    return exp2((log2(x) * num) // den)


# =============================================================================
# Fixed class (wrapper for convenient usage)
# =============================================================================


class Fixed:
    """Unsigned fixed-point number with 128 fractional bits.

    Example: 1.5 is stored as 3 << 127
    """

    ONE: ClassVar[int] = ONE
    # pow results are widened by raw * 2^-96 + 1, which dominates the
    # accumulated truncation error of log2/exp2 (a few units of 2^-128)
    MAX_POW_RELATIVE_ERROR_BITS: ClassVar[int] = 96

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create Fixed from raw scaled value."""
        self.value = value

    @classmethod
    def from_int(cls, i: int) -> Fixed:
        """Create from an integer amount."""
        return cls(i << PRECISION)

    @classmethod
    def from_ratio_up(cls, num: int, den: int) -> Fixed:
        """Create num/den rounded up."""
        if den == 0:
            raise ZeroDivisionError("Fixed ratio with zero denominator")
        return cls(-(-(num << PRECISION) // den))

    @classmethod
    def one(cls) -> Fixed:
        return cls(ONE)

    def to_int_down(self) -> int:
        """Integer part, rounded down."""
        return self.value >> PRECISION

    def mul_down(self, other: Fixed) -> Fixed:
        return Fixed((self.value * other.value) >> PRECISION)

    def mul_up(self, other: Fixed) -> Fixed:
        return Fixed(-(-(self.value * other.value) >> PRECISION))

    def complement(self) -> Fixed:
        """Return 1 - self. Clamps to 0 if self > 1."""
        return Fixed(max(0, ONE - self.value))

    def sub(self, other: Fixed) -> Fixed:
        """Subtract other from self. Clamps to 0 if result would be negative."""
        return Fixed(max(0, self.value - other.value))

    def _max_pow_error(self, raw: int) -> int:
        return (raw >> self.MAX_POW_RELATIVE_ERROR_BITS) + 1

    def pow_up(self, num: int, den: int = 1) -> Fixed:
        """Compute self^(num/den) rounded up."""
        raw = pow_raw(self.value, num, den)
        return Fixed(raw + self._max_pow_error(raw))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Fixed({self.value})"
