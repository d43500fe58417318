"""Tests for the checked integer wrapper."""

import pytest

from bancor_pricing.safe_int import (
    UINT64_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint64Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """Floats, strings and bools are rejected."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15

    def test_sub(self):
        assert (S(10) - S(3)).value == 7

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_mul_widens(self):
        """Products of two uint64 values are kept exactly."""
        result = S(UINT64_MAX) * S(UINT64_MAX)
        assert result.value == UINT64_MAX * UINT64_MAX
        with pytest.raises(Uint64Overflow):
            result.to_uint64()

    def test_pow(self):
        assert (S(998_000) ** 2).value == 996_004_000_000

    def test_negative_pow_raises(self):
        with pytest.raises(ValueError):
            S(2) ** -1

    def test_floordiv(self):
        assert (S(10) // S(3)).value == 3
        assert (S(10) // 3).value == 3

    def test_floordiv_by_zero_raises(self):
        """Division by zero raises DivisionByZero."""
        with pytest.raises(DivisionByZero) as exc_info:
            S(10) // S(0)
        assert "Division by zero" in str(exc_info.value)

    def test_ceiling_div(self):
        assert S(10).ceiling_div(3).value == 4
        assert S(9).ceiling_div(3).value == 3

    def test_ceiling_div_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10).ceiling_div(0)


class TestSafeIntComparison:
    """Tests for SafeInt comparison operations."""

    def test_eq(self):
        assert S(5) == S(5)
        assert S(5) == 5
        assert S(5) != 6

    def test_ordering(self):
        assert S(5) < S(6)
        assert S(5) <= 5
        assert S(7) > 6
        assert S(7) >= S(7)

    def test_bool(self):
        assert not S(0)
        assert S(1)


class TestSafeIntConversion:
    """Tests for uint64 range checks."""

    def test_to_uint64_max(self):
        assert S(UINT64_MAX).to_uint64() == UINT64_MAX

    def test_to_uint64_overflow_raises(self):
        with pytest.raises(Uint64Overflow):
            S(UINT64_MAX + 1).to_uint64()

    def test_to_uint64_negative_raises(self):
        with pytest.raises(Uint64Overflow):
            S(-1).to_uint64()

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors share a base class."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(Uint64Overflow, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)
