"""Safe integer wrapper for arithmetic on token amounts.

Ledger amounts are unsigned 64-bit integers. Python integers never wrap, so
intermediate products may grow as wide as they need to (the 128-bit
"widening multiply" of the contract code comes for free); the range is only
checked when a value leaves the engine.

Example:
    from bancor_pricing.safe_int import S

    def constant_product_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        numerator = S(reserve_out) * amount_in          # exact, any width
        amount_out = numerator // (S(reserve_in) + amount_in)
        return amount_out.to_uint64()                   # Uint64Overflow if too large
"""

from __future__ import annotations

UINT64_MAX = 2**64 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class Uint64Overflow(SafeIntError):
    """Value is negative or exceeds uint64 maximum."""

    pass


class SafeInt:
    """Integer with checked arithmetic.

    - Division by zero raises DivisionByZero
    - Negative results from subtraction raise Underflow
    - Values outside uint64 raise Uint64Overflow on to_uint64()
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __pow__(self, exponent: int) -> SafeInt:
        if exponent < 0:
            raise ValueError(f"SafeInt power requires non-negative exponent, got {exponent}")
        return SafeInt(self._value**exponent)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division (floor).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // other_val))

    def to_uint64(self) -> int:
        """Convert to int, validating uint64 bounds.

        Raises:
            Uint64Overflow: If value is negative or exceeds 2^64-1
        """
        if self._value < 0:
            raise Uint64Overflow(f"Negative value cannot be uint64: {self._value}")
        if self._value > UINT64_MAX:
            raise Uint64Overflow(f"Value exceeds uint64 max: {self._value}")
        return self._value


def _extract_value(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
