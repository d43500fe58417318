"""Pricing engine error classes.

Every class carries the symbolic code the converter contracts report
(``sx.bancor: INSUFFICIENT_LIQUIDITY`` and friends) so callers can map
failures back to on-chain rejections.
"""

from typing import ClassVar


class PricingError(Exception):
    """Base error for pricing engine operations."""

    code: ClassVar[str] = "PRICING_ERROR"


class InvalidInput(PricingError):
    """A precondition on the call arguments was violated."""

    code: ClassVar[str] = "INVALID_INPUT"


class InsufficientInputAmount(InvalidInput):
    """amount_in must be positive."""

    code: ClassVar[str] = "INSUFFICIENT_INPUT_AMOUNT"


class InsufficientOutputAmount(InvalidInput):
    """amount_out must be positive."""

    code: ClassVar[str] = "INSUFFICIENT_OUTPUT_AMOUNT"


class InsufficientAmount(InvalidInput):
    """Quoted amount must be positive."""

    code: ClassVar[str] = "INSUFFICIENT_AMOUNT"


class InsufficientLiquidity(InvalidInput):
    """Reserves are empty or cannot cover the requested output."""

    code: ClassVar[str] = "INSUFFICIENT_LIQUIDITY"


class InvalidWeight(InvalidInput):
    """Reserve weights must be positive."""

    code: ClassVar[str] = "INVALID_WEIGHT"


class InvalidFee(InvalidInput):
    """Fee must be in range [0, fee_scale)."""

    code: ClassVar[str] = "INVALID_FEE"


class Overflow(PricingError):
    """An argument or result does not fit in an unsigned 64-bit integer."""

    code: ClassVar[str] = "OVERFLOW"


class Unimplemented(PricingError):
    """The requested inverse has no closed form and numeric inversion is disabled."""

    code: ClassVar[str] = "UNIMPLEMENTED"
