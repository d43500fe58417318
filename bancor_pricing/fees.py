"""Fee models and fee helpers.

Converter revisions disagree on how the trading fee enters the curve: some
deduct it once from the output, the multi-converter deducts it twice (trade
fee plus protocol fee), and the exact-output helpers deduct it from the
input before the curve is applied. FeeModel names each policy so the caller
picks one explicitly instead of inheriting whichever revision is deployed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bancor_pricing.errors import InvalidFee
from bancor_pricing.safe_int import S

# Canonical fee scale: parts per million (2000 = 0.2%)
FEE_SCALE_PPM = 1_000_000
# Legacy fee scale: parts per ten thousand (30 = 0.3%)
FEE_SCALE_BPS = 10_000


class FeeModel(str, Enum):
    """Where and how often the fee is deducted."""

    # amount_out * ((scale - fee) / scale)^2
    OUTPUT_SQUARED = "output_squared"
    # amount_out * (scale - fee) / scale
    OUTPUT = "output"
    # curve evaluated on amount_in * (scale - fee) / scale
    INPUT = "input"


@dataclass(frozen=True)
class FeeTerms:
    """Fee model reduced to integer multipliers.

    The curve sees an effective input of ``amount_in * input_num / input_den``
    and its raw output is multiplied by ``output_num / output_den``.
    """

    input_num: int
    input_den: int
    output_num: int
    output_den: int


def validate_fee(fee: int, scale: int) -> None:
    """Check that fee is in range [0, scale).

    Raises:
        InvalidFee: If the fee is negative or would consume the whole trade
    """
    if scale <= 0:
        raise InvalidFee(f"Fee scale must be positive, got {scale}")
    if fee < 0 or fee >= scale:
        raise InvalidFee(f"Fee must be in range [0, {scale}), got {fee}")


def fee_complement(fee: int, scale: int) -> int:
    """Return scale - fee, the share of a trade that survives the fee."""
    validate_fee(fee, scale)
    return scale - fee


def fee_terms(model: FeeModel, fee: int, scale: int) -> FeeTerms:
    """Reduce a fee model to integer multipliers for the curve."""
    complement = S(fee_complement(fee, scale))
    if model is FeeModel.INPUT:
        return FeeTerms(input_num=complement.value, input_den=scale, output_num=1, output_den=1)
    if model is FeeModel.OUTPUT:
        return FeeTerms(input_num=1, input_den=1, output_num=complement.value, output_den=scale)
    if model is FeeModel.OUTPUT_SQUARED:
        return FeeTerms(
            input_num=1,
            input_den=1,
            output_num=(complement**2).value,
            output_den=(S(scale) ** 2).value,
        )
    raise ValueError(f"Unknown fee model: {model}")


def normalize_fee(fee: int, from_scale: int, to_scale: int) -> int:
    """Convert a fee between scales, rounding up.

    Rounding up means a fee is never understated when moving to a coarser
    scale (ppm to bps).

    Raises:
        InvalidFee: If the fee is invalid on either scale
    """
    validate_fee(fee, from_scale)
    if from_scale == to_scale:
        return fee
    normalized = (S(fee) * to_scale).ceiling_div(from_scale).value
    validate_fee(normalized, to_scale)
    return normalized


# Fee-free terms, used by quote-style callers and in tests
NO_FEE = FeeTerms(input_num=1, input_den=1, output_num=1, output_den=1)
