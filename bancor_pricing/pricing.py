"""Bancor weighted-pool pricing engine.

Prices swaps against two reserves bound by the weighted invariant:

    reserve_in^weight_in * reserve_out^weight_out = k

Balanced pools (equal weights) reduce to the constant product x * y = k and
are evaluated with exact integer formulas. Unequal weights go through the
deterministic fixed-point power in weighted_math.

All functions are pure: arguments in, integer out, typed error on failure.
"""

from __future__ import annotations

from collections.abc import Callable

from bancor_pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig
from bancor_pricing.errors import (
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidInput,
    InvalidWeight,
    Overflow,
    Unimplemented,
)
from bancor_pricing.fees import FeeTerms, fee_terms
from bancor_pricing.math.fixed_point import FixedPointError
from bancor_pricing.safe_int import UINT64_MAX, S, SafeInt, Uint64Overflow
from bancor_pricing.weighted_math import calc_in_given_out, calc_out_given_in

__all__ = ["get_amount_out", "get_amount_in", "quote"]


# =============================================================================
# Validation helpers
# =============================================================================


def _check_uint64(**values: int) -> None:
    for name, value in values.items():
        if value > UINT64_MAX:
            raise Overflow(f"{name} {value} exceeds uint64 max")


def _to_uint64(amount: SafeInt, what: str) -> int:
    try:
        return amount.to_uint64()
    except Uint64Overflow as err:
        raise Overflow(f"{what} does not fit uint64: {amount.value}") from err


def _validate_swap(
    amount: int,
    amount_error: type[InvalidInput],
    reserve_in: int,
    reserve_weight_in: int,
    reserve_out: int,
    reserve_weight_out: int,
) -> None:
    """Check swap preconditions in contract order: amount, liquidity, weights, range."""
    for value in (amount, reserve_in, reserve_weight_in, reserve_out, reserve_weight_out):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Pricing arguments must be int, got {type(value).__name__}")
    if amount <= 0:
        raise amount_error(f"Amount must be positive, got {amount}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"Reserves must be positive, got {reserve_in}, {reserve_out}")
    if reserve_weight_in <= 0 or reserve_weight_out <= 0:
        raise InvalidWeight(
            f"Weights must be positive, got {reserve_weight_in}, {reserve_weight_out}"
        )
    _check_uint64(
        amount=amount,
        reserve_in=reserve_in,
        reserve_weight_in=reserve_weight_in,
        reserve_out=reserve_out,
        reserve_weight_out=reserve_weight_out,
    )


# =============================================================================
# Curve evaluation
# =============================================================================


def _balanced_amount_out(
    amount_in: int, reserve_in: int, reserve_out: int, terms: FeeTerms
) -> SafeInt:
    """Exact constant-product output.

    Formula: out = R_out * a * out_num / ((R_in + a) * out_den), a = amount_in * in_num / in_den
    """
    effective_in = S(amount_in) * terms.input_num
    numerator = S(reserve_out) * effective_in * terms.output_num
    denominator = (S(reserve_in) * terms.input_den + effective_in) * terms.output_den
    return numerator // denominator


def _weighted_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_weight_in: int,
    reserve_out: int,
    reserve_weight_out: int,
    terms: FeeTerms,
) -> SafeInt:
    try:
        amount = calc_out_given_in(
            reserve_in, reserve_weight_in, reserve_out, reserve_weight_out, amount_in, terms
        )
    except FixedPointError as err:
        raise Overflow(f"Power evaluation out of range: {err}") from err
    return S(amount.to_int_down())


def _balanced_amount_in(
    amount_out: int, reserve_in: int, reserve_out: int, terms: FeeTerms
) -> SafeInt:
    """Exact constant-product inverse, plus one conservative unit.

    Solves R_out * a * in_num * out_num >= y * (R_in * in_den + a * in_num) * out_den for a.
    """
    capacity = S(reserve_out) * terms.output_num
    target = S(amount_out) * terms.output_den
    if capacity <= target:
        raise InsufficientLiquidity(
            f"Output {amount_out} cannot be drawn from reserve {reserve_out} after fee"
        )
    numerator = target * reserve_in * terms.input_den
    denominator = (capacity - target) * terms.input_num
    return numerator // denominator + 1


def _settle_amount_in(estimate: int, amount_out: int, forward: Callable[[int], int]) -> int:
    """Smallest input >= estimate whose forward output covers amount_out.

    The power inverse is rounded up, so the estimate almost always holds on
    its own; otherwise gallop upward and bisect.
    """
    if estimate > UINT64_MAX:
        raise Overflow(f"Required input {estimate} exceeds uint64 max")

    low, high, step = estimate, estimate, 1
    while forward(high) < amount_out:
        if high == UINT64_MAX:
            raise Overflow(f"No uint64 input delivers output {amount_out}")
        low = high
        high = min(estimate + step, UINT64_MAX)
        step <<= 1

    if high == estimate:
        return estimate

    # forward(low) < amount_out <= forward(high)
    while high - low > 1:
        mid = (low + high) // 2
        if forward(mid) >= amount_out:
            high = mid
        else:
            low = mid
    return high


# =============================================================================
# Public API
# =============================================================================


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_weight_in: int,
    reserve_out: int,
    reserve_weight_out: int,
    fee: int = 0,
    *,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> int:
    """Maximum output amount for a given input, net of fee.

    Formula:
        out = reserve_out * (1 - (reserve_in / (reserve_in + amount_in))^(weight_in / weight_out))

    with the fee applied according to config.fee_model, then floored.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_weight_in: Weight of the input reserve
        reserve_out: Reserve of output token in pool
        reserve_weight_out: Weight of the output reserve
        fee: Trading fee on config.fee_scale (default ppm)
        config: Pricing configuration

    Returns:
        Output token amount

    Raises:
        InsufficientInputAmount: If amount_in is not positive
        InsufficientLiquidity: If a reserve is empty
        InvalidWeight: If a weight is not positive
        InvalidFee: If fee is outside [0, fee_scale)
        Overflow: If an argument does not fit uint64

    Example:
        >>> get_amount_out(10_000, 45_851_931_234, 50_000, 125_682_033_533, 50_000, 2000)
        27300
    """
    _validate_swap(
        amount_in,
        InsufficientInputAmount,
        reserve_in,
        reserve_weight_in,
        reserve_out,
        reserve_weight_out,
    )
    terms = fee_terms(config.fee_model, fee, config.fee_scale)

    if reserve_weight_in == reserve_weight_out:
        amount_out = _balanced_amount_out(amount_in, reserve_in, reserve_out, terms)
    else:
        amount_out = _weighted_amount_out(
            amount_in, reserve_in, reserve_weight_in, reserve_out, reserve_weight_out, terms
        )
    return _to_uint64(amount_out, "amount_out")


def get_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_weight_in: int,
    reserve_out: int,
    reserve_weight_out: int,
    fee: int = 0,
    *,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> int:
    """Minimum input amount required for a desired output, accounting for fee.

    Balanced pools use the closed form ``1 + floor(numerator / denominator)``;
    with the input fee model that is
    ``1 + reserve_in * amount_out * scale // ((reserve_out - amount_out) * (scale - fee))``.
    Unequal weights invert the power formula and then verify the result
    against get_amount_out, so the round trip never under-delivers:

        get_amount_out(get_amount_in(y, ...), ...) >= y

    Args:
        amount_out: Desired output token amount
        reserve_in: Reserve of input token in pool
        reserve_weight_in: Weight of the input reserve
        reserve_out: Reserve of output token in pool
        reserve_weight_out: Weight of the output reserve
        fee: Trading fee on config.fee_scale (default ppm)
        config: Pricing configuration

    Returns:
        Required input token amount

    Raises:
        InsufficientOutputAmount: If amount_out is not positive
        InsufficientLiquidity: If a reserve is empty or cannot cover amount_out
        InvalidWeight: If a weight is not positive
        InvalidFee: If fee is outside [0, fee_scale)
        Overflow: If an argument or the result does not fit uint64
        Unimplemented: If weights differ and config.numeric_inverse is False
    """
    _validate_swap(
        amount_out,
        InsufficientOutputAmount,
        reserve_in,
        reserve_weight_in,
        reserve_out,
        reserve_weight_out,
    )
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Output {amount_out} must be less than reserve {reserve_out}"
        )
    terms = fee_terms(config.fee_model, fee, config.fee_scale)

    if reserve_weight_in == reserve_weight_out:
        return _to_uint64(
            _balanced_amount_in(amount_out, reserve_in, reserve_out, terms), "amount_in"
        )

    if not config.numeric_inverse:
        raise Unimplemented(
            f"No closed-form inverse for weights {reserve_weight_in}:{reserve_weight_out}"
        )

    try:
        estimate = calc_in_given_out(
            reserve_in, reserve_weight_in, reserve_out, reserve_weight_out, amount_out, terms
        )
    except FixedPointError as err:
        raise Overflow(f"Power evaluation out of range: {err}") from err

    def forward(amount_in: int) -> int:
        return _weighted_amount_out(
            amount_in, reserve_in, reserve_weight_in, reserve_out, reserve_weight_out, terms
        ).value

    return _settle_amount_in(estimate.to_int_down() + 1, amount_out, forward)


def quote(
    amount_a: int,
    reserve_a: int,
    reserve_weight_a: int,
    reserve_b: int,
    reserve_weight_b: int,
    *,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> int:
    """Equivalent amount of the other asset at the current spot price.

    Fee-free and curve-independent; used for price oracles and for sizing
    liquidity additions, never for execution.

    Formula:
        amount_b = amount_a * (reserve_b * W // weight_b) // (reserve_a * W // weight_a)

    with W = config.weight_scale. The product is computed in unbounded
    integers and range-checked at the end.

    Args:
        amount_a: Amount of asset A
        reserve_a: Reserve of asset A
        reserve_weight_a: Weight of reserve A
        reserve_b: Reserve of asset B
        reserve_weight_b: Weight of reserve B
        config: Pricing configuration

    Returns:
        Equivalent amount of asset B

    Raises:
        InsufficientAmount: If amount_a is not positive
        InsufficientLiquidity: If a reserve is empty or normalizes to zero
        InvalidWeight: If a weight is not positive
        Overflow: If an argument or the result does not fit uint64

    Example:
        >>> quote(10_000, 45_851_931_234, 50_000, 125_682_033_533, 50_000)
        27410
    """
    _validate_swap(
        amount_a,
        InsufficientAmount,
        reserve_a,
        reserve_weight_a,
        reserve_b,
        reserve_weight_b,
    )

    normalized_b = S(reserve_b) * config.weight_scale // reserve_weight_b
    normalized_a = S(reserve_a) * config.weight_scale // reserve_weight_a
    if not normalized_a:
        raise InsufficientLiquidity(
            f"Reserve {reserve_a} normalizes to zero under weight {reserve_weight_a}"
        )

    return _to_uint64(S(amount_a) * normalized_b // normalized_a, "quote")
