"""Weighted bonding-curve math.

General-weight evaluation of the Bancor cross-reserve formula on
deterministic fixed-point values. Balanced pools never need this module;
pricing.py evaluates them with exact integer formulas.
"""

from bancor_pricing.errors import InsufficientLiquidity, InvalidWeight
from bancor_pricing.fees import NO_FEE, FeeTerms
from bancor_pricing.math.fixed_point import Fixed


def _check_pool(balance_in: int, weight_in: int, balance_out: int, weight_out: int) -> None:
    if weight_in <= 0 or weight_out <= 0:
        raise InvalidWeight("weights must be positive")
    if balance_in <= 0 or balance_out <= 0:
        raise InsufficientLiquidity("balances must be positive")


def calc_out_given_in(
    balance_in: int,
    weight_in: int,
    balance_out: int,
    weight_out: int,
    amount_in: int,
    terms: FeeTerms = NO_FEE,
) -> Fixed:
    """Calculate output amount for a given input.

    Formula:
        amount_out = balance_out * (1 - (balance_in / (balance_in + a))^(weight_in / weight_out))

    where ``a = amount_in * terms.input_num / terms.input_den`` and the result
    is then scaled by ``terms.output_num / terms.output_den``.

    Every rounding step favors the pool: the base and the power are rounded
    up, the output is rounded down.

    Args:
        balance_in: Reserve of the input token
        weight_in: Weight of the input reserve
        balance_out: Reserve of the output token
        weight_out: Weight of the output reserve
        amount_in: Input amount before fee
        terms: Fee multipliers

    Returns:
        Output amount as Fixed (caller floors it)

    Raises:
        InvalidWeight: If a weight is zero
        InsufficientLiquidity: If a balance is zero
    """
    _check_pool(balance_in, weight_in, balance_out, weight_out)

    # base = balance_in / (balance_in + effective_in), scaled to keep it exact
    scaled_balance_in = balance_in * terms.input_den
    effective_in = amount_in * terms.input_num
    base = Fixed.from_ratio_up(scaled_balance_in, scaled_balance_in + effective_in)

    power = base.pow_up(weight_in, weight_out)

    raw_out = Fixed.from_int(balance_out).mul_down(power.complement())
    return Fixed((raw_out.value * terms.output_num) // terms.output_den)


def calc_in_given_out(
    balance_in: int,
    weight_in: int,
    balance_out: int,
    weight_out: int,
    amount_out: int,
    terms: FeeTerms = NO_FEE,
) -> Fixed:
    """Calculate input amount for a desired output.

    Formula:
        a = balance_in * ((balance_out / (balance_out - t))^(weight_out / weight_in) - 1)

    where ``t = amount_out * terms.output_den / terms.output_num`` is the
    curve output needed before the output-side fee, and the input-side fee
    is undone with ``amount_in = a * terms.input_den / terms.input_num``.

    Args:
        balance_in: Reserve of the input token
        weight_in: Weight of the input reserve
        balance_out: Reserve of the output token
        weight_out: Weight of the output reserve
        amount_out: Desired output amount after fee
        terms: Fee multipliers

    Returns:
        Input amount as Fixed, rounded up (caller adds the conservative unit)

    Raises:
        InvalidWeight: If a weight is zero
        InsufficientLiquidity: If a balance is zero or the curve cannot
            deliver amount_out
    """
    _check_pool(balance_in, weight_in, balance_out, weight_out)

    scaled_balance_out = balance_out * terms.output_num
    target = amount_out * terms.output_den
    if target >= scaled_balance_out:
        raise InsufficientLiquidity(
            f"Output {amount_out} cannot be drawn from balance {balance_out} after fee"
        )

    # base = balance_out / (balance_out - t) (rounded up)
    base = Fixed.from_ratio_up(scaled_balance_out, scaled_balance_out - target)

    power = base.pow_up(weight_out, weight_in)

    effective_in = Fixed.from_int(balance_in).mul_up(power.sub(Fixed.one()))
    return Fixed(-(-(effective_in.value * terms.input_den) // terms.input_num))
