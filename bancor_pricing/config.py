"""Pricing configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from bancor_pricing.fees import FEE_SCALE_PPM, FeeModel

# Weights are expressed against this scale in the converter tables (500000 = 50%)
WEIGHT_SCALE = 1_000_000


@dataclass(frozen=True)
class PricingConfig:
    """Centralized configuration for the pricing engine.

    Passed explicitly to every engine call; the engine holds no global state.

    Attributes:
        fee_model: How the fee is applied (default: squared output deduction)
        fee_scale: Denominator of the fee argument (default: ppm)
        weight_scale: Multiplier used to normalize reserves by weight in quote()
        numeric_inverse: If True, get_amount_in solves unequal-weight pools
            through the power inverse. If False, those calls raise Unimplemented.
    """

    fee_model: FeeModel = FeeModel.OUTPUT_SQUARED
    fee_scale: int = FEE_SCALE_PPM
    weight_scale: int = WEIGHT_SCALE
    numeric_inverse: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.fee_model, FeeModel):
            raise ValueError(f"fee_model must be a FeeModel, got {self.fee_model!r}")
        if self.fee_scale <= 0:
            raise ValueError(f"fee_scale must be positive, got {self.fee_scale}")
        if self.weight_scale <= 0:
            raise ValueError(f"weight_scale must be positive, got {self.weight_scale}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PricingConfig:
        """Build a config from environment variables with defaults.

        - BANCOR_FEE_MODEL: output_squared | output | input
        - BANCOR_FEE_SCALE: fee denominator (default: 1000000)
        - BANCOR_WEIGHT_SCALE: weight normalization scale (default: 1000000)
        - BANCOR_NUMERIC_INVERSE: solve unequal-weight inverses (default: true)
        """
        env = os.environ if environ is None else environ
        return cls(
            fee_model=FeeModel(env.get("BANCOR_FEE_MODEL", FeeModel.OUTPUT_SQUARED.value)),
            fee_scale=int(env.get("BANCOR_FEE_SCALE", str(FEE_SCALE_PPM))),
            weight_scale=int(env.get("BANCOR_WEIGHT_SCALE", str(WEIGHT_SCALE))),
            numeric_inverse=env.get("BANCOR_NUMERIC_INVERSE", "true").lower()
            in ("true", "1", "yes"),
        )


# Default configuration instance
DEFAULT_PRICING_CONFIG = PricingConfig()
