"""Bancor weighted-pool pricing engine."""

from bancor_pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig
from bancor_pricing.fees import FeeModel
from bancor_pricing.pricing import get_amount_in, get_amount_out, quote

__version__ = "0.1.0"
__all__ = [
    "get_amount_out",
    "get_amount_in",
    "quote",
    "PricingConfig",
    "DEFAULT_PRICING_CONFIG",
    "FeeModel",
    "__version__",
]
