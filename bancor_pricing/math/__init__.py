"""Mathematical utilities for the pricing engine.

This package provides mathematical primitives for curve calculations:
- Fixed: deterministic binary fixed-point arithmetic (2^128 scale)
"""

from bancor_pricing.math.fixed_point import Fixed

__all__ = ["Fixed"]
