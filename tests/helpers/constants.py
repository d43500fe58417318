"""Shared pool states for tests.

Usage:
    from tests.helpers import BALANCED_POOL
    get_amount_out(10_000, *BALANCED_POOL.args)
"""

from typing import NamedTuple


class PoolState(NamedTuple):
    """Reserves and weights in engine argument order."""

    reserve_in: int
    weight_in: int
    reserve_out: int
    weight_out: int

    @property
    def args(self) -> tuple[int, int, int, int]:
        return (self.reserve_in, self.weight_in, self.reserve_out, self.weight_out)

    def reversed(self) -> "PoolState":
        return PoolState(self.reserve_out, self.weight_out, self.reserve_in, self.weight_in)


# =============================================================================
# Pools observed on chain
# =============================================================================

# EOS/BNT on the multi-converter: 4585193.1234 EOS vs 12.5682033533 BNT, 50/50
BALANCED_POOL = PoolState(45_851_931_234, 50_000, 125_682_033_533, 50_000)

# Original EOS/BNT relay: 57812.5412 EOS vs 217008.7186740517 BNT, 50/50
DEEP_POOL = PoolState(578_125_412, 500_000, 2_170_087_186_740_517, 500_000)

# 20/80 pool: 83351.5447 EOS vs 1039523.7882 USDT
UNBALANCED_POOL = PoolState(833_515_447, 20, 10_395_237_882, 80)

# Round numbers used for the exact-output formulas: 1:4 price, 50/50
INVERSE_POOL = PoolState(100_000_000, 500_000, 400_000_000, 500_000)
