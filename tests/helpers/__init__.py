"""Test helpers module for shared test utilities.

- constants: pool states and expected values reused across tests
"""

from tests.helpers.constants import (
    BALANCED_POOL,
    DEEP_POOL,
    INVERSE_POOL,
    UNBALANCED_POOL,
    PoolState,
)

__all__ = [
    "PoolState",
    "BALANCED_POOL",
    "DEEP_POOL",
    "UNBALANCED_POOL",
    "INVERSE_POOL",
]
