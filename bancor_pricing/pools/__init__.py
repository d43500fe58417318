"""Reserve-resolution package.

Maps pool references onto the plain integers the pricing engine consumes,
reading legacy converter tables or the unified converter.v2 registry.
"""

from .errors import InvalidPairId, PoolNotFound, PoolResolutionError, ReserveNotFound
from .ledger import (
    Asset,
    ConverterRow,
    ExtendedAsset,
    LedgerSnapshot,
    LegacyConverter,
    LegacyReserveRow,
    LegacySettings,
    MultiConverter,
    MultiSettings,
    TokenBalance,
)
from .resolver import PoolResolver
from .types import (
    LEGACY_CONVERTER_CODE,
    MULTI_CONVERTER_CODE,
    LegacyPoolRef,
    MultiPoolRef,
    PoolRef,
    Reserve,
    SwapParams,
    SwapQuote,
    parse_pair_id,
)

__all__ = [
    # References
    "PoolRef",
    "LegacyPoolRef",
    "MultiPoolRef",
    "parse_pair_id",
    "LEGACY_CONVERTER_CODE",
    "MULTI_CONVERTER_CODE",
    # Resolved values
    "Reserve",
    "SwapParams",
    "SwapQuote",
    # Ledger models
    "Asset",
    "ExtendedAsset",
    "LegacySettings",
    "LegacyReserveRow",
    "LegacyConverter",
    "MultiSettings",
    "ConverterRow",
    "MultiConverter",
    "TokenBalance",
    "LedgerSnapshot",
    # Resolver
    "PoolResolver",
    # Errors
    "PoolResolutionError",
    "InvalidPairId",
    "PoolNotFound",
    "ReserveNotFound",
]
