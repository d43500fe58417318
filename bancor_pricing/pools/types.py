"""Pool reference and reserve types.

A pool is addressed by an explicit tagged reference rather than by a string
whose prefix decides which registry to read. parse_pair_id() is the only
place that still understands the historical string form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from .errors import InvalidPairId

# Converter account of the unified multi-pool registry
MULTI_CONVERTER_CODE = "bancorcnvrtr"
# Converter account of the original global BNT/EOS pool
LEGACY_CONVERTER_CODE = "bnt2eoscnvrt"

# Account names: up to 12 chars of a-z, 1-5 and '.'
_ACCOUNT_RE = re.compile(r"^[a-z1-5.]{1,12}$")
# Symbol codes: 1-7 uppercase letters
_SYMBOL_CODE_RE = re.compile(r"^[A-Z]{1,7}$")


def is_valid_account(name: str) -> bool:
    return bool(_ACCOUNT_RE.match(name))


def is_valid_symbol_code(code: str) -> bool:
    return bool(_SYMBOL_CODE_RE.match(code))


@dataclass(frozen=True)
class LegacyPoolRef:
    """A converter account with its own settings and reserves tables.

    Covers both the original global pool (bnt2eoscnvrt) and the later
    per-account converters; both share the same table layout.

    Attributes:
        code: Converter contract account
    """

    code: str = LEGACY_CONVERTER_CODE

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class MultiPoolRef:
    """One row of the unified converter.v2 registry.

    Attributes:
        currency: Pool token symbol code (e.g. "EOSBNT")
        code: Converter contract account hosting the registry
    """

    currency: str
    code: str = MULTI_CONVERTER_CODE

    def __str__(self) -> str:
        return f"{self.code}:{self.currency}"


PoolRef: TypeAlias = LegacyPoolRef | MultiPoolRef


def parse_pair_id(pair_id: str) -> PoolRef:
    """Turn a historical pair id string into a tagged pool reference.

    Accepted forms:
    - "bancorcnvrtr:EOSBNT" -> MultiPoolRef("EOSBNT")
    - "bancorc11154"        -> LegacyPoolRef("bancorc11154")

    Raises:
        InvalidPairId: If the string matches neither form
    """
    prefix = f"{MULTI_CONVERTER_CODE}:"
    if pair_id.startswith(prefix):
        currency = pair_id[len(prefix) :]
        if not is_valid_symbol_code(currency):
            raise InvalidPairId(f"Invalid multi-converter symbol in pair id: {pair_id!r}")
        return MultiPoolRef(currency=currency)

    if pair_id == MULTI_CONVERTER_CODE:
        raise InvalidPairId(f"Pair id {pair_id!r} is missing a currency suffix")
    if not is_valid_account(pair_id):
        raise InvalidPairId(f"Invalid converter account in pair id: {pair_id!r}")
    return LegacyPoolRef(code=pair_id)


@dataclass(frozen=True)
class Reserve:
    """One side of a pool as seen by the engine.

    Attributes:
        contract: Token contract of the reserve
        symbol: Symbol code of the reserve token
        balance: Pool balance in the token's smallest unit
        weight: Reserve weight relative to the other reserves
    """

    contract: str
    symbol: str
    balance: int
    weight: int


@dataclass(frozen=True)
class SwapParams:
    """Engine inputs for one swap direction, fee already on the engine's scale."""

    reserve_in: int
    weight_in: int
    reserve_out: int
    weight_out: int
    fee: int


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap through a resolved pool."""

    pool: PoolRef
    symbol_in: str
    symbol_out: str
    amount_in: int
    amount_out: int
    fee: int
