"""Pydantic models for converter ledger tables.

A LedgerSnapshot captures the rows the resolver needs from three historical
registry layouts:

- legacy converters: a ``settings`` singleton and a ``reserves`` table per
  converter account, with balances held by the token contracts
- the unified ``converter.v2`` table: one row per pool token symbol, holding
  weights, balances and fee inline
- token balances: ``accounts`` rows of token contracts, keyed by owner

Maps serialized by the chain ABI as ``[{"key": k, "value": v}]`` lists are
accepted as well as plain JSON objects.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from bancor_pricing.fees import FEE_SCALE_PPM

# "58647.1775 EOS" -> amount, decimals, symbol code
_ASSET_RE = re.compile(r"^(\d+)(?:\.(\d+))? ([A-Z]{1,7})$")
# "4,EOSBNT" -> decimals, symbol code
_SYMBOL_RE = re.compile(r"^(\d+),([A-Z]{1,7})$")


class Asset(BaseModel):
    """Token quantity in its smallest unit.

    Attributes:
        amount: Integer amount (58647.1775 EOS is 586471775)
        precision: Number of decimals of the symbol
        symbol: Symbol code
    """

    model_config = ConfigDict(frozen=True)

    amount: int = Field(ge=0)
    precision: int = Field(ge=0, le=18)
    symbol: str

    @classmethod
    def from_string(cls, text: str) -> Asset:
        """Parse an asset string such as "58647.1775 EOS".

        Raises:
            ValueError: If the string is not a non-negative asset
        """
        match = _ASSET_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid asset string: {text!r}")
        whole, fraction, symbol = match.groups()
        fraction = fraction or ""
        return cls(amount=int(whole + fraction), precision=len(fraction), symbol=symbol)

    def __str__(self) -> str:
        if self.precision == 0:
            return f"{self.amount} {self.symbol}"
        digits = str(self.amount).rjust(self.precision + 1, "0")
        return f"{digits[: -self.precision]}.{digits[-self.precision :]} {self.symbol}"


def _coerce_asset(value: Any) -> Any:
    if isinstance(value, str):
        return Asset.from_string(value)
    return value


def _coerce_symbol_code(value: Any) -> Any:
    """Accept "4,EOSBNT" or "EOSBNT", keep the code."""
    if isinstance(value, str):
        match = _SYMBOL_RE.match(value)
        if match is not None:
            return match.group(2)
    return value


def _coerce_key_value_map(value: Any) -> Any:
    if isinstance(value, list):
        entries = {}
        for item in value:
            if not isinstance(item, dict) or "key" not in item or "value" not in item:
                raise ValueError(f"Invalid key/value entry: {item!r}")
            entries[item["key"]] = item["value"]
        return entries
    return value


AssetField = Annotated[Asset, BeforeValidator(_coerce_asset)]
SymbolCode = Annotated[str, BeforeValidator(_coerce_symbol_code), Field(pattern=r"^[A-Z]{1,7}$")]


# =============================================================================
# Legacy converters
# =============================================================================


class LegacySettings(BaseModel):
    """``settings`` singleton of a legacy converter account."""

    smart_contract: str = ""
    smart_currency: AssetField | None = None
    smart_enabled: bool = True
    enabled: bool = True
    network: str = ""
    require_balance: bool = False
    max_fee: int = Field(default=0, ge=0)
    fee: int = Field(default=0, ge=0)


class LegacyReserveRow(BaseModel):
    """Row of the ``reserves`` table of a legacy converter account."""

    contract: str
    currency: AssetField
    ratio: int = Field(ge=0)
    p_enabled: bool = True


class LegacyConverter(BaseModel):
    """Tables of one legacy converter account.

    Attributes:
        settings: Settings singleton, None when it was never initialized
        reserves: Reserve rows, one per token contract
        fee_scale: Denominator of settings.fee
    """

    settings: LegacySettings | None = None
    reserves: list[LegacyReserveRow] = Field(default_factory=list)
    fee_scale: int = Field(default=FEE_SCALE_PPM, gt=0)


# =============================================================================
# Multi converter (converter.v2)
# =============================================================================


class ExtendedAsset(BaseModel):
    """Asset paired with its token contract."""

    quantity: AssetField
    contract: str


class MultiSettings(BaseModel):
    """``settings`` singleton of the multi-converter contract."""

    max_fee: int = Field(default=0, ge=0)
    multi_token: str = ""
    network: str = ""
    staking: str = ""


class ConverterRow(BaseModel):
    """Row of the ``converter.v2`` table, keyed by pool token symbol code."""

    currency: SymbolCode
    owner: str = ""
    fee: int = Field(default=0, ge=0)
    reserve_weights: Annotated[dict[str, int], BeforeValidator(_coerce_key_value_map)] = Field(
        default_factory=dict
    )
    reserve_balances: Annotated[
        dict[str, ExtendedAsset], BeforeValidator(_coerce_key_value_map)
    ] = Field(default_factory=dict)
    protocol_features: Annotated[dict[str, bool], BeforeValidator(_coerce_key_value_map)] = Field(
        default_factory=dict
    )
    metadata_json: Annotated[dict[str, str], BeforeValidator(_coerce_key_value_map)] = Field(
        default_factory=dict
    )


class MultiConverter(BaseModel):
    """Tables of one multi-converter contract account."""

    settings: MultiSettings | None = None
    converters: list[ConverterRow] = Field(default_factory=list)
    fee_scale: int = Field(default=FEE_SCALE_PPM, gt=0)

    def get_row(self, currency: str) -> ConverterRow | None:
        for row in self.converters:
            if row.currency == currency:
                return row
        return None


# =============================================================================
# Token balances and snapshot
# =============================================================================


class TokenBalance(BaseModel):
    """Balance row of a token contract's ``accounts`` table."""

    contract: str
    owner: str
    balance: AssetField


class LedgerSnapshot(BaseModel):
    """Read-only view of the converter tables at one block.

    Attributes:
        legacy: Legacy converters keyed by converter account
        multi: Multi-converter contracts keyed by contract account
        balances: Token balances of converter accounts
    """

    legacy: dict[str, LegacyConverter] = Field(default_factory=dict)
    multi: dict[str, MultiConverter] = Field(default_factory=dict)
    balances: list[TokenBalance] = Field(default_factory=list)

    def token_balance(self, contract: str, owner: str, symbol: str) -> Asset | None:
        """Balance of `owner` in token `contract` for `symbol`, if any."""
        for row in self.balances:
            if row.contract == contract and row.owner == owner and row.balance.symbol == symbol:
                return row.balance
        return None
