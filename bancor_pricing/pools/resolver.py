"""Resolve pool references into pricing engine inputs.

PoolResolver reads a LedgerSnapshot and hands the engine plain integers:
reserve balances, weights and a fee already converted to the engine's fee
scale. The engine never sees accounts, symbols or tables.
"""

from __future__ import annotations

import structlog

from bancor_pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig
from bancor_pricing.fees import FEE_SCALE_PPM, normalize_fee
from bancor_pricing.pricing import get_amount_in, get_amount_out, quote

from .errors import PoolNotFound, ReserveNotFound
from .ledger import ConverterRow, LedgerSnapshot, LegacyConverter
from .types import LegacyPoolRef, MultiPoolRef, PoolRef, Reserve, SwapParams, SwapQuote

logger = structlog.get_logger()


class PoolResolver:
    """Maps PoolRef values to reserves, weights and fees.

    Args:
        snapshot: Ledger tables to read from
        fee_scale: Scale the returned fees are expressed in (default: ppm).
            Must match the PricingConfig.fee_scale used for pricing.
    """

    def __init__(self, snapshot: LedgerSnapshot, fee_scale: int = FEE_SCALE_PPM) -> None:
        if fee_scale <= 0:
            raise ValueError(f"fee_scale must be positive, got {fee_scale}")
        self._snapshot = snapshot
        self._fee_scale = fee_scale

    @classmethod
    def from_json(cls, data: str | bytes, fee_scale: int = FEE_SCALE_PPM) -> PoolResolver:
        """Build a resolver from a JSON ledger snapshot."""
        return cls(LedgerSnapshot.model_validate_json(data), fee_scale=fee_scale)

    @property
    def fee_scale(self) -> int:
        return self._fee_scale

    # -------------------------------------------------------------------------
    # Table lookups
    # -------------------------------------------------------------------------

    def _legacy_converter(self, ref: LegacyPoolRef) -> LegacyConverter:
        converter = self._snapshot.legacy.get(ref.code)
        if converter is None:
            logger.debug("legacy_converter_not_found", pool=str(ref))
            raise PoolNotFound(f"Legacy converter {ref.code} not found")
        return converter

    def _converter_row(self, ref: MultiPoolRef) -> tuple[ConverterRow, int]:
        contract = self._snapshot.multi.get(ref.code)
        row = contract.get_row(ref.currency) if contract is not None else None
        if contract is None or row is None:
            logger.debug("converter_row_not_found", pool=str(ref))
            raise PoolNotFound(f"Currency symbol {ref.currency} does not exist in {ref.code}")
        return row, contract.fee_scale

    # -------------------------------------------------------------------------
    # Fee and reserves
    # -------------------------------------------------------------------------

    def get_fee(self, ref: PoolRef) -> int:
        """Total conversion fee of a pool on the resolver's fee scale.

        Raises:
            PoolNotFound: If the pool or its settings do not exist
        """
        if isinstance(ref, MultiPoolRef):
            row, fee_scale = self._converter_row(ref)
            raw_fee = row.fee
        else:
            converter = self._legacy_converter(ref)
            if converter.settings is None:
                logger.warning("legacy_settings_missing", pool=str(ref))
                raise PoolNotFound(f"Settings of legacy converter {ref.code} do not exist")
            raw_fee, fee_scale = converter.settings.fee, converter.fee_scale

        fee = normalize_fee(raw_fee, fee_scale, self._fee_scale)
        if fee_scale != self._fee_scale:
            logger.debug(
                "fee_normalized",
                pool=str(ref),
                raw_fee=raw_fee,
                from_scale=fee_scale,
                to_scale=self._fee_scale,
                fee=fee,
            )
        return fee

    def _legacy_reserve(self, ref: LegacyPoolRef, symbol: str) -> Reserve:
        converter = self._legacy_converter(ref)
        for row in converter.reserves:
            if row.currency.symbol != symbol:
                continue
            balance = self._snapshot.token_balance(row.contract, ref.code, symbol)
            if balance is None:
                logger.warning(
                    "legacy_reserve_balance_missing",
                    pool=str(ref),
                    contract=row.contract,
                    symbol=symbol,
                )
                raise ReserveNotFound(
                    f"{ref.code} holds no {symbol} balance in {row.contract}"
                )
            return Reserve(
                contract=row.contract, symbol=symbol, balance=balance.amount, weight=row.ratio
            )

        raise ReserveNotFound(f"Reserve {symbol} does not exist in legacy converter {ref.code}")

    def _multi_reserve(self, ref: MultiPoolRef, symbol: str) -> Reserve:
        row, _ = self._converter_row(ref)
        if symbol not in row.reserve_balances:
            raise ReserveNotFound(f"Reserve balance symbol {symbol} does not exist in {ref}")
        if symbol not in row.reserve_weights:
            raise ReserveNotFound(f"Reserve weights symbol {symbol} does not exist in {ref}")

        balance = row.reserve_balances[symbol]
        return Reserve(
            contract=balance.contract,
            symbol=symbol,
            balance=balance.quantity.amount,
            weight=row.reserve_weights[symbol],
        )

    def get_reserve(self, ref: PoolRef, symbol: str) -> Reserve:
        """Reserve of one token in a pool.

        Raises:
            PoolNotFound: If the pool does not exist
            ReserveNotFound: If the pool has no balance or weight for symbol
        """
        if isinstance(ref, MultiPoolRef):
            return self._multi_reserve(ref, symbol)
        return self._legacy_reserve(ref, symbol)

    def get_reserves(self, ref: PoolRef) -> list[Reserve]:
        """All reserves of a pool, in table order."""
        if isinstance(ref, MultiPoolRef):
            row, _ = self._converter_row(ref)
            return [self._multi_reserve(ref, symbol) for symbol in row.reserve_balances]
        converter = self._legacy_converter(ref)
        return [self._legacy_reserve(ref, row.currency.symbol) for row in converter.reserves]

    def resolve(self, ref: PoolRef, symbol_in: str, symbol_out: str) -> SwapParams:
        """Engine inputs for swapping symbol_in into symbol_out.

        Raises:
            PoolNotFound: If the pool does not exist
            ReserveNotFound: If either reserve is missing or both symbols are equal
        """
        if symbol_in == symbol_out:
            raise ReserveNotFound(f"Cannot swap {symbol_in} into itself")

        reserve_in = self.get_reserve(ref, symbol_in)
        reserve_out = self.get_reserve(ref, symbol_out)
        params = SwapParams(
            reserve_in=reserve_in.balance,
            weight_in=reserve_in.weight,
            reserve_out=reserve_out.balance,
            weight_out=reserve_out.weight,
            fee=self.get_fee(ref),
        )
        logger.debug(
            "pool_resolved",
            pool=str(ref),
            symbol_in=symbol_in,
            symbol_out=symbol_out,
            reserve_in=params.reserve_in,
            reserve_out=params.reserve_out,
            fee=params.fee,
        )
        return params

    # -------------------------------------------------------------------------
    # Pricing through a resolved pool
    # -------------------------------------------------------------------------

    def _check_config(self, config: PricingConfig) -> None:
        if config.fee_scale != self._fee_scale:
            raise ValueError(
                f"PricingConfig fee_scale {config.fee_scale} does not match "
                f"resolver fee_scale {self._fee_scale}"
            )

    def simulate_swap(
        self,
        ref: PoolRef,
        symbol_in: str,
        symbol_out: str,
        amount_in: int,
        config: PricingConfig = DEFAULT_PRICING_CONFIG,
    ) -> SwapQuote:
        """Price a swap with exact input."""
        self._check_config(config)
        params = self.resolve(ref, symbol_in, symbol_out)
        amount_out = get_amount_out(
            amount_in,
            params.reserve_in,
            params.weight_in,
            params.reserve_out,
            params.weight_out,
            params.fee,
            config=config,
        )
        return SwapQuote(
            pool=ref,
            symbol_in=symbol_in,
            symbol_out=symbol_out,
            amount_in=amount_in,
            amount_out=amount_out,
            fee=params.fee,
        )

    def simulate_swap_exact_output(
        self,
        ref: PoolRef,
        symbol_in: str,
        symbol_out: str,
        amount_out: int,
        config: PricingConfig = DEFAULT_PRICING_CONFIG,
    ) -> SwapQuote:
        """Price a swap with exact output.

        The returned amount_out is the forward-simulated output for the
        required input, which may exceed the requested amount by rounding.
        """
        self._check_config(config)
        params = self.resolve(ref, symbol_in, symbol_out)
        amount_in = get_amount_in(
            amount_out,
            params.reserve_in,
            params.weight_in,
            params.reserve_out,
            params.weight_out,
            params.fee,
            config=config,
        )
        actual_output = get_amount_out(
            amount_in,
            params.reserve_in,
            params.weight_in,
            params.reserve_out,
            params.weight_out,
            params.fee,
            config=config,
        )
        return SwapQuote(
            pool=ref,
            symbol_in=symbol_in,
            symbol_out=symbol_out,
            amount_in=amount_in,
            amount_out=actual_output,
            fee=params.fee,
        )

    def quote(
        self,
        ref: PoolRef,
        symbol_a: str,
        symbol_b: str,
        amount_a: int,
        config: PricingConfig = DEFAULT_PRICING_CONFIG,
    ) -> int:
        """Spot value of amount_a of symbol_a in units of symbol_b."""
        reserve_a = self.get_reserve(ref, symbol_a)
        reserve_b = self.get_reserve(ref, symbol_b)
        return quote(
            amount_a,
            reserve_a.balance,
            reserve_a.weight,
            reserve_b.balance,
            reserve_b.weight,
            config=config,
        )
