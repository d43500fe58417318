"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from bancor_pricing.config import PricingConfig
from bancor_pricing.fees import FEE_SCALE_BPS, FeeModel
from bancor_pricing.pools import LedgerSnapshot, PoolResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"
LEDGER_PATH = FIXTURES_DIR / "ledger.json"


def load_ledger_snapshot() -> LedgerSnapshot:
    """Load the shared ledger snapshot fixture."""
    return LedgerSnapshot.model_validate_json(LEDGER_PATH.read_text())


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def ledger() -> LedgerSnapshot:
    """Ledger snapshot with legacy and multi-converter pools."""
    return load_ledger_snapshot()


@pytest.fixture
def resolver(ledger: LedgerSnapshot) -> PoolResolver:
    """Resolver returning fees in ppm."""
    return PoolResolver(ledger)


@pytest.fixture
def bps_resolver(ledger: LedgerSnapshot) -> PoolResolver:
    """Resolver returning fees in basis points."""
    return PoolResolver(ledger, fee_scale=FEE_SCALE_BPS)


@pytest.fixture
def input_fee_bps_config() -> PricingConfig:
    """Fee taken from the input, expressed in basis points."""
    return PricingConfig(fee_model=FeeModel.INPUT, fee_scale=FEE_SCALE_BPS)
