"""Integration tests: pair id string -> ledger snapshot -> engine.

Exercises the same path as scripts/quote_pool.py, including the script
itself, against the shared ledger fixture.
"""

import importlib.util
import sys
from pathlib import Path

import pytest
import structlog

from bancor_pricing import get_amount_in, get_amount_out
from bancor_pricing.config import PricingConfig
from bancor_pricing.fees import FEE_SCALE_BPS, FeeModel
from bancor_pricing.pools import PoolResolver, parse_pair_id

SCRIPT_PATH = Path(__file__).parent.parent.parent / "scripts" / "quote_pool.py"

PAIRS = [
    ("bnt2eoscnvrt", "EOS", "BNT"),
    ("bancorc11222", "EOS", "USDT"),
    ("bancorcnvrtr:EOSBNT", "EOS", "BNT"),
    ("bancorcnvrtr:USDEOS", "EOS", "USDT"),
]

CONFIGS = [
    pytest.param(PricingConfig(), id="output_squared"),
    pytest.param(PricingConfig(fee_model=FeeModel.OUTPUT), id="output"),
    pytest.param(PricingConfig(fee_model=FeeModel.INPUT, fee_scale=FEE_SCALE_BPS), id="input_bps"),
]


@pytest.fixture
def quote_pool_script():
    """Load scripts/quote_pool.py as a module."""
    spec = importlib.util.spec_from_file_location("quote_pool", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module
    structlog.reset_defaults()


class TestResolveAndPrice:
    """Every fixture pool prices consistently in both directions."""

    @pytest.mark.parametrize("config", CONFIGS)
    @pytest.mark.parametrize("pair_id,symbol_a,symbol_b", PAIRS)
    def test_round_trip_both_directions(self, ledger, config, pair_id, symbol_a, symbol_b):
        resolver = PoolResolver(ledger, fee_scale=config.fee_scale)
        ref = parse_pair_id(pair_id)

        for symbol_in, symbol_out in [(symbol_a, symbol_b), (symbol_b, symbol_a)]:
            sold = resolver.simulate_swap(ref, symbol_in, symbol_out, 10**9, config=config)
            assert sold.amount_out > 0

            bought = resolver.simulate_swap_exact_output(
                ref, symbol_in, symbol_out, sold.amount_out, config=config
            )
            assert bought.amount_out >= sold.amount_out
            assert bought.amount_in <= sold.amount_in + 1

    @pytest.mark.parametrize("pair_id,symbol_a,symbol_b", PAIRS)
    def test_resolver_matches_engine(self, resolver, pair_id, symbol_a, symbol_b):
        """The adapter adds nothing beyond looking up the engine arguments."""
        ref = parse_pair_id(pair_id)
        params = resolver.resolve(ref, symbol_a, symbol_b)
        args = (params.reserve_in, params.weight_in, params.reserve_out, params.weight_out)

        assert resolver.simulate_swap(ref, symbol_a, symbol_b, 50_000).amount_out == (
            get_amount_out(50_000, *args, params.fee)
        )
        assert resolver.simulate_swap_exact_output(ref, symbol_a, symbol_b, 50_000).amount_in == (
            get_amount_in(50_000, *args, params.fee)
        )

    def test_spot_quote_exceeds_executed_price(self, resolver):
        """Fees and slippage put every executed swap below the spot quote."""
        ref = parse_pair_id("bancorcnvrtr:EOSBNT")
        executed = resolver.simulate_swap(ref, "EOS", "BNT", 10_000)
        assert executed.amount_out < resolver.quote(ref, "EOS", "BNT", 10_000)


class TestQuotePoolScript:
    """Tests for the developer script."""

    def test_exact_input(self, quote_pool_script, fixtures_dir, monkeypatch, capsys):
        monkeypatch.delenv("BANCOR_FEE_MODEL", raising=False)
        monkeypatch.delenv("BANCOR_FEE_SCALE", raising=False)
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "quote_pool.py",
                str(fixtures_dir / "ledger.json"),
                "--pair",
                "bancorcnvrtr:EOSBNT",
                "--sell",
                "EOS",
                "--buy",
                "BNT",
                "--amount",
                "10000",
            ],
        )
        assert quote_pool_script.main() == 0
        out = capsys.readouterr().out
        assert "bancorcnvrtr:EOSBNT" in out
        assert "27300 BNT" in out
        assert "27410 BNT" in out

    def test_exact_output_with_fee_model(
        self, quote_pool_script, fixtures_dir, monkeypatch, capsys
    ):
        monkeypatch.setenv("BANCOR_FEE_SCALE", str(FEE_SCALE_BPS))
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "quote_pool.py",
                str(fixtures_dir / "ledger.json"),
                "--pair",
                "bancorc11222",
                "--sell",
                "EOS",
                "--buy",
                "USDT",
                "--amount",
                "39876",
                "--exact-output",
                "--fee-model",
                "input",
            ],
        )
        assert quote_pool_script.main() == 0
        out = capsys.readouterr().out
        assert "10000 EOS" in out
        assert "39876 USDT" in out

    def test_unknown_pool(self, quote_pool_script, fixtures_dir, monkeypatch, capsys):
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "quote_pool.py",
                str(fixtures_dir / "ledger.json"),
                "--pair",
                "bancorcnvrtr:NOPE",
                "--sell",
                "EOS",
                "--buy",
                "BNT",
                "--amount",
                "1",
            ],
        )
        assert quote_pool_script.main() == 1
        assert "Error:" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "content",
        [
            pytest.param("{not json", id="corrupt"),
            pytest.param('{"balances": [{"contract": "eosio.token"}]}', id="missing_fields"),
            pytest.param(
                '{"multi": {"bancorcnvrtr": {"converters": '
                '[{"currency": "EOSBNT", "reserve_weights": [{"k": "EOS", "v": 1}]}]}}}',
                id="malformed_key_value",
            ),
        ],
    )
    def test_invalid_ledger(self, quote_pool_script, tmp_path, monkeypatch, capsys, content):
        ledger_path = tmp_path / "ledger.json"
        ledger_path.write_text(content)
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "quote_pool.py",
                str(ledger_path),
                "--pair",
                "bancorcnvrtr:EOSBNT",
                "--sell",
                "EOS",
                "--buy",
                "BNT",
                "--amount",
                "1",
            ],
        )
        assert quote_pool_script.main() == 1
        assert "Error: Invalid ledger file" in capsys.readouterr().out

    def test_missing_ledger(self, quote_pool_script, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "quote_pool.py",
                str(tmp_path / "missing.json"),
                "--pair",
                "bnt2eoscnvrt",
                "--sell",
                "EOS",
                "--buy",
                "BNT",
                "--amount",
                "1",
            ],
        )
        assert quote_pool_script.main() == 1
        assert "Ledger file not found" in capsys.readouterr().out
