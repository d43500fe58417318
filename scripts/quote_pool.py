#!/usr/bin/env python3
"""Price a swap against a pool from a ledger snapshot.

Usage:
    # Exact input through the multi-converter EOSBNT pool
    python scripts/quote_pool.py tests/fixtures/ledger.json \\
        --pair bancorcnvrtr:EOSBNT --sell EOS --buy BNT --amount 10000

    # Exact output, legacy converter, input-side fee model
    python scripts/quote_pool.py tests/fixtures/ledger.json \\
        --pair bnt2eoscnvrt --sell BNT --buy EOS --amount 5000 \\
        --exact-output --fee-model input
"""

import argparse
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bancor_pricing.config import PricingConfig  # noqa: E402
from bancor_pricing.errors import PricingError  # noqa: E402
from bancor_pricing.fees import FeeModel  # noqa: E402
from bancor_pricing.log_setup import configure_logging  # noqa: E402
from bancor_pricing.pools import PoolResolutionError, PoolResolver, parse_pair_id  # noqa: E402

logger = structlog.get_logger()


def main() -> int:
    parser = argparse.ArgumentParser(description="Quote a swap against a Bancor pool")
    parser.add_argument("ledger", type=Path, help="Ledger snapshot JSON file")
    parser.add_argument(
        "--pair",
        required=True,
        help='Pair id: "bancorcnvrtr:<SYMBOL>" or a converter account name',
    )
    parser.add_argument("--sell", required=True, help="Symbol code of the input token")
    parser.add_argument("--buy", required=True, help="Symbol code of the output token")
    parser.add_argument(
        "--amount",
        type=int,
        required=True,
        help="Amount in the smallest unit (input, or output with --exact-output)",
    )
    parser.add_argument(
        "--exact-output",
        action="store_true",
        help="Treat --amount as the desired output",
    )
    parser.add_argument(
        "--fee-model",
        type=str,
        choices=[model.value for model in FeeModel],
        default=None,
        help="Override the fee model (default: BANCOR_FEE_MODEL or output_squared)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()
    configure_logging(verbose=args.verbose)

    if not args.ledger.exists():
        logger.error("ledger_not_found", path=str(args.ledger))
        print(f"Error: Ledger file not found: {args.ledger}")
        return 1

    config = PricingConfig.from_env()
    if args.fee_model is not None:
        config = PricingConfig(
            fee_model=FeeModel(args.fee_model),
            fee_scale=config.fee_scale,
            weight_scale=config.weight_scale,
            numeric_inverse=config.numeric_inverse,
        )

    try:
        ref = parse_pair_id(args.pair)
        resolver = PoolResolver.from_json(args.ledger.read_text(), fee_scale=config.fee_scale)
        if args.exact_output:
            result = resolver.simulate_swap_exact_output(
                ref, args.sell, args.buy, args.amount, config=config
            )
        else:
            result = resolver.simulate_swap(ref, args.sell, args.buy, args.amount, config=config)
        spot = resolver.quote(ref, args.sell, args.buy, result.amount_in, config=config)
    except ValidationError as e:
        logger.error("ledger_invalid", path=str(args.ledger), errors=e.error_count())
        print(f"Error: Invalid ledger file {args.ledger}: {e}")
        return 1
    except (PoolResolutionError, PricingError) as e:
        logger.error("quote_failed", pair=args.pair, error=str(e))
        print(f"Error: {e}")
        return 1

    print(f"Pool:       {result.pool}")
    print(f"Fee model:  {config.fee_model.value} (fee {result.fee}/{config.fee_scale})")
    print(f"Sell:       {result.amount_in} {result.symbol_in}")
    print(f"Buy:        {result.amount_out} {result.symbol_out}")
    print(f"Spot value: {spot} {result.symbol_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
