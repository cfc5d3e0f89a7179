#!/usr/bin/env python3
"""Peg Ratio Oracle.

Reads a derivative asset leg and a reference asset leg from on-chain feeds or
rate providers and reports their fixed-point peg ratio. A ratio of 0 means
no trustworthy ratio is available right now.

Configure with CLI arguments or env vars. See the --help epilog.
"""

import argparse
import asyncio
import logging
import os
import sys

from .src.ContractUtility import ContractUtility
from .src.errors import ConfigurationError
from .src.OracleConfig import LegConfig, OracleConfig, build_oracle
from .src.PegOracle import PegOracle
from .src.sources import get_available_sources

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_optional_int(value: str | None) -> int | None:
    """Parse an optional integer setting.

    Empty strings and "none" mean the setting is not configured.

    :param value: Raw setting value.
    :returns: Parsed integer, or None.
    :raises ValueError: If value is not an integer.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "none":
        return None
    return int(value)


def parse_bool(value: str | None) -> bool:
    """Parse a boolean environment setting like "1", "true" or "yes"."""
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def format_ratio(ratio: int, decimals: int) -> str:
    """Format a fixed-point ratio for logging.

    :param ratio: Fixed-point ratio.
    :param decimals: Decimal precision of the ratio.
    :returns: Decimal string, e.g. "0.990000000000000000".
    """
    if decimals == 0:
        return str(ratio)
    whole, fraction = divmod(ratio, 10**decimals)
    return f"{whole}.{fraction:0{decimals}d}"


def report(oracle: PegOracle) -> int:
    """Evaluate the oracle once and log the outcome.

    :param oracle: Oracle to evaluate.
    :returns: The evaluated ratio (0 if unavailable).
    """
    result = oracle.evaluate_result()
    if result.available:
        logger.info(
            f"{oracle.description}: ratio={result.answer} "
            f"({format_ratio(result.answer, oracle.output_scale())})"
        )
    else:
        logger.warning(f"{oracle.description}: ratio unavailable ({result.reason})")
    return result.answer


async def watch(oracle: PegOracle, period: int) -> None:
    """Evaluate the oracle every period seconds until interrupted.

    :param oracle: Oracle to evaluate.
    :param period: Seconds between evaluations.
    """
    logger.info(f"Watching {oracle.description} every {period}s")
    while True:
        report(oracle)
        await asyncio.sleep(period)


def main() -> None:
    """Main entry point for the Peg Ratio Oracle CLI."""
    available_sources = get_available_sources()

    parser = argparse.ArgumentParser(
        description="Peg Ratio Oracle: derivative/reference asset peg ratio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available leg kinds:
  {', '.join(available_sources)}

Examples:
  # Two price feeds, both with a 24h staleness threshold
  python -m pegratio.main --network https://eth.llamarpc.com \\
      --numerator feed:0x86392dC19c0b719886221c78AB11eb8Cf5c52812 \\
      --denominator feed:0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419 \\
      --leg-decimals 8 --numerator-staleness 86400 --denominator-staleness 3600

  # Feed against a vault rate, gated by an L2 sequencer uptime feed
  python -m pegratio.main --network https://arb1.arbitrum.io/rpc \\
      --numerator convertToAssets:0x... --denominator feed:0x... \\
      --sequencer-feed 0xFdB631F5EE196F0ed6FAa767959853A9F217697D \\
      --grace-period 3600 --watch-period 60

Environment variables (CLI args take precedence):
  NETWORK, RPC_URL, NUMERATOR, DENOMINATOR, LEG_DECIMALS, OUTPUT_DECIMALS,
  NUMERATOR_STALENESS, DENOMINATOR_STALENESS, NUMERATOR_ROUND_CHECK,
  DENOMINATOR_ROUND_CHECK, SEQUENCER_FEED, GRACE_PERIOD, DESCRIPTION,
  WATCH_PERIOD
""",
    )

    parser.add_argument(
        "--network",
        type=str,
        help="Network name (sapphire, sapphire-testnet, sapphire-localnet) or RPC URL",
        default=os.environ.get("NETWORK") or "sapphire-localnet",
    )

    parser.add_argument(
        "--numerator",
        type=str,
        help="Derivative asset leg as kind:address (e.g., feed:0xabc...)",
        default=os.environ.get("NUMERATOR"),
    )

    parser.add_argument(
        "--denominator",
        type=str,
        help="Reference asset leg as kind:address (e.g., getRate:0xabc...)",
        default=os.environ.get("DENOMINATOR"),
    )

    parser.add_argument(
        "--leg-decimals",
        dest="leg_decimals",
        type=int,
        help="Decimal scale both legs must report (default: 18)",
        default=int(os.environ.get("LEG_DECIMALS") or "18"),
    )

    parser.add_argument(
        "--output-decimals",
        dest="output_decimals",
        type=int,
        help="Decimal precision of the ratio (default: 18)",
        default=int(os.environ.get("OUTPUT_DECIMALS") or "18"),
    )

    parser.add_argument(
        "--numerator-staleness",
        dest="numerator_staleness",
        type=parse_optional_int,
        help="Max age of numerator readings in seconds (default: no check)",
        default=parse_optional_int(os.environ.get("NUMERATOR_STALENESS")),
    )

    parser.add_argument(
        "--denominator-staleness",
        dest="denominator_staleness",
        type=parse_optional_int,
        help="Max age of denominator readings in seconds (default: no check)",
        default=parse_optional_int(os.environ.get("DENOMINATOR_STALENESS")),
    )

    parser.add_argument(
        "--numerator-round-check",
        dest="numerator_round_check",
        action="store_true",
        help="Reject numerator answers carried over from an older round",
        default=parse_bool(os.environ.get("NUMERATOR_ROUND_CHECK")),
    )

    parser.add_argument(
        "--denominator-round-check",
        dest="denominator_round_check",
        action="store_true",
        help="Reject denominator answers carried over from an older round",
        default=parse_bool(os.environ.get("DENOMINATOR_ROUND_CHECK")),
    )

    parser.add_argument(
        "--sequencer-feed",
        dest="sequencer_feed",
        type=str,
        help="Address of the L2 sequencer uptime feed (requires --grace-period)",
        default=os.environ.get("SEQUENCER_FEED") or None,
    )

    parser.add_argument(
        "--grace-period",
        dest="grace_period",
        type=parse_optional_int,
        help="Seconds after a sequencer restart before readings count",
        default=parse_optional_int(os.environ.get("GRACE_PERIOD")),
    )

    parser.add_argument(
        "--description",
        type=str,
        help="Label used in logs (e.g., wstETH/stETH)",
        default=os.environ.get("DESCRIPTION") or "",
    )

    parser.add_argument(
        "--watch-period",
        dest="watch_period",
        type=int,
        help="Seconds between evaluations; 0 evaluates once and exits (default: 0)",
        default=int(os.environ.get("WATCH_PERIOD") or "0"),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate arguments
    if not args.numerator or not args.denominator:
        parser.error("Both --numerator and --denominator legs must be specified")

    if args.watch_period < 0:
        parser.error("--watch-period must not be negative")

    try:
        numerator = LegConfig.from_string(
            args.numerator,
            expected_decimals=args.leg_decimals,
            staleness_threshold=args.numerator_staleness,
            require_current_round=args.numerator_round_check,
        )
        denominator = LegConfig.from_string(
            args.denominator,
            expected_decimals=args.leg_decimals,
            staleness_threshold=args.denominator_staleness,
            require_current_round=args.denominator_round_check,
        )
    except ValueError as e:
        parser.error(str(e))

    config = OracleConfig(
        numerator=numerator,
        denominator=denominator,
        output_decimals=args.output_decimals,
        sequencer_feed=args.sequencer_feed,
        grace_period=args.grace_period,
        description=args.description,
    )

    # Log configuration
    logger.info("=" * 60)
    logger.info("Peg Ratio Oracle")
    logger.info("=" * 60)
    logger.info(f"Network:           {args.network}")
    logger.info(f"Numerator:         {numerator.kind}:{numerator.address}")
    logger.info(f"Denominator:       {denominator.kind}:{denominator.address}")
    logger.info(f"Leg Decimals:      {args.leg_decimals}")
    logger.info(f"Output Decimals:   {args.output_decimals}")
    num_staleness = "off" if args.numerator_staleness is None else args.numerator_staleness
    den_staleness = "off" if args.denominator_staleness is None else args.denominator_staleness
    logger.info(f"Staleness:         numerator={num_staleness}, denominator={den_staleness}")
    if args.sequencer_feed:
        logger.info(f"Sequencer Feed:    {args.sequencer_feed} (grace {args.grace_period}s)")
    logger.info("=" * 60)

    try:
        oracle = build_oracle(ContractUtility(args.network), config)
        if args.watch_period:
            asyncio.run(watch(oracle, args.watch_period))
        else:
            report(oracle)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
