#!/usr/bin/env python3
"""Entry point for the Solana slot locator.

Finds the newest Solana block produced at or before a given timestamp and
prints its slot, hash, height and time.
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv


# Configure logging before any other imports create loggers
def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

# Get logger for this module
logger = logging.getLogger(__name__)

from slot_locator.config import LocatorConfig
from slot_locator.errors import (
    InvalidInput,
    NoTimestampResolved,
    OracleUnavailable,
    SearchTimeout,
    SlotNotFound,
)
from slot_locator.models import SearchResult
from slot_locator.reporter import format_result
from slot_locator.slot_locator import SlotLocator
from slot_locator.timestamps import ensure_not_future, parse_timestamp
from slot_locator.utils.rpc_utility import SolanaRpcOracle


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Find the latest Solana block at or before a given timestamp",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  HELIUS_API_KEY   - API key (overridden by --api-key)
  SOLANA_RPC_URL   - JSON-RPC endpoint (default: https://mainnet.helius-rpc.com)
  REQUEST_TIMEOUT  - Per-request timeout in seconds (default: 10)
  PROBE_LIMIT      - Slots probed after a skipped slot (default: 20)
  FINAL_WINDOW     - Slots scanned around the converged window (default: 5)
  SEARCH_TIMEOUT   - Whole-search deadline in seconds, 0 for none (default: 0)
  LOG_LEVEL        - Logging level (can be overridden with --log-level)

Examples:
  main.py --timestamp 1750921805
  main.py -t 2025-06-26T10:21:08Z -k your-api-key -v
        """
    )
    parser.add_argument(
        "-t", "--timestamp",
        required=True,
        help="Unix timestamp in seconds (1750921805) or ISO 8601 (2025-06-26T10:21:08Z)"
    )
    parser.add_argument(
        "-k", "--api-key",
        default=None,
        help="Helius API key (or set HELIUS_API_KEY)"
    )
    parser.add_argument(
        "--rpc-url",
        default=None,
        help="JSON-RPC endpoint (or set SOLANA_RPC_URL)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show performance metrics and an explorer link"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    return parser


async def run_search(config: LocatorConfig, target_timestamp: int) -> SearchResult:
    """Run one search against the configured RPC provider."""
    async with SolanaRpcOracle(
        config.rpc.rpc_url,
        api_key=config.rpc.api_key,
        timeout=config.rpc.request_timeout
    ) as oracle:
        locator = SlotLocator(oracle, config.search)
        return await locator.locate(target_timestamp)


async def main(argv: list[str] | None = None) -> None:
    """Main entry point for the slot locator.

    Parses arguments, loads configuration from the environment, runs the
    search and prints the result.

    Raises:
        SystemExit: 2 on invalid input or configuration, 1 on search failures
    """
    load_dotenv()

    args: argparse.Namespace = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        target_timestamp = ensure_not_future(parse_timestamp(args.timestamp))
    except InvalidInput as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(2)

    try:
        config: LocatorConfig = LocatorConfig.from_env(api_key=args.api_key, rpc_url=args.rpc_url)
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        logger.error("Please check your environment variables:")
        logger.error("  - SOLANA_RPC_URL: http(s) JSON-RPC endpoint")
        logger.error("  - REQUEST_TIMEOUT, PROBE_LIMIT, FINAL_WINDOW, SEARCH_TIMEOUT: numbers")
        sys.exit(2)

    config.log_config()
    if not config.rpc.api_key:
        logger.warning("No API key provided; set HELIUS_API_KEY or pass --api-key")

    print(f"🔍 Searching for block with timestamp {target_timestamp} or right before it...")
    if args.verbose:
        print(f"📊 Using RPC endpoint: {config.rpc.rpc_url}")

    try:
        result = await run_search(config, target_timestamp)

    except SlotNotFound as e:
        logger.error(f"Final block lookup failed: {e}")
        sys.exit(1)

    except NoTimestampResolved as e:
        logger.error(f"Search failed: {e}")
        sys.exit(1)

    except SearchTimeout as e:
        logger.error(f"Search timed out: {e}")
        sys.exit(1)

    except OracleUnavailable as e:
        logger.error(f"RPC Error: {e}")
        sys.exit(1)

    for line in format_result(result, verbose=args.verbose):
        print(line)


def run() -> None:
    """Run main() on a fresh event loop, exiting with 130 on Ctrl-C."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, stopping search...")
        sys.exit(130)


if __name__ == "__main__":
    run()
