#!/usr/bin/env python3
"""Entry point for the Vanilla swap log viewer.

Lists VanillaSwap pairs, loads the Swap history of a selected pool from
the DMC RPC node and prints it as a table, optionally exporting it to a
spreadsheet.
"""

import argparse
import asyncio
import logging
import os
import sys

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

from vanilla_swaplog.config import SwapLogConfig
from vanilla_swaplog.grid import ColumnFilter, SortSpec
from vanilla_swaplog.table import render_table
from vanilla_swaplog.view import SwapLogView


async def main() -> None:
    """Main entry point for the swap log viewer.

    Raises:
        SystemExit: On configuration or runtime errors
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Vanilla Swap Log - Browse VanillaSwap pool swaps on DMC",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  RPC_URL          - DMC JSON-RPC endpoint (default: https://dmc.mydefichain.com/mainnet)
  EXPLORER_URL     - Block explorer base URL for links
  GRAPH_URL        - VanillaSwap subgraph endpoint
  REQUEST_TIMEOUT  - RPC/HTTP timeout in seconds (default: 30)
  STORAGE_PATH     - Local storage file for column widths
  LOG_LEVEL        - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument(
        "--pair",
        help="Pool to load, as pool address or TOKEN0:TOKEN1"
    )
    parser.add_argument(
        "--list-pairs",
        action="store_true",
        default=False,
        help="List the selectable pairs and exit"
    )
    parser.add_argument(
        "--search",
        help="Only list pairs whose name contains this text"
    )
    parser.add_argument(
        "--sort",
        help="Sort column as FIELD[:asc|desc] (default: Block:desc)"
    )
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        help="Column filter FIELD:OPERATOR:VALUE, repeatable (operators: eq, neq, gt, gte, lt, lte, contains)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Print at most this many rows"
    )
    parser.add_argument(
        "--links",
        action="store_true",
        default=False,
        help="Show block and transaction explorer links instead of their values"
    )
    parser.add_argument(
        "--export",
        metavar="DIR",
        help="Export the loaded swaps to Vanilla_swap_log.xlsx in DIR"
    )
    parser.add_argument(
        "--resize",
        action="append",
        default=[],
        metavar="COLUMN:WIDTH",
        help="Store a column width, COLUMN being an index or field name, repeatable"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    args: argparse.Namespace = parser.parse_args()

    setup_logging(args.log_level)
    logger.info("=== Vanilla Swap Log Starting ===")

    try:
        config: SwapLogConfig = SwapLogConfig.from_env()
        config.log_config()

        sort = SortSpec.parse(args.sort) if args.sort else None
        filters = [ColumnFilter.parse(text) for text in args.filter]

        view = SwapLogView(config)
        await view.initialize()

        for text in args.resize:
            column, _, width = text.partition(':')
            view.resize_column(int(column) if column.isdigit() else column, int(width))

        if args.list_pairs or args.search:
            options = view.search_pairs(args.search) if args.search else view.pair_options
            for option in options:
                print(f"{option.text:<24} {option.value}")
            return

        view.select(args.pair, allow_address=True)
        await view.load()
        if not view.records:
            return

        rows = view.rows(filters=filters, sort=sort)
        if args.limit is not None:
            rows = rows[:args.limit]

        columns = view.grid.columns
        print(view.contract_label)
        print(render_table(columns, rows, links=args.links))

        if args.export:
            path = view.export(args.export, sort=sort)
            print(f"Exported to {path}")

    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        logger.error("Please check your arguments and environment variables:")
        logger.error("  - RPC_URL, EXPLORER_URL, GRAPH_URL: http(s) URLs")
        logger.error("  - REQUEST_TIMEOUT: positive integer")
        logger.error("  - --sort FIELD[:asc|desc], --filter FIELD:OPERATOR:VALUE, --resize COLUMN:WIDTH")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.info("\nReceived interrupt signal, shutting down...")
        sys.exit(0)

    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
