# main.py

"""Entry point for the bargainer deal aggregator CLI."""

import argparse
import asyncio
import logging
import sys
from typing import Any

from bargainer.config.logging_config import setup_logging
from bargainer.config.settings import Settings

logger = logging.getLogger("bargainer.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    known_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="bargainer",
        description="Search, rank and compare deals from many sources.",
        epilog=f"Known sources: {known_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query.",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated provider names (default: all).",
    )
    parser.add_argument("--category", default=None)
    parser.add_argument(
        "--min-price", type=float, default=None, dest="min_price",
    )
    parser.add_argument(
        "--max-price", type=float, default=None, dest="max_price",
    )
    parser.add_argument(
        "--min-rating", type=float, default=None, dest="min_rating",
    )
    parser.add_argument(
        "--store", default=None, help="Store substring filter.",
    )
    parser.add_argument(
        "--sort-by",
        choices=["price", "rating", "popularity", "date"],
        default=None,
        dest="sort_by",
    )
    parser.add_argument(
        "--sort-order",
        choices=["asc", "desc"],
        default=None,
        dest="sort_order",
    )
    parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=Settings.DEFAULT_LIMIT,
        help=f"Maximum results (1-{Settings.MAX_LIMIT}).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--top",
        action="store_true",
        default=False,
        help="Show top/trending deals instead of searching.",
    )
    parser.add_argument(
        "--details",
        default=None,
        metavar="DEAL_ID",
        help="Show one deal by id.",
    )
    parser.add_argument(
        "--source",
        default=None,
        help="Provider to ask for --details.",
    )
    parser.add_argument(
        "--list-sources",
        action="store_true",
        default=False,
        dest="list_sources",
        help="List configured providers.",
    )
    parser.add_argument(
        "--tool",
        default=None,
        help="Call a tool by name and print its raw result.",
    )
    parser.add_argument(
        "--arguments",
        default=None,
        help="JSON object of arguments for --tool.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all providers.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO messages to stderr as well as warnings.",
    )
    parser.add_argument(
        "--quiet-source",
        action="append",
        default=[],
        metavar="ID",
        help="Only echo errors from this provider to stderr (repeatable).",
    )
    return parser


def _search_filters(args: argparse.Namespace) -> dict[str, Any]:
    """Search options the user actually set."""
    options = {
        "category": args.category,
        "min_price": args.min_price,
        "max_price": args.max_price,
        "min_rating": args.min_rating,
        "store": args.store,
        "sort_by": args.sort_by,
        "sort_order": args.sort_order,
        "limit": args.limit,
    }
    return {k: v for k, v in options.items() if v is not None}


def _dispatch(args: argparse.Namespace) -> int:
    """Route parsed arguments to the matching runner."""
    from bargainer.cli import runner

    if args.health:
        return asyncio.run(runner.run_health_check())
    if args.list_sources:
        return runner.run_list_sources()
    if args.tool:
        return asyncio.run(runner.run_tool(args.tool, args.arguments))
    if args.details:
        return asyncio.run(
            runner.cli_deal_details(
                args.details, args.source, args.output_format
            )
        )
    if args.top:
        return asyncio.run(
            runner.cli_top_deals(
                args.limit, args.sources, args.output_format
            )
        )
    return asyncio.run(
        runner.cli_search(
            query=args.query,
            source_csv=args.sources,
            output_format=args.output_format,
            filters=_search_filters(args),
        )
    )


def main() -> None:
    """Parse arguments and run the requested command."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        console_level=logging.INFO if args.verbose else logging.WARNING,
        provider_levels={sid: logging.ERROR for sid in args.quiet_source},
    )
    logger.info("bargainer starting, log file: %s", log_file)

    if not (
        args.query
        or args.top
        or args.details
        or args.list_sources
        or args.tool
        or args.health
    ):
        parser.print_help(sys.stderr)
        sys.exit(2)

    try:
        exit_code = _dispatch(args)
    except Exception:
        logger.critical("Fatal error during CLI run", exc_info=True)
        raise
    finally:
        logger.info("bargainer shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
