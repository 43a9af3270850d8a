"""Command line entry point for the disclosure feed.

``fetch`` runs the pipeline and writes the feed; ``view`` loads a feed and
prints one page of it the way the widget would show it.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import FeedConfig
from .logging_config import setup_logging
from .pipeline import FeedPipeline
from .widget import SortMode, WidgetState, compute_view, load_feed
from .widget_builder import WidgetRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disclosure-feed",
        description="Fetch SEC and OTC disclosures for a ticker and publish them as a JSON feed",
    )
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file")
    parser.add_argument("--log-file", type=Path, help="Write logs to file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Fetch disclosures and write the feed")
    fetch.add_argument("--ticker", help="Ticker symbol (default from config)")
    fetch.add_argument("--output", "-o", type=Path, help="Feed output path")
    fetch.add_argument("--wrap", action="store_true", help='Write {"items": [...]} instead of a bare array')
    fetch.add_argument("--skip-webpage", action="store_true", help="Do not scrape the OTC disclosure page")
    fetch.add_argument("--json", action="store_true", help="Print the run summary as JSON")

    view = subparsers.add_parser("view", help="Show one page of a feed")
    view.add_argument("--feed", help="Feed path or URL (default from config)")
    view.add_argument("--query", "-q", default="", help="Case-insensitive search over title and description")
    view.add_argument(
        "--sort",
        choices=[mode.value for mode in SortMode],
        default=SortMode.DATE_DESC.value,
        help="Sort mode (default: date_desc)",
    )
    view.add_argument("--page", type=int, default=1, help="Page number (clamped into range)")
    view.add_argument("--page-size", type=int, help="Records per page (default from config)")
    view.add_argument("--html", type=Path, help="Write the page as HTML to this path")

    return parser


async def run_fetch(args: argparse.Namespace, config: FeedConfig, logger: logging.Logger) -> int:
    if args.ticker:
        config.ticker = args.ticker.strip().upper()
    if args.output:
        config.output_path = args.output
    if args.wrap:
        config.wrap_output = True
    if args.skip_webpage:
        config.webpage_enabled = False

    logger.info(f"Fetching disclosures for {config.ticker}")
    pipeline = FeedPipeline.from_config(config)
    summary = await pipeline.run()

    if summary.failed_extractors:
        logger.warning(f"Failed extractors: {', '.join(summary.failed_extractors)}")
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    return 0


async def run_view(args: argparse.Namespace, config: FeedConfig, logger: logging.Logger) -> int:
    location = args.feed or config.feed_location
    page_size = args.page_size or config.page_size

    loaded = await load_feed(location, max_items=config.max_items)
    state = WidgetState(sort_mode=SortMode(args.sort), query=args.query, page=args.page)
    view = compute_view(loaded.records, state, page_size)

    renderer = WidgetRenderer()
    if args.html:
        args.html.parent.mkdir(parents=True, exist_ok=True)
        args.html.write_text(renderer.render_html(view, loaded.status), encoding="utf-8")
        logger.info(f"Wrote widget page to {args.html}")
    else:
        sys.stdout.write(renderer.render_text(view, loaded.status))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = FeedConfig.load(args.config)
        if args.command == "fetch":
            return asyncio.run(run_fetch(args, config, logger))
        return asyncio.run(run_view(args, config, logger))
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
