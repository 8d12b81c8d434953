"""Run a single scrape from the command line and print the result."""

import argparse
import asyncio
import json
import logging
import sys

from hblr_departures.adapters.browser import (
    BrowserSessionManager,
    PageNavigator,
    SourcePageProfile,
)
from hblr_departures.adapters.cache import SnapshotCache
from hblr_departures.adapters.config import AppConfig
from hblr_departures.adapters.scraper import ScrapeCoordinator
from hblr_departures.domain.errors import BrowserLaunchError
from hblr_departures.domain.models import ScrapeStatus


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape NJ Transit light rail departures once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape once and print departures with countdowns
  hblr-scrape-once

  # Watch the browser work through the page, with step diagnostics
  hblr-scrape-once --headed --debug

  # Use a different origin station
  ORIGIN_NAME="EXCHANGE PLACE LIGHT RAIL STATION" hblr-scrape-once
        """,
    )
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--debug", action="store_true", help="Log page diagnostics")
    return parser


async def scrape_once(config: AppConfig) -> int:
    """Scrape once, print the snapshot view as JSON and return an exit code."""
    session = BrowserSessionManager(headless=config.headless, user_agent=config.user_agent)
    try:
        await session.start()
    except BrowserLaunchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        coordinator = ScrapeCoordinator(
            config=config,
            session=session,
            navigator=PageNavigator(SourcePageProfile.from_config(config)),
            cache=SnapshotCache(),
        )
        snapshot = await coordinator.scrape()
        print(json.dumps(coordinator.get_cached_data(), indent=2))
    finally:
        await session.shutdown()

    return 0 if snapshot.status is ScrapeStatus.SUCCESS else 2


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    overrides: dict[str, object] = {}
    if args.config:
        overrides["config_file"] = args.config
    if args.headed:
        overrides["headless"] = False
    try:
        config = AppConfig(**overrides).apply_config_file()
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(scrape_once(config))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
