"""Main entry point for the light rail departures service."""

import asyncio
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
from hblr_departures.adapters.web import WebServer, create_app
from hblr_departures.application.services import FerrySchedule
from hblr_departures.domain.errors import BrowserLaunchError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def load_config() -> AppConfig:
    """Load configuration from the environment and the optional TOML file."""
    try:
        config = AppConfig().apply_config_file()
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    logging.getLogger().setLevel(config.log_level.upper())
    return config


async def main() -> None:
    """Main application entry point."""
    config = load_config()

    session = BrowserSessionManager(headless=config.headless, user_agent=config.user_agent)
    try:
        await session.start()
    except BrowserLaunchError as e:
        # No browser means no data source
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)

    coordinator = ScrapeCoordinator(
        config=config,
        session=session,
        navigator=PageNavigator(SourcePageProfile.from_config(config)),
        cache=SnapshotCache(),
    )
    server = WebServer(create_app(coordinator, FerrySchedule(), config), config)
    logger.info(f"Scheduled light rail scraping every {config.scrape_interval_minutes} minutes")

    try:
        await coordinator.start_scheduled_scraping()
        await server.serve()
    finally:
        logger.info("Shutting down gracefully...")
        await coordinator.stop_scheduled_scraping()
        await session.shutdown()


def cli_main() -> None:
    """Synchronous entry point for the service command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
