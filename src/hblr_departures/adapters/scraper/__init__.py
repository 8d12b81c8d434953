"""Scrape orchestration."""

from hblr_departures.adapters.scraper.scrape_coordinator import ScrapeCoordinator

__all__ = ["ScrapeCoordinator"]
