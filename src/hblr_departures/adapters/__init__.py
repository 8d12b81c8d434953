"""Adapters layer - browser, cache, web and configuration integrations."""

from hblr_departures.adapters.config import AppConfig

__all__ = ["AppConfig"]
