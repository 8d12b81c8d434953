"""Web adapters serving the REST API."""

from hblr_departures.adapters.web.api_app import create_app
from hblr_departures.adapters.web.web_server import WebServer

__all__ = ["WebServer", "create_app"]
