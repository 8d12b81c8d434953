"""Hudson-Bergen Light Rail departures service."""

__version__ = "0.1.0"
