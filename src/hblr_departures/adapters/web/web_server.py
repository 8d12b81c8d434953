"""uvicorn server hosting the API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import uvicorn

if TYPE_CHECKING:
    from starlette.applications import Starlette

    from hblr_departures.adapters.config.app_config import AppConfig

logger = logging.getLogger(__name__)


class WebServer:
    """Serves the ASGI app until stopped or interrupted."""

    def __init__(self, app: Starlette, config: AppConfig) -> None:
        self.app = app
        self.config = config
        self._server: uvicorn.Server | None = None

    async def serve(self) -> None:
        """Serve until a shutdown signal arrives or stop() is called."""
        server_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Light Rail & Ferry API listening on {self.config.host}:{self.config.port}")
        await self._server.serve()

    def stop(self) -> None:
        if self._server:
            self._server.should_exit = True
