"""Uvicorn server adapter."""

import logging
from typing import Any

from starlette.applications import Starlette

from dorm_presence.adapters.config import AppConfig

logger = logging.getLogger(__name__)


class WebServer:
    """Runs the Starlette application under uvicorn."""

    def __init__(self, app: Starlette, config: AppConfig) -> None:
        """Initialize with the application and server settings."""
        self.app = app
        self.config = config
        self._server: Any | None = None

    async def start(self) -> None:
        """Serve until stopped."""
        import uvicorn

        uvicorn_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(uvicorn_config)
        logger.info(f"Serving on http://{self.config.host}:{self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Ask the server to shut down."""
        if self._server:
            self._server.should_exit = True
