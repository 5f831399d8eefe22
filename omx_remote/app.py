"""Main application entry-point for omx-remote."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

from .config import RemoteConfig, load_config
from .health import HealthReporter
from .logging import configure_logging
from .media import MediaLibrary
from .player import PlayerNotInstalledError, PlayerSupervisor
from .server import RemoteServer

LOGGER = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the service cannot start at all."""


class OmxRemoteApp:
    """Coordinates application startup and shutdown.

    Owns the single ``PlayerSupervisor`` for the lifetime of the service,
    runs its command dispatch loop and exposes it over HTTP.
    """

    def __init__(
        self,
        config: Optional[RemoteConfig] = None,
        *,
        supervisor: Optional[PlayerSupervisor] = None,
    ) -> None:
        self._config = config or load_config()
        self._supervisor = supervisor or PlayerSupervisor(self._config.player)
        self._library = MediaLibrary(self._config.media.path)
        self._health = HealthReporter()
        self._server: Optional[RemoteServer] = None
        self._dispatch_task: Optional[asyncio.Task[None]] = None
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def supervisor(self) -> PlayerSupervisor:
        return self._supervisor

    @classmethod
    def start(cls, config: Optional[RemoteConfig] = None) -> None:
        instance = cls(config=config)
        configure_logging(
            instance._config.logging.level,
            log_path=instance._config.logging.path,
            log_access=instance._config.logging.log_access,
        )
        try:
            asyncio.run(instance.run())
        except KeyboardInterrupt:
            LOGGER.info("omx-remote received shutdown signal")

    async def run(self) -> None:
        LOGGER.info("omx-remote starting with config: %s", self._config.path)
        try:
            await self.start_services()
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            LOGGER.info("omx-remote received shutdown signal")
            raise
        finally:
            await self.stop_services()

    async def start_services(self) -> None:
        if not self._library.exists():
            raise StartupError(f"Directory does not exist: {self._library.root}")

        try:
            self._supervisor.detect()
        except PlayerNotInstalledError as exc:
            raise StartupError(str(exc)) from exc
        await self._health.update("player", True, "installed")

        # Make sure nothing is left over from a previous run
        await self._supervisor.cleanup()

        self._dispatch_task = asyncio.create_task(self._supervisor.run_dispatch())
        self._dispatch_task.add_done_callback(self._on_dispatch_done)
        await self._health.update("dispatcher", True)

        server = RemoteServer(
            self._supervisor,
            self._library,
            self._health,
            self._config.server.host,
            self._config.server.port,
            tmdb_api_key=self._config.media.tmdb_api_key,
        )
        try:
            await server.start()
        except OSError as exc:
            await self._health.update("http", False, str(exc))
            raise StartupError(f"Failed to start HTTP server: {exc}") from exc
        self._server = server
        await self._health.update("http", True)

    async def stop_services(self) -> None:
        if self._server is not None:
            await self._server.stop()
            self._server = None

        if self._dispatch_task is not None:
            self._dispatch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._dispatch_task
            self._dispatch_task = None

        await self._supervisor.shutdown()

    def _on_dispatch_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Command dispatcher stopped unexpectedly", exc_info=exc)
            health_task = asyncio.create_task(
                self._health.update("dispatcher", False, str(exc))
            )
            self._background_tasks.add(health_task)
            health_task.add_done_callback(self._background_tasks.discard)
