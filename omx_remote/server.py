"""HTTP API used by remote-control clients."""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional
from urllib.parse import urlparse

from aiohttp import web

from .health import HealthReporter
from .media import MediaLibrary, can_play, file_to_title
from .player import PlayerError, PlayerSupervisor, is_known

LOGGER = logging.getLogger(__name__)

STREAM_SCHEMES = frozenset({"http", "https", "rtmp", "rtsp", "udp"})

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _result(success: bool, message: str, *, status: int = 200) -> web.Response:
    return web.json_response({"success": success, "message": message}, status=status)


def _is_stream_url(value: str) -> bool:
    return urlparse(value).scheme in STREAM_SCHEMES


@web.middleware
async def cors_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response()
    else:
        response = await handler(request)
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Expose-Headers"] = "*"
    return response


class RemoteServer:
    """aiohttp server translating HTTP requests into supervisor calls."""

    def __init__(
        self,
        supervisor: PlayerSupervisor,
        library: MediaLibrary,
        health: HealthReporter,
        host: str,
        port: int,
        *,
        tmdb_api_key: Optional[str] = None,
    ) -> None:
        self._supervisor = supervisor
        self._library = library
        self._health = health
        self._host = host
        self._port = port
        self._tmdb_api_key = tmdb_api_key
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    def build_app(self) -> web.Application:
        app = web.Application(middlewares=[cors_middleware])
        app.router.add_get("/status", self._handle_status)
        app.router.add_get("/browse", self._handle_browse)
        app.router.add_get("/play", self._handle_play)
        app.router.add_get("/serve", self._handle_serve)
        app.router.add_get("/info", self._handle_info)
        app.router.add_post("/remove", self._handle_remove)
        app.router.add_get("/command/{command}", self._handle_command)
        app.router.add_get("/healthz", self._handle_health)
        return app

    async def start(self) -> None:
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        LOGGER.info("Listening on http://%s:%s", self._host, self._port)

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    async def _handle_status(self, request: web.Request) -> web.Response:
        current_file = self._supervisor.current_file
        payload: Dict[str, object] = {
            "running": self._supervisor.is_active,
            "file": current_file,
            "name": file_to_title(os.path.basename(current_file)),
            "tmdb_api_key": self._tmdb_api_key or "",
        }

        snapshot = self._supervisor.snapshot()
        if snapshot is not None:
            payload.update(snapshot.as_dict())

        return web.json_response(payload)

    async def _handle_browse(self, request: web.Request) -> web.Response:
        path = request.query.get("path", "")
        entries = self._library.scan(path)
        return web.json_response([entry.as_dict() for entry in entries])

    async def _handle_play(self, request: web.Request) -> web.Response:
        if self._supervisor.is_active:
            return _result(False, "Player is already running", status=400)

        file = request.query.get("file", "")
        if not file:
            return _result(False, "File is required", status=400)

        if _is_stream_url(file):
            target = file
        else:
            path = self._library.resolve(file)
            if path is None or not path.is_file():
                return _result(False, "File does not exist", status=400)
            if not can_play(path.name):
                return _result(False, "File cannot be played", status=400)
            target = str(path)

        try:
            await self._supervisor.spawn(target)
        except PlayerError as exc:
            LOGGER.error("Cannot play %s: %s", target, exc)
            return _result(False, str(exc), status=400)

        return _result(True, "OK")

    async def _handle_serve(self, request: web.Request) -> web.StreamResponse:
        path = self._existing_path(request.query.get("file", ""))
        if path is None or not path.is_file():
            return web.Response(status=404, text="Not found")
        if not can_play(path.name):
            return web.Response(status=400, text="Invalid format")
        return web.FileResponse(path)

    async def _handle_info(self, request: web.Request) -> web.Response:
        path = self._existing_path(request.query.get("file", ""))
        if path is None or not path.is_file():
            return _result(False, "File does not exist", status=400)

        try:
            info = await self._supervisor.probe(str(path))
        except PlayerError as exc:
            return _result(False, str(exc), status=400)
        return web.json_response(info.as_dict())

    async def _handle_remove(self, request: web.Request) -> web.Response:
        form = await request.post()
        file = str(form.get("file", ""))
        if not file:
            return _result(False, "File is required", status=400)

        path = self._existing_path(file)
        if path is None or path == self._library.root:
            return _result(False, "File does not exist", status=400)

        try:
            self._library.remove(path)
        except OSError as exc:
            return _result(False, str(exc), status=400)
        return _result(True, "OK")

    async def _handle_command(self, request: web.Request) -> web.Response:
        command = request.match_info["command"]
        if not is_known(command):
            return _result(False, "Invalid command", status=400)

        LOGGER.info("Received command: %s", command)
        self._supervisor.submit(command)
        return _result(True, "OK")

    async def _handle_health(self, request: web.Request) -> web.Response:
        snapshot = await self._health.snapshot()
        status = 200 if snapshot["status"] == "ok" else 503
        return web.json_response(snapshot, status=status)

    def _existing_path(self, relative: str) -> Optional[Path]:
        if not relative:
            return None
        path = self._library.resolve(relative)
        if path is None or not path.exists():
            return None
        return path
