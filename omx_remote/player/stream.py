"""Parsers for the diagnostic and progress output of omxplayer.

omxplayer prints stream information (including ``Duration: hh:mm:ss``) on
stderr once at startup, and with ``--stats`` keeps rewriting a single status
line on stdout, separated by carriage returns, that starts with the media
clock in microseconds (``M:<micros>``).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
from typing import Optional

from .telemetry import Telemetry

LOGGER = logging.getLogger(__name__)

DURATION_PATTERN = re.compile(r"Duration: (\d+):(\d+):(\d+)")
POSITION_PATTERN = re.compile(r"M:\s*(\d+)")

PROGRESS_SEPARATOR = b"\r"

MAX_DURATION_SECONDS = 2**64 - 1


def parse_duration(line: str) -> Optional[int]:
    """Return the total seconds announced by a ``Duration:`` line, if any."""

    match = DURATION_PATTERN.search(line)
    if match is None:
        return None

    hours, minutes, seconds = (int(group) for group in match.groups())
    total = hours * 3600 + minutes * 60 + seconds
    if total > MAX_DURATION_SECONDS:
        LOGGER.warning("Ignoring out of range duration line: %r", line)
        return None
    return total


def parse_position(chunk: str) -> Optional[int]:
    """Return the raw media clock from a progress chunk starting with ``M:``."""

    match = POSITION_PATTERN.match(chunk)
    if match is None:
        return None
    return int(match.group(1))


class StreamParser:
    """Feeds telemetry from the player's two output streams.

    Each stream is consumed by its own task so that neither pipe fills up
    while the other one is idle.
    """

    def __init__(self, telemetry: Telemetry) -> None:
        self.telemetry = telemetry
        self._tasks: list[asyncio.Task[None]] = []

    def start(
        self, stdout: asyncio.StreamReader, stderr: asyncio.StreamReader
    ) -> None:
        if self._tasks:
            raise RuntimeError("Stream parser already started")

        self.telemetry.reset()
        self._tasks = [
            asyncio.create_task(self._read_diagnostics(stderr)),
            asyncio.create_task(self._read_progress(stdout)),
        ]

    async def wait(self) -> None:
        """Wait until both streams have been consumed."""

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _read_diagnostics(self, stream: asyncio.StreamReader) -> None:
        # Only the first announcement is used; later "Duration:" banners may
        # belong to subtitle or attachment streams.
        while True:
            try:
                raw = await stream.readline()
            except ValueError as exc:
                LOGGER.debug("Skipping oversized diagnostic line: %s", exc)
                continue

            if not raw:
                LOGGER.debug("Diagnostic stream closed before duration was found")
                return

            duration = parse_duration(raw.decode("utf-8", errors="replace"))
            if duration is not None:
                self.telemetry.duration = duration
                LOGGER.debug("Media duration: %s seconds", duration)
                return

    async def _read_progress(self, stream: asyncio.StreamReader) -> None:
        while True:
            try:
                chunk = await stream.readuntil(PROGRESS_SEPARATOR)
            except asyncio.IncompleteReadError as exc:
                if exc.partial:
                    self._apply_position(exc.partial)
                LOGGER.debug("Progress stream closed")
                return
            except asyncio.LimitOverrunError as exc:
                LOGGER.debug("Progress stream read failed: %s", exc)
                return

            self._apply_position(chunk)

    def _apply_position(self, chunk: bytes) -> None:
        position = parse_position(chunk.decode("utf-8", errors="replace"))
        if position is not None:
            self.telemetry.position.set(position)
