"""Supervision of the omxplayer child process."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shutil
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import PlayerConfig
from . import control_codes
from .errors import (
    PlayerAlreadyRunningError,
    PlayerLaunchError,
    PlayerNotInstalledError,
)
from .stream import DURATION_PATTERN, StreamParser
from .telemetry import Telemetry, TelemetrySnapshot

LOGGER = logging.getLogger(__name__)

PLAYBACK_FLAGS = (
    "--stats",  # print stats to stdout (buffers, time, etc)
    "--with-info",  # print stream info before playback
    "--refresh",  # adjust framerate/resolution to video
    "--blank",  # set background to black
)


@dataclass(slots=True)
class ProcessHandle:
    process: asyncio.subprocess.Process
    stdin: asyncio.StreamWriter
    target: str


@dataclass(frozen=True, slots=True)
class MediaInfo:
    duration: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"duration": self.duration}


class PlayerSupervisor:
    """Owns the single player process and everything attached to it.

    ``launch`` is the only place a process handle is created and ``cleanup``
    the only place it is cleared. A launch is rejected while a handle exists
    or a cleanup is still running, so there is never more than one player
    process per supervisor.

    Commands are delivered by ``run_dispatch``, a single consumer of the
    command queue, which keeps them in submission order.
    """

    def __init__(
        self, config: PlayerConfig, *, executable: Optional[str] = None
    ) -> None:
        self._config = config
        self._executable = executable
        self._handle: Optional[ProcessHandle] = None
        self._launching = False
        self._cleanups = 0
        self._stream: Optional[StreamParser] = None
        self._wait_task: Optional[asyncio.Task[Optional[int]]] = None
        self._commands: asyncio.Queue[str] = asyncio.Queue()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        """True while a process handle is held, even if the child just died."""

        return self._handle is not None

    @property
    def current_file(self) -> str:
        return self._handle.target if self._handle is not None else ""

    @property
    def commands(self) -> asyncio.Queue[str]:
        return self._commands

    def snapshot(self) -> Optional[TelemetrySnapshot]:
        stream = self._stream
        if stream is None:
            return None
        return stream.telemetry.snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def detect(self) -> str:
        """Locate the player executable, raising if it is not installed."""

        path = shutil.which(self._config.executable)
        if path is None:
            raise PlayerNotInstalledError(self._config.executable)

        self._executable = path
        LOGGER.info("Using player executable %s", path)
        return path

    def build_arguments(self, target: str) -> List[str]:
        arguments = [self._require_executable(), *self._config.extra_options]
        arguments.extend(PLAYBACK_FLAGS)
        if self._config.audio_device:
            arguments.extend(["--adev", self._config.audio_device])
        arguments.append(target)
        return arguments

    async def launch(self, target: str) -> ProcessHandle:
        """Start the player for ``target`` without waiting for it to finish."""

        if self._handle is not None or self._launching or self._cleanups:
            raise PlayerAlreadyRunningError(self.current_file)

        self._launching = True
        try:
            arguments = self.build_arguments(target)
            LOGGER.info("Starting playback of %s", target)
            LOGGER.debug("Player command line: %s", arguments)
            try:
                process = await asyncio.create_subprocess_exec(
                    *arguments,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise PlayerLaunchError(
                    f"Failed to start {arguments[0]}: {exc}"
                ) from exc
        finally:
            self._launching = False

        if process.stdin is None or process.stdout is None or process.stderr is None:
            self._kill_process(process)
            raise PlayerLaunchError("Player process was started without pipes")

        stream = StreamParser(Telemetry())
        stream.start(process.stdout, process.stderr)

        handle = ProcessHandle(process=process, stdin=process.stdin, target=target)
        self._stream = stream
        self._handle = handle
        return handle

    async def wait(self) -> Optional[int]:
        """Wait for the current player to exit, then clean up after it."""

        handle = self._handle
        if handle is None:
            return None

        try:
            returncode = await handle.process.wait()
            if returncode != 0:
                LOGGER.warning(
                    "Player exited with status %s while playing %s",
                    returncode,
                    handle.target,
                )
            else:
                LOGGER.info("Playback of %s finished", handle.target)
            return returncode
        finally:
            if self._handle is handle or self._handle is None:
                await self.cleanup()

    async def play(self, target: str) -> Optional[int]:
        """Play ``target`` and return once the player has exited."""

        await self.launch(target)
        return await self.wait()

    async def spawn(self, target: str) -> asyncio.Task[Optional[int]]:
        """Launch ``target`` and wait for its exit in a background task.

        Launch failures are raised to the caller before this returns.
        """

        await self.launch(target)
        task = asyncio.create_task(self.wait())
        self._wait_task = task
        task.add_done_callback(self._forget_wait_task)
        return task

    def kill(self) -> None:
        """Force the current player process to exit, if there is one."""

        handle = self._handle
        if handle is not None:
            self._kill_process(handle.process)

    async def cleanup(self) -> None:
        """Reset all playback state and kill any stray player processes.

        Safe to call when nothing is running.
        """

        # launch is rejected until the stray killall below has finished
        self._cleanups += 1
        try:
            handle, self._handle = self._handle, None
            stream, self._stream = self._stream, None

            if handle is not None:
                if handle.process.returncode is None:
                    self._kill_process(handle.process)
                handle.stdin.close()

            if stream is not None:
                await stream.stop()

            await self._kill_strays()
        finally:
            self._cleanups -= 1

    async def shutdown(self) -> None:
        self.kill()
        task = self._wait_task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        else:
            await self.cleanup()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def submit(self, command: str) -> None:
        self._commands.put_nowait(command)

    async def run_dispatch(self) -> None:
        """Deliver queued commands to the player until cancelled."""

        while True:
            command = await self._commands.get()
            try:
                await self.dispatch(command)
            finally:
                self._commands.task_done()

    async def dispatch(self, command: str) -> None:
        handle = self._handle
        if handle is None:
            LOGGER.debug("Ignoring command %s: player is not running", command)
            return

        code = control_codes.resolve(command)
        if code is None:
            LOGGER.warning("Ignoring unknown player command: %s", command)
            return

        LOGGER.info("Sending command %s to player", command)
        await self._write(handle, code)

        # omxplayer may not react to "q" promptly
        if command == control_codes.STOP_COMMAND:
            self._kill_process(handle.process)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def probe(self, target: str) -> MediaInfo:
        """Read media information with ``<player> --info``."""

        executable = self._require_executable()
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                "--info",
                target,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise PlayerLaunchError(f"Failed to start {executable}: {exc}") from exc

        output, _ = await process.communicate()
        # A valid `omxplayer --info` exits with status 1
        if process.returncode != 0:
            LOGGER.debug(
                "%s --info exited with status %s", executable, process.returncode
            )

        match = DURATION_PATTERN.search(output.decode("utf-8", errors="replace"))
        if match is None:
            return MediaInfo()
        return MediaInfo(duration=":".join(match.groups()))

    def _require_executable(self) -> str:
        if self._executable is None:
            return self.detect()
        return self._executable

    def _forget_wait_task(self, task: asyncio.Task[Optional[int]]) -> None:
        if self._wait_task is task:
            self._wait_task = None

    async def _write(self, handle: ProcessHandle, code: bytes) -> None:
        if handle.stdin.is_closing():
            LOGGER.warning("Cannot write to player: stdin is closed")
            return

        try:
            handle.stdin.write(code)
            await handle.stdin.drain()
        except OSError as exc:
            LOGGER.warning("Cannot write to player: %s", exc)

    @staticmethod
    def _kill_process(process: asyncio.subprocess.Process) -> None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()

    async def _kill_strays(self) -> None:
        for name in self._config.kill_names:
            try:
                process = await asyncio.create_subprocess_exec(
                    "killall",
                    name,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.DEVNULL,
                )
            except OSError as exc:
                LOGGER.debug("Cannot run killall: %s", exc)
                return

            if await process.wait() == 0:
                LOGGER.info("Killed stray %s processes", name)
