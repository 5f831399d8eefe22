"""Supervision of the playback process and parsing of its telemetry."""

from .control_codes import CONTROL_CODES, STOP_COMMAND, is_known, resolve
from .errors import (
    PlayerAlreadyRunningError,
    PlayerError,
    PlayerLaunchError,
    PlayerNotInstalledError,
)
from .stream import StreamParser, parse_duration, parse_position
from .supervisor import MediaInfo, PlayerSupervisor, ProcessHandle
from .telemetry import Position, Telemetry, TelemetrySnapshot, duration_from_seconds

__all__ = [
    "CONTROL_CODES",
    "MediaInfo",
    "PlayerAlreadyRunningError",
    "PlayerError",
    "PlayerLaunchError",
    "PlayerNotInstalledError",
    "PlayerSupervisor",
    "Position",
    "ProcessHandle",
    "STOP_COMMAND",
    "StreamParser",
    "Telemetry",
    "TelemetrySnapshot",
    "duration_from_seconds",
    "is_known",
    "parse_duration",
    "parse_position",
    "resolve",
]
