"""Playback telemetry values derived from omxplayer output."""

from __future__ import annotations

from dataclasses import dataclass, field

MICROSECONDS_PER_SECOND = 1_000_000


def duration_from_seconds(value: int) -> str:
    """Render a whole number of seconds as ``HH:MM:SS``.

    Hours are not wrapped, so values of a day or more keep growing the
    hour field.
    """

    hours = value // 3600
    minutes = (value - hours * 3600) // 60
    seconds = value - hours * 3600 - minutes * 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(slots=True)
class Position:
    """Playback position as reported by the player's progress line."""

    raw: int = 0
    seconds: int = 0

    def set(self, raw: int) -> None:
        self.raw = raw
        self.seconds = raw // MICROSECONDS_PER_SECOND

    def __str__(self) -> str:
        return duration_from_seconds(self.seconds)


@dataclass(frozen=True, slots=True)
class TelemetrySnapshot:
    duration_seconds: int = 0
    position_seconds: int = 0

    @property
    def duration(self) -> str:
        return duration_from_seconds(self.duration_seconds)

    @property
    def position(self) -> str:
        return duration_from_seconds(self.position_seconds)

    def as_dict(self) -> dict[str, str]:
        return {"duration": self.duration, "position": self.position}


@dataclass(slots=True)
class Telemetry:
    """Mutable telemetry for a single playback session.

    Only the stream parser writes to it; readers take a ``snapshot()``.
    """

    duration: int = 0
    position: Position = field(default_factory=Position)

    def reset(self) -> None:
        self.duration = 0
        self.position.set(0)

    def snapshot(self) -> TelemetrySnapshot:
        return TelemetrySnapshot(
            duration_seconds=self.duration,
            position_seconds=self.position.seconds,
        )
