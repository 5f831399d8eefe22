"""Tests for playback telemetry values."""

import pytest

from omx_remote.player import Position, Telemetry, TelemetrySnapshot, duration_from_seconds


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (3661, "01:01:01"),
        (86399, "23:59:59"),
        (90000, "25:00:00"),
    ],
)
def test_duration_from_seconds(seconds: int, expected: str) -> None:
    assert duration_from_seconds(seconds) == expected


def test_position_set_truncates_to_whole_seconds() -> None:
    position = Position()

    position.set(1_500_000)

    assert position.raw == 1_500_000
    assert position.seconds == 1
    assert str(position) == "00:00:01"


def test_position_set_zero() -> None:
    position = Position()
    position.set(7_000_000)

    position.set(0)

    assert position.seconds == 0
    assert str(position) == "00:00:00"


def test_telemetry_snapshot_is_detached_from_updates() -> None:
    telemetry = Telemetry()
    telemetry.duration = 3723
    telemetry.position.set(2_500_000)

    snapshot = telemetry.snapshot()
    telemetry.position.set(9_000_000)

    assert snapshot == TelemetrySnapshot(duration_seconds=3723, position_seconds=2)
    assert snapshot.as_dict() == {"duration": "01:02:03", "position": "00:00:02"}


def test_telemetry_reset() -> None:
    telemetry = Telemetry(duration=10)
    telemetry.position.set(5_000_000)

    telemetry.reset()

    assert telemetry.snapshot() == TelemetrySnapshot()


def test_position_may_exceed_duration() -> None:
    telemetry = Telemetry(duration=1)
    telemetry.position.set(120_000_000)

    snapshot = telemetry.snapshot()

    assert snapshot.position == "00:02:00"
    assert snapshot.duration == "00:00:01"
