"""Control codes understood by omxplayer on its standard input."""

from __future__ import annotations

from typing import Mapping, Optional

STOP_COMMAND = "stop"

CONTROL_CODES: Mapping[str, bytes] = {
    "pause": b"p",  # pause/continue playback
    STOP_COMMAND: b"q",  # stop playback and exit
    "volume_up": b"+",  # +3dB
    "volume_down": b"-",  # -3dB
    "subtitles": b"s",  # toggle subtitles
    "seek_back": b"\x1b[D",  # -30 seconds
    "seek_back_fast": b"\x1b[B",  # -600 seconds
    "seek_forward": b"\x1b[C",  # +30 seconds
    "seek_forward_fast": b"\x1b[A",  # +600 seconds
    "next_audiotrack": b"k",
    "prev_audiotrack": b"j",
}


def resolve(command: str) -> Optional[bytes]:
    """Return the byte sequence for ``command`` or ``None`` when unknown.

    Lookup is an exact, case-sensitive match.
    """

    return CONTROL_CODES.get(command)


def is_known(command: str) -> bool:
    return command in CONTROL_CODES
