"""Constants used across the omx-remote package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "omx-remote"
VERSION = "0.2.0"

DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".omx-remote" / DEFAULT_CONFIG_FILENAME

DEFAULT_MEDIA_PATH = Path.home()

DEFAULT_PLAYER_EXECUTABLE = "omxplayer"
DEFAULT_AUDIO_DEVICE = "hdmi"
# omxplayer is a wrapper script around omxplayer.bin; both may linger after a crash
DEFAULT_KILL_NAMES = ("omxplayer.bin", "omxplayer")

DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 8080
