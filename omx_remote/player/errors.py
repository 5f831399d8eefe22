"""Exceptions raised by the player supervisor."""

from __future__ import annotations


class PlayerError(RuntimeError):
    """Base class for player supervisor failures."""


class PlayerNotInstalledError(PlayerError):
    """Raised when the playback executable cannot be located."""

    def __init__(self, executable: str) -> None:
        super().__init__(f"{executable} is not installed")
        self.executable = executable


class PlayerAlreadyRunningError(PlayerError):
    """Raised when playback is requested while a player process is live."""

    def __init__(self, current_file: str) -> None:
        super().__init__("Player is already running")
        self.current_file = current_file


class PlayerLaunchError(PlayerError):
    """Raised when the player process could not be started."""
