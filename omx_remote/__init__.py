"""Remote control service for a supervised omxplayer process."""

from .constants import VERSION as __version__

__all__ = ["__version__"]
