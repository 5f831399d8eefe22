"""Configuration loader for omx-remote."""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants


@dataclass(slots=True)
class PlayerConfig:
    executable: str = constants.DEFAULT_PLAYER_EXECUTABLE
    audio_device: str = constants.DEFAULT_AUDIO_DEVICE
    extra_options: List[str] = field(default_factory=list)
    kill_names: List[str] = field(
        default_factory=lambda: list(constants.DEFAULT_KILL_NAMES)
    )


@dataclass(slots=True)
class MediaConfig:
    path: Path = constants.DEFAULT_MEDIA_PATH
    tmdb_api_key: Optional[str] = None


@dataclass(slots=True)
class ServerConfig:
    host: str = constants.DEFAULT_HTTP_HOST
    port: int = constants.DEFAULT_HTTP_PORT


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_access: bool = False


@dataclass(slots=True)
class RemoteConfig:
    player: PlayerConfig
    media: MediaConfig
    server: ServerConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_extra_options(value: str) -> List[str]:
    """Split space separated launch options, dropping empty tokens."""

    return [token for token in value.split(" ") if token]


def load_config(path: Optional[Path] = None) -> RemoteConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "player": {
                "executable": constants.DEFAULT_PLAYER_EXECUTABLE,
                "audio_device": constants.DEFAULT_AUDIO_DEVICE,
                "extra_options": "",
                "kill_names": ",".join(constants.DEFAULT_KILL_NAMES),
            },
            "media": {
                "path": str(constants.DEFAULT_MEDIA_PATH),
            },
            "server": {
                "host": constants.DEFAULT_HTTP_HOST,
                "port": str(constants.DEFAULT_HTTP_PORT),
            },
            "logging": {
                "level": "INFO",
                "log_access": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    player = PlayerConfig(
        executable=parser.get("player", "executable").strip()
        or constants.DEFAULT_PLAYER_EXECUTABLE,
        audio_device=parser.get("player", "audio_device").strip(),
        extra_options=parse_extra_options(parser.get("player", "extra_options")),
        kill_names=_parse_list(
            parser.get("player", "kill_names"),
            default=constants.DEFAULT_KILL_NAMES,
        ),
    )

    tmdb_api_key = parser.get("media", "tmdb_api_key", fallback="") or os.environ.get(
        "TMDB_API_KEY", ""
    )
    media = MediaConfig(
        path=Path(parser.get("media", "path")).expanduser(),
        tmdb_api_key=tmdb_api_key or None,
    )

    try:
        port_value = parser.getint(
            "server", "port", fallback=constants.DEFAULT_HTTP_PORT
        )
    except ValueError:
        port_value = constants.DEFAULT_HTTP_PORT

    server = ServerConfig(
        host=parser.get("server", "host"),
        port=port_value,
    )

    log_path_value = parser.get("logging", "path", fallback="")
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_access=parser.getboolean("logging", "log_access", fallback=False),
    )

    return RemoteConfig(
        player=player,
        media=media,
        server=server,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )
