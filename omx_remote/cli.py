"""Command-line interface for omx-remote."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .app import OmxRemoteApp, StartupError
from .config import load_config

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME, description="Remote control for omxplayer"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{constants.APP_NAME} v{constants.VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    start_parser = subparsers.add_parser("start", help="Start the omx-remote service")
    start_parser.add_argument("--media", type=Path, help="Path to media files")
    start_parser.add_argument("--host", help="Address to listen on")
    start_parser.add_argument("--port", type=int, help="Port to listen on")

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.command == "start":
        if args.media is not None:
            config.media.path = args.media.expanduser()
        if args.host is not None:
            config.server.host = args.host
        if args.port is not None:
            config.server.port = args.port

        try:
            OmxRemoteApp.start(config)
        except StartupError as exc:
            LOGGER.error("%s", exc)
            return 1
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
