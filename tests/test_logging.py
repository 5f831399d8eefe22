import logging
from pathlib import Path

import pytest

from omx_remote.logging import ACCESS_LOGGER, configure_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    access_level = logging.getLogger(ACCESS_LOGGER).level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger(ACCESS_LOGGER).setLevel(access_level)


def test_configure_logging_writes_log_file(tmp_path: Path, restore_root_logging) -> None:
    log_path = tmp_path / "logs" / "omx-remote.log"

    configure_logging("debug", log_path=log_path)
    logging.getLogger("omx_remote.player.supervisor").warning("Player exited with status 1")
    for handler in restore_root_logging.handlers:
        handler.flush()

    assert restore_root_logging.level == logging.DEBUG
    assert (
        "| WARNING | omx_remote.player.supervisor | Player exited with status 1"
        in log_path.read_text(encoding="utf-8")
    )


def test_configure_logging_access_lines(restore_root_logging) -> None:
    configure_logging("INFO")
    assert logging.getLogger(ACCESS_LOGGER).level == logging.WARNING

    configure_logging("INFO", log_access=True)
    assert logging.getLogger(ACCESS_LOGGER).level == logging.NOTSET


def test_configure_logging_unknown_level_defaults_to_info(restore_root_logging) -> None:
    configure_logging("chatty")

    assert restore_root_logging.level == logging.INFO
