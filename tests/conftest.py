import asyncio
import stat
import sys
import textwrap
from pathlib import Path
from typing import Awaitable, Callable, Union

import pytest

FAKE_PLAYER_TEMPLATE = """\
#!{python}
import sys

LOG_PATH = {log_path!r}

with open(LOG_PATH, "w") as log:
    log.write("ARGS " + " ".join(sys.argv[1:]) + "\\n")

{body}
"""

INTERACTIVE_BODY = """\
sys.stderr.write("Input #0, matroska,webm, from 'movie.mkv':\\n")
sys.stderr.write("  Duration: 00:01:05.32, start: 0.000000, bitrate: 8000 kb/s\\n")
sys.stderr.flush()
sys.stdout.write("M:  2500000 V:  0.00s  A:  0.00s\\r")
sys.stdout.flush()
while True:
    key = sys.stdin.read(1)
    if not key:
        sys.exit(0)
    with open(LOG_PATH, "a") as log:
        log.write("KEY " + repr(key) + "\\n")
    if key == "q":
        sys.exit(0)
"""


@pytest.fixture
def make_player(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable script standing in for omxplayer."""

    def factory(body: str = INTERACTIVE_BODY, name: str = "omxplayer") -> Path:
        script = tmp_path / name
        script.write_text(
            FAKE_PLAYER_TEMPLATE.format(
                python=sys.executable,
                log_path=str(tmp_path / f"{name}.log"),
                body=textwrap.dedent(body),
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture
def player_log(tmp_path: Path) -> Callable[[str], str]:
    def read(name: str = "omxplayer") -> str:
        path = tmp_path / f"{name}.log"
        return path.read_text(encoding="utf-8") if path.exists() else ""

    return read


async def eventually(
    predicate: Callable[[], Union[bool, Awaitable[bool]]], timeout: float = 5.0
) -> None:
    """Poll ``predicate`` until it is true or fail after ``timeout`` seconds."""

    async def _poll() -> None:
        while True:
            result = predicate()
            if not isinstance(result, bool):
                result = await result
            if result:
                return
            await asyncio.sleep(0.02)

    await asyncio.wait_for(_poll(), timeout=timeout)
