"""Media library helpers: browsing, playable formats and display titles."""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

LOGGER = logging.getLogger(__name__)

PLAYABLE_FORMATS = re.compile(
    r"\.(avi|mpg|mov|flv|wmv|asf|mpeg|m4v|divx|mp4|mkv)$", re.IGNORECASE
)

_BRACKETS = re.compile(r"[\(\[\]\)]")
_YEAR = re.compile(r"((19|20)\d{2})")
_EPISODE = re.compile(r"S\d+E\d+", re.IGNORECASE)
_JUNK = re.compile(r"(1080p|720p|3d|brrip|bluray|webrip|x264|aac)", re.IGNORECASE)
_SPACE = re.compile(r"\s{2,}")


def can_play(path: str) -> bool:
    return PLAYABLE_FORMATS.search(path) is not None


def file_to_title(name: str) -> str:
    """Turn a release-style filename into a readable title.

    ``"Movie.Name.2010.1080p.BrRip.x264.YIFY.mp4"`` becomes ``"Movie Name"``:
    everything from the release year (or the ``S##E##`` episode marker) on
    is dropped.
    """

    name = os.path.splitext(name)[0]
    name = name.replace(".", " ")
    name = _BRACKETS.sub("", name)

    match = _YEAR.search(name) or _EPISODE.search(name)
    if match is not None:
        name = name[: match.start()]

    name = _JUNK.sub("", name)
    name = _SPACE.sub(" ", name)
    return name.strip()


@dataclass(frozen=True, slots=True)
class FileEntry:
    filename: str
    is_dir: bool

    def as_dict(self) -> Dict[str, object]:
        return {"filename": self.filename, "directory": self.is_dir}


class MediaLibrary:
    """Read-only view (plus deletion) of the media directory tree."""

    def __init__(self, root: Path) -> None:
        self.root = root.expanduser().resolve()

    def exists(self) -> bool:
        return self.root.is_dir()

    def resolve(self, relative: str) -> Optional[Path]:
        """Map a client supplied path onto the library, refusing escapes."""

        try:
            candidate = (self.root / relative.lstrip("/")).resolve()
        except ValueError as exc:
            LOGGER.warning("Rejecting invalid media path %r: %s", relative, exc)
            return None
        if candidate != self.root and self.root not in candidate.parents:
            LOGGER.warning("Rejecting path outside media root: %s", relative)
            return None
        return candidate

    def scan(self, relative: str = "") -> List[FileEntry]:
        """List directories and playable files, or nothing if unreadable."""

        directory = self.resolve(relative) if relative else self.root
        if directory is None:
            return []

        try:
            children = sorted(directory.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            LOGGER.debug("Cannot scan %s: %s", directory, exc)
            return []

        entries: List[FileEntry] = []
        for child in children:
            is_dir = child.is_dir()
            if not is_dir and not can_play(child.name):
                continue
            entries.append(FileEntry(filename=child.name, is_dir=is_dir))
        return entries

    def remove(self, path: Path) -> None:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        LOGGER.info("Removed %s", path)
