"""Tests for the media library helpers."""

from pathlib import Path

import pytest

from omx_remote.media import FileEntry, MediaLibrary, can_play, file_to_title


@pytest.mark.parametrize(
    "filename",
    [
        "Movie Name (2014) [1080p].mp4",
        "Movie Name (2009) [1080p] [HSBS] [3d].mp4",
        "Movie.Name.2011.480p.BRRip.XviD.AC3-AsA.mp4",
        "Movie Name 2007 BRRip 720p x264 AAC - PRiSTiNE [P2PDL].mp4",
        "Movie Name.2011.limited.720p.BRRip.H264.AAC-MAJESTiC.mp4",
        "Movie.Name.2010.1080p.BrRip.x264.YIFY.mp4",
        "Movie.Name.S05E01.HDTV.x264-LOL.mp4",
    ],
)
def test_file_to_title(filename: str) -> None:
    assert file_to_title(filename) == "Movie Name"


def test_file_to_title_empty() -> None:
    assert file_to_title("") == ""


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("movie.mkv", True),
        ("movie.MP4", True),
        ("/media/show/episode.avi", True),
        ("notes.txt", False),
        ("mkv", False),
        ("movie.mkv.part", False),
    ],
)
def test_can_play(path: str, expected: bool) -> None:
    assert can_play(path) is expected


@pytest.fixture
def library(tmp_path: Path) -> MediaLibrary:
    (tmp_path / "Shows").mkdir()
    (tmp_path / "Shows" / "pilot.mkv").write_bytes(b"")
    (tmp_path / "b-movie.mp4").write_bytes(b"")
    (tmp_path / "a-movie.avi").write_bytes(b"")
    (tmp_path / "cover.jpg").write_bytes(b"")
    return MediaLibrary(tmp_path)


def test_scan_lists_directories_and_playable_files(library: MediaLibrary) -> None:
    assert library.scan() == [
        FileEntry(filename="Shows", is_dir=True),
        FileEntry(filename="a-movie.avi", is_dir=False),
        FileEntry(filename="b-movie.mp4", is_dir=False),
    ]


def test_scan_subdirectory(library: MediaLibrary) -> None:
    entries = library.scan("Shows")

    assert [entry.as_dict() for entry in entries] == [
        {"filename": "pilot.mkv", "directory": False}
    ]


def test_scan_missing_directory_is_empty(library: MediaLibrary) -> None:
    assert library.scan("nope") == []


def test_resolve_rejects_paths_outside_root(library: MediaLibrary) -> None:
    assert library.resolve("../etc/passwd") is None
    assert library.resolve("Shows/../../secret.mkv") is None
    assert library.resolve("Shows/pilot.mkv") == library.root / "Shows" / "pilot.mkv"
    assert library.resolve("/Shows") == library.root / "Shows"


def test_remove_file_and_directory(library: MediaLibrary) -> None:
    library.remove(library.root / "a-movie.avi")
    library.remove(library.root / "Shows")

    assert [entry.filename for entry in library.scan()] == ["b-movie.mp4"]


def test_resolve_rejects_null_bytes(library: MediaLibrary) -> None:
    assert library.resolve("a\x00b.mkv") is None
    assert library.scan("Shows\x00") == []
