"""Tests for text decoding and language detection."""

from __future__ import annotations

import asyncio
import codecs
from pathlib import Path

import pytest

from snippetpick.services.filesystem import DirectoryEntry, FileSystem, LocalFileSystem, read_text
from snippetpick.utils.file_io import LANGUAGE_BY_EXTENSION, decode_text, detect_language
from tests.helpers import FakeFileSystem


def test_decode_utf8_with_bom() -> None:
    assert decode_text(codecs.BOM_UTF8 + "héllo".encode("utf-8")) == "héllo"


def test_decode_utf16_with_bom() -> None:
    raw = codecs.BOM_UTF16_LE + "snippet".encode("utf-16-le")

    assert decode_text(raw) == "snippet"


def test_decode_normalizes_newlines() -> None:
    assert decode_text(b"a\r\nb\rc\n") == "a\nb\nc\n"
    assert decode_text(b"a\r\nb", normalize_newlines=False) == "a\r\nb"


def test_decode_falls_back_for_invalid_utf8() -> None:
    assert decode_text(b"caf\xe9") == "café"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/snips/a.py", "python"),
        ("/snips/a.TSX", None),
        ("/snips/b.yml", "yaml"),
        ("/snips/c.h", "c"),
        ("/snips/script.bash", "bash"),
        ("/snips/README", None),
        ("", None),
    ],
)
def test_detect_language(path: str, expected: str | None) -> None:
    assert detect_language(path) == expected


def test_language_table_covers_common_extensions() -> None:
    assert {"ts", "js", "py", "go", "rs", "md", "sql"} <= set(LANGUAGE_BY_EXTENSION)


def test_read_text_goes_through_filesystem() -> None:
    fs = FakeFileSystem({"/s/a.txt": "one\r\ntwo"})

    assert asyncio.run(read_text(fs, "/s/a.txt")) == "one\ntwo"
    assert fs.reads == ["/s/a.txt"]


def test_local_filesystem_lists_and_reads(tmp_path: Path) -> None:
    (tmp_path / "dir").mkdir()
    (tmp_path / "file.txt").write_bytes(b"payload")
    fs = LocalFileSystem()

    async def scenario() -> None:
        assert isinstance(fs, FileSystem)
        assert await fs.exists(str(tmp_path)) is True
        assert await fs.exists(str(tmp_path / "nope")) is False
        entries = sorted(await fs.list_directory(str(tmp_path)), key=lambda entry: entry.name)
        assert entries == [DirectoryEntry("dir", True), DirectoryEntry("file.txt", False)]
        assert await fs.read_file(str(tmp_path / "file.txt")) == b"payload"
        with pytest.raises(OSError):
            await fs.list_directory(str(tmp_path / "nope"))

    asyncio.run(scenario())
