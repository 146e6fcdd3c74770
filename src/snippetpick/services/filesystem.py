"""File-system collaborator used to enumerate and read snippet files."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..utils.file_io import decode_text

__all__ = ["DirectoryEntry", "FileSystem", "LocalFileSystem", "read_text"]


@dataclass(slots=True, frozen=True)
class DirectoryEntry:
    """One child of a listed directory."""

    name: str
    is_directory: bool


@runtime_checkable
class FileSystem(Protocol):
    """Asynchronous file access; every call may fail independently with :class:`OSError`."""

    async def exists(self, path: str) -> bool:
        ...

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        ...

    async def read_file(self, path: str) -> bytes:
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the local disk, off-loading calls to worker threads."""

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(os.path.exists, path)

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        return await asyncio.to_thread(_scan_directory, path)

    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(_read_bytes, path)


async def read_text(fs: FileSystem, path: str) -> str:
    """Read ``path`` through ``fs`` and decode it as text."""

    raw = await fs.read_file(path)
    return decode_text(raw)


def _scan_directory(path: str) -> list[DirectoryEntry]:
    entries: list[DirectoryEntry] = []
    with os.scandir(path) as iterator:
        for entry in iterator:
            # Symlinks are followed; sockets, fifos and dangling links are skipped.
            if entry.is_dir():
                entries.append(DirectoryEntry(entry.name, True))
            elif entry.is_file():
                entries.append(DirectoryEntry(entry.name, False))
    return entries


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()
