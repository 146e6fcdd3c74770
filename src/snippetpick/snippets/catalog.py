"""Recursive enumeration of snippet roots into a sorted catalog."""

from __future__ import annotations

import locale
import logging
import os
import unicodedata
from typing import Callable, Sequence

from ..services.filesystem import FileSystem
from .errors import EnumerationError
from .models import CatalogEntry, RootFolder, has_hidden_segment, split_segments

__all__ = ["FileCatalog", "catalog_sort_key"]

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


def catalog_sort_key(entry: CatalogEntry) -> tuple[str, str, str]:
    """Locale-aware ordering on the relative path.

    Accents and case only break ties, so the order stays readable even when
    the process still runs under the C collation.
    """

    folded = entry.relative_path.casefold()
    return (locale.strxfrm(_base_letters(folded)), locale.strxfrm(folded), entry.relative_path)


def _base_letters(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


class FileCatalog:
    """Builds the per-session list of snippet files.

    Unreadable directories contribute nothing rather than aborting the walk.
    Directories are never entered twice (compared by canonical path), which
    keeps symlink loops from recursing forever, and the walk stops descending
    past ``max_depth`` levels below a root.
    """

    def __init__(
        self,
        fs: FileSystem,
        *,
        canonicalize: Callable[[str], str] = os.path.realpath,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._fs = fs
        self._canonicalize = canonicalize
        self._max_depth = max(0, max_depth)

    async def list_files(self, root: RootFolder) -> list[str]:
        """Return the absolute path of every file below ``root``."""

        results: list[str] = []
        await self._walk(root.path, 0, set(), results)
        return results

    async def build(self, roots: Sequence[RootFolder]) -> list[CatalogEntry]:
        """Merge every root's files into one list sorted by relative path."""

        entries: list[CatalogEntry] = []
        for root in roots:
            files = await self.list_files(root)
            kept = 0
            for absolute in files:
                relative = _relative_to(absolute, root.path)
                if has_hidden_segment(relative):
                    continue
                entries.append(CatalogEntry(relative_path=relative, source_root=root))
                kept += 1
            LOGGER.debug("Catalogued %d file(s) under %s", kept, root.path)
        # sorted() is stable, so equal relative paths keep their root order.
        return sorted(entries, key=catalog_sort_key)

    async def _walk(self, directory: str, depth: int, visited: set[str], results: list[str]) -> None:
        canonical = self._canonicalize(directory)
        if canonical in visited:
            LOGGER.warning("Skipping already visited directory %s", directory)
            return
        visited.add(canonical)
        try:
            children = await self._fs.list_directory(directory)
        except OSError as exc:
            LOGGER.warning("%s", EnumerationError(directory, exc))
            return
        for child in children:
            path = os.path.join(directory, child.name)
            if not child.is_directory:
                results.append(path)
            elif depth >= self._max_depth:
                LOGGER.warning("Maximum snippet folder depth reached at %s", path)
            else:
                await self._walk(path, depth + 1, visited, results)


def _relative_to(absolute: str, root: str) -> str:
    if absolute.startswith(root):
        remainder = absolute[len(root):]
    else:
        remainder = os.path.relpath(absolute, root)
    return "/".join(split_segments(remainder))
