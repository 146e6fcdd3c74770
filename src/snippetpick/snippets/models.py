"""Dataclasses describing snippet roots, catalog entries and rendered list items."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

__all__ = [
    "HIDDEN_MARKER",
    "CatalogEntry",
    "DisplayRecord",
    "ListItem",
    "NavigationDirection",
    "NavigationMarker",
    "PageState",
    "RootFolder",
    "has_hidden_segment",
    "split_segments",
]

HIDDEN_MARKER = "."
_SEPARATORS = re.compile(r"[\\/]")


def split_segments(path: str) -> list[str]:
    """Split ``path`` on either separator style, dropping empty segments."""

    return [segment for segment in _SEPARATORS.split(path) if segment]


def has_hidden_segment(path: str) -> bool:
    return any(segment.startswith(HIDDEN_MARKER) for segment in split_segments(path))


@dataclass(slots=True, frozen=True)
class RootFolder:
    """A configured snippet folder that passed validation."""

    path: str
    exists: bool = True

    @property
    def name(self) -> str:
        """Last path segment, used to group entries in descriptions."""

        segments = split_segments(self.path)
        return segments[-1] if segments else self.path


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """A file below a root; ``relative_path`` is always ``/``-separated."""

    relative_path: str
    source_root: RootFolder

    @property
    def key(self) -> tuple[str, str]:
        return (self.source_root.path, self.relative_path)

    @property
    def file_name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def absolute_path(self) -> str:
        return os.path.join(self.source_root.path, *self.relative_path.split("/"))


@dataclass(slots=True)
class DisplayRecord:
    """Selectable list row for one catalog entry.

    ``preview`` is the only mutable field; the session keeps it set on at most
    one rendered record.
    """

    label: str
    description: str
    absolute_path: str
    root_path: str
    relative_path: str
    preview: str | None = None


class NavigationDirection(Enum):
    PREVIOUS = "previous"
    NEXT = "next"


@dataclass(slots=True, frozen=True)
class NavigationMarker:
    """Pseudo-row that moves between pages when accepted."""

    direction: NavigationDirection
    label: str
    description: str

    @classmethod
    def previous_page(cls) -> "NavigationMarker":
        return cls(
            NavigationDirection.PREVIOUS,
            "← Previous Page",
            "Go to previous page. Use ↑/↓ arrows and Enter to select.",
        )

    @classmethod
    def next_page(cls) -> "NavigationMarker":
        return cls(
            NavigationDirection.NEXT,
            "Next Page →",
            "Go to next page. Use ↑/↓ arrows and Enter to select.",
        )


ListItem = Union[DisplayRecord, NavigationMarker]


@dataclass(slots=True)
class PageState:
    """Pagination cursor over the unfiltered catalog."""

    page_size: int
    total_pages: int = 1
    page_index: int = 0

    @classmethod
    def for_count(cls, count: int, page_size: int) -> "PageState":
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        return cls(page_size=page_size, total_pages=max(1, math.ceil(count / page_size)))

    def clamp(self, index: int) -> int:
        return max(0, min(index, self.total_pages - 1))

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages - 1

    def slice_bounds(self, count: int) -> tuple[int, int]:
        start = self.page_index * self.page_size
        return start, min(start + self.page_size, count)
