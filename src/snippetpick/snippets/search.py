"""Substring filtering of the catalog."""

from __future__ import annotations

from typing import Sequence

from .models import CatalogEntry
from .projection import DisplayProjector

__all__ = ["SearchFilter"]


class SearchFilter:
    """Case-insensitive containment match on label or description."""

    def __init__(self, projector: DisplayProjector | None = None) -> None:
        self._projector = projector or DisplayProjector()

    @staticmethod
    def is_active(query: str | None) -> bool:
        return bool(query)

    def matches(self, entry: CatalogEntry, needle: str) -> bool:
        record = self._projector.project(entry)
        return needle in record.label.casefold() or needle in record.description.casefold()

    def apply(self, query: str | None, catalog: Sequence[CatalogEntry]) -> list[CatalogEntry]:
        """Return matching entries in catalog order; an empty query returns everything."""

        if not self.is_active(query):
            return list(catalog)
        needle = (query or "").casefold()
        return [entry for entry in catalog if self.matches(entry, needle)]
