"""Mapping between catalog entries and the rows shown in the picker."""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import CatalogEntry, DisplayRecord, ListItem

__all__ = ["DisplayProjector"]


class DisplayProjector:
    """Projects catalog entries to display records and resolves them back."""

    def __init__(self, catalog: Iterable[CatalogEntry] = ()) -> None:
        self._index: dict[tuple[str, str], CatalogEntry] = {}
        for entry in catalog:
            self._index.setdefault(entry.key, entry)

    @staticmethod
    def project(entry: CatalogEntry) -> DisplayRecord:
        return DisplayRecord(
            label=entry.file_name,
            description=f"{entry.source_root.name}/{entry.relative_path}",
            absolute_path=entry.absolute_path,
            root_path=entry.source_root.path,
            relative_path=entry.relative_path,
        )

    def project_all(self, entries: Sequence[CatalogEntry]) -> list[DisplayRecord]:
        return [self.project(entry) for entry in entries]

    def resolve(self, item: ListItem | None) -> CatalogEntry | None:
        """Return the catalog entry behind ``item``; markers and unknown rows give ``None``."""

        if not isinstance(item, DisplayRecord):
            return None
        return self._index.get((item.root_path, item.relative_path))
