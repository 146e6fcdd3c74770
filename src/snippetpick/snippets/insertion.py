"""Hand-off of accepted snippet content to the editor."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from ..services.notifications import Notifier
from ..utils.file_io import detect_language
from .errors import InsertionError
from .models import DisplayRecord

__all__ = ["EditingSurface", "InsertionService"]

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class EditingSurface(Protocol):
    """Host text-editing capability."""

    def has_active_surface(self) -> bool:
        ...

    def current_selection_empty(self) -> bool:
        ...

    def replace_selection(self, text: str) -> None:
        ...

    def insert_at_cursor(self, text: str) -> None:
        ...

    def open_new_document(self, content: str, language: str | None) -> Any:
        ...

    def present(self, document: Any) -> None:
        ...


class InsertionService:
    """Writes snippet content into the active editor or a fresh untitled document."""

    def __init__(self, surface: EditingSurface, notifier: Notifier) -> None:
        self._surface = surface
        self._notifier = notifier

    def insert(self, content: str, record: DisplayRecord) -> bool:
        """Insert ``content``; failures are reported to the user and ``False`` is returned."""

        try:
            self._insert(content, record)
        except Exception as exc:
            error = InsertionError(f"Failed to insert snippet {record.label}: {exc}")
            LOGGER.exception("%s", error)
            self._notifier.error(str(error))
            return False
        return True

    def _insert(self, content: str, record: DisplayRecord) -> None:
        surface = self._surface
        if surface.has_active_surface():
            if surface.current_selection_empty():
                surface.insert_at_cursor(content)
            else:
                surface.replace_selection(content)
            LOGGER.debug("Inserted %s into the active editor", record.absolute_path)
            return
        language = detect_language(record.absolute_path)
        document = surface.open_new_document(content, language)
        surface.present(document)
        LOGGER.debug("Opened %s in a new document (language=%s)", record.absolute_path, language)
