"""The "Insert Code Snippet" command."""

from __future__ import annotations

import logging
from typing import Callable

from ..services.filesystem import FileSystem, read_text
from ..services.notifications import LoggingNotifier, Notifier
from ..services.settings import Settings
from .catalog import FileCatalog
from .folders import FolderValidator
from .insertion import EditingSurface, InsertionService
from .preview import LoopScheduler, Scheduler
from .session import PickerWidget, SnippetPickerSession

__all__ = ["InsertSnippetCommand"]

LOGGER = logging.getLogger(__name__)

_NO_FILES = "No files found in any of the snippet folders."


class InsertSnippetCommand:
    """Builds the snippet catalog and opens a picker session over it.

    Without a ``notifier`` user messages only reach the log.
    """

    command_id = "snippetpick.insertCodeSnippet"
    title = "Insert Code Snippet"

    def __init__(
        self,
        settings_provider: Callable[[], Settings],
        *,
        fs: FileSystem,
        editor: EditingSurface,
        notifier: Notifier | None = None,
        widget_factory: Callable[[], PickerWidget],
        scheduler_factory: Callable[[], Scheduler] = LoopScheduler,
    ) -> None:
        self._settings_provider = settings_provider
        self._fs = fs
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._editor = editor
        self._widget_factory = widget_factory
        self._scheduler_factory = scheduler_factory
        self._session: SnippetPickerSession | None = None

    @property
    def session(self) -> SnippetPickerSession | None:
        """The most recently opened session, if any."""

        return self._session

    async def run(self) -> SnippetPickerSession | None:
        settings = self._settings_provider()
        roots = await FolderValidator(self._fs, self._notifier).validate(settings.snippet_folders)
        if not roots:
            return None

        catalog = await FileCatalog(self._fs).build(roots)
        if not catalog:
            self._notifier.warning(_NO_FILES)
            return None
        LOGGER.info("Snippet catalog ready: %d file(s) from %d folder(s)", len(catalog), len(roots))

        if self._session is not None:
            self._session.close()

        fs = self._fs

        async def _read(path: str) -> str:
            return await read_text(fs, path)

        session = SnippetPickerSession(
            catalog,
            widget=self._widget_factory(),
            read_content=_read,
            insertion=InsertionService(self._editor, self._notifier),
            notifier=self._notifier,
            scheduler=self._scheduler_factory(),
            config=settings.session_config(),
        )
        self._session = session
        session.open()
        return session
