"""Validation of the configured snippet root folders."""

from __future__ import annotations

import logging
import os
from typing import Sequence

from ..services.filesystem import FileSystem
from ..services.notifications import Notifier
from .errors import ConfigurationError, FolderAccessError
from .models import RootFolder, has_hidden_segment

__all__ = ["FolderValidator"]

LOGGER = logging.getLogger(__name__)

_EMPTY_CONFIGURATION = (
    "Please configure at least one snippet folder in settings (snippet_folders)."
)
_NOTHING_USABLE = "No valid snippet folders configured."


class FolderValidator:
    """Filters configured folder paths down to the accessible, non-hidden ones."""

    def __init__(self, fs: FileSystem, notifier: Notifier) -> None:
        self._fs = fs
        self._notifier = notifier

    async def validate(self, folder_paths: Sequence[str] | None) -> list[RootFolder]:
        """Return the accessible roots in configured order, reporting problems to the user.

        A fatal problem is reported as an error and yields an empty list; a
        partial failure is reported as a warning and the reachable roots are
        still returned. Duplicates are preserved.
        """

        try:
            roots, failed = await self._check(folder_paths or ())
        except (ConfigurationError, FolderAccessError) as exc:
            LOGGER.error("%s", exc)
            self._notifier.error(str(exc))
            return []
        if failed:
            self._notifier.warning(str(FolderAccessError(failed)))
        return roots

    async def _check(self, folder_paths: Sequence[str]) -> tuple[list[RootFolder], list[str]]:
        if not folder_paths:
            raise ConfigurationError(_EMPTY_CONFIGURATION)

        roots: list[RootFolder] = []
        failed: list[str] = []
        for raw in folder_paths:
            candidate = (raw or "").strip()
            if not candidate:
                continue
            if has_hidden_segment(candidate):
                LOGGER.debug("Skipping hidden snippet folder %s", candidate)
                continue
            resolved = os.path.abspath(os.path.expanduser(candidate))
            if await self._is_accessible(resolved):
                roots.append(RootFolder(resolved, exists=True))
            else:
                LOGGER.warning("Snippet folder not accessible: %s", candidate)
                failed.append(candidate)

        if not roots:
            if failed:
                raise FolderAccessError(failed, fatal=True)
            raise ConfigurationError(_NOTHING_USABLE)
        return roots, failed

    async def _is_accessible(self, path: str) -> bool:
        try:
            return bool(await self._fs.exists(path))
        except OSError as exc:
            LOGGER.debug("Existence check failed for %s: %s", path, exc)
            return False

