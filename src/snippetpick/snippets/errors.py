"""Exception hierarchy for the snippet picker workflow."""

from __future__ import annotations

from typing import Iterable

__all__ = [
    "SnippetError",
    "ConfigurationError",
    "FolderAccessError",
    "EnumerationError",
    "PreviewLoadError",
    "ContentReadError",
    "InsertionError",
]


class SnippetError(Exception):
    """Base class for every snippet picker failure."""


class ConfigurationError(SnippetError):
    """No usable snippet folder is configured."""


class FolderAccessError(SnippetError):
    """One or more configured folders could not be reached.

    ``fatal`` is set when none of the configured folders were accessible.
    """

    def __init__(self, failed: Iterable[str], *, fatal: bool = False) -> None:
        self.failed = tuple(failed)
        self.fatal = fatal
        joined = ", ".join(self.failed)
        if fatal:
            message = f"No snippet folders are accessible. Checked: {joined}"
        else:
            message = f"Some snippet folders are not accessible: {joined}"
        super().__init__(message)


class EnumerationError(SnippetError):
    """A directory below a snippet root could not be listed."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Error reading snippet folder {path}{detail}")


class PreviewLoadError(SnippetError):
    """Reading a file for the highlight preview failed."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Unable to load preview for {path}{detail}")


class ContentReadError(SnippetError):
    """Reading the accepted snippet file failed."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to read snippet file {path}{detail}")


class InsertionError(SnippetError):
    """The editing surface rejected the snippet content."""
