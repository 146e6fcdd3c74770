"""Service layer: settings persistence and host collaborators."""

from .filesystem import DirectoryEntry, FileSystem, LocalFileSystem, read_text
from .notifications import LoggingNotifier, Notifier

__all__ = [
    "DirectoryEntry",
    "FileSystem",
    "LocalFileSystem",
    "LoggingNotifier",
    "Notifier",
    "read_text",
]
