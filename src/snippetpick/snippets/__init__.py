"""Snippet catalog, search, preview and the interactive picker session."""

from .errors import (
    ConfigurationError,
    ContentReadError,
    EnumerationError,
    FolderAccessError,
    InsertionError,
    PreviewLoadError,
    SnippetError,
)
from .models import (
    CatalogEntry,
    DisplayRecord,
    ListItem,
    NavigationDirection,
    NavigationMarker,
    PageState,
    RootFolder,
)

__all__ = [
    "CatalogEntry",
    "ConfigurationError",
    "ContentReadError",
    "DisplayRecord",
    "EnumerationError",
    "FolderAccessError",
    "InsertionError",
    "ListItem",
    "NavigationDirection",
    "NavigationMarker",
    "PageState",
    "PreviewLoadError",
    "RootFolder",
    "SnippetError",
]
