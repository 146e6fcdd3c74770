"""Shared test helpers and stub classes.

This module contains reusable doubles for the collaborators the snippet
picker talks to (file system, notifier, editor, list widget and timer).
Import from here instead of duplicating these classes in individual test files.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

from snippetpick.services.filesystem import DirectoryEntry
from snippetpick.snippets.models import DisplayRecord, ListItem


class FakeFileSystem:
    """In-memory :class:`~snippetpick.services.filesystem.FileSystem`.

    Directories are derived from the parents of every file; extra empty
    directories can be listed explicitly.

    Example:
        fs = FakeFileSystem({"/snips/a.py": "print('a')"})
        entries = asyncio.run(fs.list_directory("/snips"))
    """

    def __init__(
        self,
        files: Mapping[str, str | bytes] | None = None,
        *,
        directories: Iterable[str] = (),
        unreadable: Iterable[str] = (),
        failing_reads: Iterable[str] = (),
        read_delays: Mapping[str, float] | None = None,
    ) -> None:
        self.files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            data = content.encode("utf-8") if isinstance(content, str) else content
            self.files[os.path.normpath(path)] = data
        self.directories: set[str] = set()
        for path in self.files:
            self._add_parents(path)
        for directory in directories:
            normalized = os.path.normpath(directory)
            self.directories.add(normalized)
            self._add_parents(normalized)
        self.unreadable = {os.path.normpath(path) for path in unreadable}
        self.failing_reads = {os.path.normpath(path) for path in failing_reads}
        self.read_delays = dict(read_delays or {})
        self.reads: list[str] = []
        self.listed: list[str] = []

    async def exists(self, path: str) -> bool:
        normalized = os.path.normpath(path)
        return normalized in self.files or normalized in self.directories

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        normalized = os.path.normpath(path)
        self.listed.append(normalized)
        if normalized in self.unreadable:
            raise PermissionError(13, "Permission denied", path)
        if normalized not in self.directories:
            raise FileNotFoundError(2, "No such directory", path)
        children: dict[str, bool] = {}
        for candidate in (*self.directories, *self.files):
            if os.path.dirname(candidate) == normalized and candidate != normalized:
                children[os.path.basename(candidate)] = candidate in self.directories
        return [DirectoryEntry(name, is_dir) for name, is_dir in children.items()]

    async def read_file(self, path: str) -> bytes:
        self.reads.append(path)
        delay = self.read_delays.get(path)
        if delay:
            await asyncio.sleep(delay)
        normalized = os.path.normpath(path)
        if normalized in self.failing_reads:
            raise PermissionError(13, "Permission denied", path)
        if normalized not in self.files:
            raise FileNotFoundError(2, "No such file", path)
        return self.files[normalized]

    def _add_parents(self, path: str) -> None:
        parent = os.path.dirname(path)
        while parent and parent not in self.directories:
            self.directories.add(parent)
            next_parent = os.path.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent


class RecordingNotifier:
    """Notifier that keeps every message instead of showing it."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@dataclass
class FakeEditingSurface:
    """Editing surface double recording what was written where."""

    active: bool = True
    selection_empty: bool = True
    fail_with: Exception | None = None
    inserted: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    opened: list[tuple[str, str | None]] = field(default_factory=list)
    presented: list[Any] = field(default_factory=list)

    def has_active_surface(self) -> bool:
        return self.active

    def current_selection_empty(self) -> bool:
        return self.selection_empty

    def replace_selection(self, text: str) -> None:
        self._maybe_fail()
        self.replaced.append(text)

    def insert_at_cursor(self, text: str) -> None:
        self._maybe_fail()
        self.inserted.append(text)

    def open_new_document(self, content: str, language: str | None) -> Any:
        self._maybe_fail()
        self.opened.append((content, language))
        return {"content": content, "language": language}

    def present(self, document: Any) -> None:
        self.presented.append(document)

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class FakePickerWidget:
    """List widget double with Qt-like current-row behaviour.

    ``render`` is silent; the helper methods simulate user interaction and
    report it to the bound listener.
    """

    def __init__(self) -> None:
        self.listener: Any = None
        self.items: list[ListItem] = []
        self.placeholder = ""
        self.current: ListItem | None = None
        self.render_calls = 0
        self.shown = 0
        self.disposed = 0

    @property
    def selected_item(self) -> ListItem | None:
        return self.current

    @property
    def highlighted_items(self) -> Sequence[ListItem]:
        return [self.current] if self.current is not None else []

    def bind(self, listener: Any) -> None:
        self.listener = listener

    def render(self, items: Sequence[ListItem], placeholder: str, *, active: ListItem | None = None) -> None:
        self.render_calls += 1
        self.items = list(items)
        self.placeholder = placeholder
        if active is not None and any(item is active for item in self.items):
            self.current = active
        else:
            self.current = self.items[0] if self.items else None

    def show(self) -> None:
        self.shown += 1

    def dispose(self) -> None:
        self.disposed += 1

    # user interaction ---------------------------------------------------
    def type_query(self, text: str) -> None:
        self.listener.on_query_changed(text)

    def highlight(self, item: ListItem | None) -> None:
        self.current = item
        self.listener.on_highlight_changed(item)

    def highlight_label(self, label: str) -> DisplayRecord:
        record = next(item for item in self.records() if item.label == label)
        self.highlight(record)
        return record

    def accept(self) -> None:
        self.listener.on_accept()

    def dismiss(self) -> None:
        self.listener.on_dismiss()

    def records(self) -> list[DisplayRecord]:
        return [item for item in self.items if isinstance(item, DisplayRecord)]

    def labels(self) -> list[str]:
        return [item.label for item in self.items]


@dataclass
class _ScheduledCall:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False


class ManualScheduler:
    """Scheduler whose timers only fire when the test says so."""

    def __init__(self) -> None:
        self.calls: list[_ScheduledCall] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> _ScheduledCall:
        call = _ScheduledCall(delay, callback)
        self.calls.append(call)
        return call

    def cancel(self, handle: Any) -> None:
        handle.cancelled = True

    @property
    def pending(self) -> list[_ScheduledCall]:
        return [call for call in self.calls if not call.cancelled and not call.fired]

    def fire_all(self) -> int:
        fired = 0
        for call in self.pending:
            call.fired = True
            call.callback()
            fired += 1
        return fired


def make_snippet_tree(root: str, names: Iterable[str], *, content: str = "x") -> dict[str, str]:
    """Return a ``files`` mapping with one file per relative name under ``root``."""

    return {os.path.join(root, *name.split("/")): f"{content}:{name}" for name in names}
