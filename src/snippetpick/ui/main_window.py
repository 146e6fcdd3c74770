"""Tabbed editor window that hosts the Insert Code Snippet command."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

from PySide6.QtCore import QByteArray
from PySide6.QtGui import QAction, QFont, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMessageBox, QPlainTextEdit, QTabWidget, QWidget

from ..services.filesystem import FileSystem, LocalFileSystem
from ..services.settings import Settings, SettingsStore
from ..snippets.command import InsertSnippetCommand
from .quick_pick import QuickPickDialog

__all__ = ["EditorTab", "MainWindow"]

LOGGER = logging.getLogger(__name__)

_STATUS_TIMEOUT_MS = 5_000


class EditorTab(QPlainTextEdit):
    """Plain-text editor tab tagged with a language id."""

    def __init__(self, content: str = "", *, language: str | None = None, title: str = "Untitled") -> None:
        super().__init__()
        self.language = language
        self.title = title
        self.setPlainText(content)


class MainWindow(QMainWindow):
    """Editor window; acts as the editing surface and notifier for snippet commands."""

    def __init__(
        self,
        settings_provider: Callable[[], Settings],
        *,
        store: SettingsStore | None = None,
        fs: FileSystem | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._untitled_counter = 1
        settings = settings_provider()
        self._font = QFont(settings.font_family, settings.font_size)

        self.setWindowTitle("snippetpick")
        self._tabs = QTabWidget(self)
        self._tabs.setObjectName("editor_tabs")
        self._tabs.setTabsClosable(True)
        self._tabs.setDocumentMode(True)
        self._tabs.tabCloseRequested.connect(self._close_tab)
        self.setCentralWidget(self._tabs)

        self._command = InsertSnippetCommand(
            settings_provider,
            fs=fs or LocalFileSystem(),
            notifier=self,
            editor=self,
            widget_factory=lambda: QuickPickDialog(self),
        )
        self._actions = self._build_actions()
        self._restore_geometry(settings.window_geometry)
        self.statusBar().showMessage("Ready")

    @property
    def command(self) -> InsertSnippetCommand:
        return self._command

    @property
    def actions_by_name(self) -> dict[str, QAction]:
        return dict(self._actions)

    @property
    def tabs(self) -> QTabWidget:
        return self._tabs

    def trigger_insert_snippet(self) -> None:
        self._run_coroutine(self._command.run())

    # ------------------------------------------------------------------
    # EditingSurface
    # ------------------------------------------------------------------
    def has_active_surface(self) -> bool:
        return self._current_editor() is not None

    def current_selection_empty(self) -> bool:
        editor = self._require_editor()
        return not editor.textCursor().hasSelection()

    def replace_selection(self, text: str) -> None:
        self._write_at_cursor(text)

    def insert_at_cursor(self, text: str) -> None:
        self._write_at_cursor(text)

    def open_new_document(self, content: str, language: str | None) -> EditorTab:
        title = f"Untitled-{self._untitled_counter}"
        self._untitled_counter += 1
        tab = EditorTab(content, language=language, title=title)
        tab.setFont(self._font)
        index = self._tabs.addTab(tab, title)
        self._tabs.setTabToolTip(index, language or "plain text")
        return tab

    def present(self, document: Any) -> None:
        if isinstance(document, QWidget):
            self._tabs.setCurrentWidget(document)
            document.setFocus()

    # ------------------------------------------------------------------
    # Notifier
    # ------------------------------------------------------------------
    def info(self, message: str) -> None:
        LOGGER.info(message)
        self.statusBar().showMessage(message, _STATUS_TIMEOUT_MS)

    def warning(self, message: str) -> None:
        LOGGER.warning(message)
        self._show_message(QMessageBox.Icon.Warning, message)

    def error(self, message: str) -> None:
        LOGGER.error(message)
        self._show_message(QMessageBox.Icon.Critical, message)

    # ------------------------------------------------------------------
    # Qt plumbing
    # ------------------------------------------------------------------
    def closeEvent(self, event: Any) -> None:  # noqa: N802 - Qt override
        session = self._command.session
        if session is not None:
            session.close()
        self._persist_geometry()
        super().closeEvent(event)

    def _build_actions(self) -> dict[str, QAction]:
        menu = self.menuBar().addMenu("&File")
        specs = (
            ("file_new", "&New", QKeySequence.StandardKey.New, self._new_document),
            (
                "insert_code_snippet",
                InsertSnippetCommand.title,
                QKeySequence("Ctrl+Alt+I"),
                self.trigger_insert_snippet,
            ),
            ("file_close", "&Close Tab", QKeySequence.StandardKey.Close, self._close_current_tab),
        )
        actions: dict[str, QAction] = {}
        for name, text, shortcut, callback in specs:
            action = QAction(text, self)
            action.setObjectName(name)
            action.setShortcut(shortcut)
            action.triggered.connect(lambda _checked=False, cb=callback: cb())
            menu.addAction(action)
            actions[name] = action
        return actions

    def _new_document(self) -> None:
        self.present(self.open_new_document("", None))

    def _close_current_tab(self) -> None:
        index = self._tabs.currentIndex()
        if index >= 0:
            self._close_tab(index)

    def _close_tab(self, index: int) -> None:
        widget = self._tabs.widget(index)
        self._tabs.removeTab(index)
        if widget is not None:
            widget.deleteLater()

    def _current_editor(self) -> EditorTab | None:
        widget = self._tabs.currentWidget()
        return widget if isinstance(widget, EditorTab) else None

    def _require_editor(self) -> EditorTab:
        editor = self._current_editor()
        if editor is None:
            raise RuntimeError("No active editor tab")
        return editor

    def _write_at_cursor(self, text: str) -> None:
        editor = self._require_editor()
        cursor = editor.textCursor()
        # insertText replaces the selection when there is one.
        cursor.insertText(text)
        editor.setTextCursor(cursor)
        editor.setFocus()

    def _show_message(self, icon: QMessageBox.Icon, message: str) -> None:
        box = QMessageBox(icon, "snippetpick", message, QMessageBox.StandardButton.Ok, self)
        box.setObjectName("snippetpick-message")
        box.open()

    def _run_coroutine(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return None
        task = loop.create_task(coro)
        task.add_done_callback(self._on_command_finished)
        return task

    def _on_command_finished(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Insert Code Snippet failed", exc_info=exc)
            self.error(f"Insert Code Snippet failed: {exc}")

    def _restore_geometry(self, encoded: str | None) -> None:
        if not encoded:
            self.resize(1000, 700)
            return
        if not self.restoreGeometry(QByteArray.fromBase64(encoded.encode("ascii"))):
            LOGGER.debug("Ignoring unreadable window geometry")
            self.resize(1000, 700)

    def _persist_geometry(self) -> None:
        if self._store is None:
            return
        encoded = bytes(self.saveGeometry().toBase64().data()).decode("ascii")
        try:
            self._store.update(window_geometry=encoded)
        except OSError as exc:
            LOGGER.warning("Unable to persist window geometry: %s", exc)
