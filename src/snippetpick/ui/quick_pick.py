"""Qt list widget that hosts a snippet picker session."""

from __future__ import annotations

from typing import Any, Sequence

from PySide6.QtCore import QCoreApplication, Qt
from PySide6.QtWidgets import (
    QDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..snippets.models import ListItem, NavigationMarker
from ..snippets.session import PickerListener

__all__ = ["QuickPickDialog", "format_item_text"]

_ITEM_ROLE = Qt.ItemDataRole.UserRole
_FORWARDED_KEYS = {
    Qt.Key.Key_Up,
    Qt.Key.Key_Down,
    Qt.Key.Key_PageUp,
    Qt.Key.Key_PageDown,
}


def format_item_text(item: ListItem) -> str:
    """Row text: label and description, followed by the preview when present."""

    if isinstance(item, NavigationMarker):
        return item.label
    text = f"{item.label}    {item.description}"
    if item.preview:
        text = f"{text}\n{item.preview}"
    return text


class _QueryInput(QLineEdit):
    """Search box that lets arrow keys drive the result list."""

    def __init__(self, list_widget: QListWidget, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._list_widget = list_widget

    def keyPressEvent(self, event: Any) -> None:  # noqa: N802 - Qt override
        if event.key() in _FORWARDED_KEYS:
            QCoreApplication.sendEvent(self._list_widget, event)
            return
        super().keyPressEvent(event)


class QuickPickDialog(QDialog):
    """Filterable single-selection list driven entirely by its listener.

    The dialog never filters on its own: typing reports the query, and the
    listener answers with :meth:`render`. Rendering is silent, so only user
    interaction produces highlight events.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Insert Code Snippet")
        self.setObjectName("snippetpick-quick-pick")
        self.setModal(False)
        self.resize(720, 480)
        self._listener: PickerListener | None = None
        self._disposed = False

        layout = QVBoxLayout(self)
        self._list_widget = QListWidget(self)
        self._list_widget.setObjectName("quick_pick_list")
        self._list_widget.setWordWrap(True)
        self._query_input = _QueryInput(self._list_widget, self)
        self._query_input.setObjectName("quick_pick_query")
        self._status_label = QLabel(self)
        self._status_label.setObjectName("quick_pick_status")
        self._status_label.setWordWrap(True)
        layout.addWidget(self._query_input)
        layout.addWidget(self._status_label)
        layout.addWidget(self._list_widget)

        self._query_input.textChanged.connect(self._handle_query_changed)
        self._query_input.returnPressed.connect(self._handle_accept)
        self._list_widget.currentItemChanged.connect(self._handle_current_changed)
        self._list_widget.itemActivated.connect(self._handle_item_activated)
        self.rejected.connect(self._handle_dismissed)

    # ------------------------------------------------------------------
    # PickerWidget surface
    # ------------------------------------------------------------------
    @property
    def selected_item(self) -> ListItem | None:
        current = self._list_widget.currentItem()
        if current is None:
            return None
        return current.data(_ITEM_ROLE)

    @property
    def highlighted_items(self) -> Sequence[ListItem]:
        selected = self.selected_item
        return [selected] if selected is not None else []

    @property
    def query_input(self) -> QLineEdit:
        return self._query_input

    @property
    def list_widget(self) -> QListWidget:
        return self._list_widget

    def bind(self, listener: PickerListener) -> None:
        self._listener = listener

    def render(self, items: Sequence[ListItem], placeholder: str, *, active: ListItem | None = None) -> None:
        if self._disposed:
            return
        widget = self._list_widget
        widget.blockSignals(True)
        try:
            widget.clear()
            active_row = 0
            for row, item in enumerate(items):
                entry = QListWidgetItem(format_item_text(item))
                entry.setData(_ITEM_ROLE, item)
                entry.setToolTip(item.description)
                if isinstance(item, NavigationMarker):
                    font = entry.font()
                    font.setItalic(True)
                    entry.setFont(font)
                widget.addItem(entry)
                if active is not None and item is active:
                    active_row = row
            if widget.count():
                widget.setCurrentRow(active_row)
        finally:
            widget.blockSignals(False)
        self._query_input.setPlaceholderText(placeholder)
        self._status_label.setText(placeholder)

    def show(self) -> None:
        super().show()
        self.raise_()
        self.activateWindow()
        self._query_input.setFocus()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._listener = None
        self.close()
        self.deleteLater()

    # ------------------------------------------------------------------
    # Qt signal handlers
    # ------------------------------------------------------------------
    def closeEvent(self, event: Any) -> None:  # noqa: N802 - Qt override
        self._handle_dismissed()
        super().closeEvent(event)

    def _handle_query_changed(self, text: str) -> None:
        if self._listener is not None:
            self._listener.on_query_changed(text)

    def _handle_current_changed(self, current: QListWidgetItem | None, _previous: Any = None) -> None:
        if self._listener is None:
            return
        item = current.data(_ITEM_ROLE) if current is not None else None
        self._listener.on_highlight_changed(item)

    def _handle_item_activated(self, item: QListWidgetItem | None) -> None:
        if item is not None:
            self._list_widget.setCurrentItem(item)
        self._handle_accept()

    def _handle_accept(self) -> None:
        if self._listener is not None:
            self._listener.on_accept()

    def _handle_dismissed(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.on_dismiss()
