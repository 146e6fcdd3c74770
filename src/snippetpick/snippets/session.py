"""Interactive snippet picker session.

The session owns the catalog for one invocation of the picker and drives a
host list widget through four states:

``IDLE``
    constructed, not yet shown.
``BROWSING``
    paged view of the whole catalog with previous/next markers.
``FILTERING``
    flat, unpaged list of entries matching a non-empty query.
``CLOSED``
    terminal; the widget has been disposed and further events are ignored.

Every state change rebuilds the rendered items from scratch. Previews are
delegated to :class:`~snippetpick.snippets.preview.PreviewService`, and accepted
rows are handed to :class:`~snippetpick.snippets.insertion.InsertionService`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Coroutine, Protocol, Sequence

from ..services.notifications import Notifier
from .errors import ContentReadError, SnippetError
from .insertion import InsertionService
from .models import (
    CatalogEntry,
    DisplayRecord,
    ListItem,
    NavigationDirection,
    NavigationMarker,
    PageState,
)
from .preview import PreviewConfig, PreviewService, Scheduler
from .projection import DisplayProjector
from .search import SearchFilter

__all__ = [
    "PickerListener",
    "PickerWidget",
    "SessionConfig",
    "SessionState",
    "SnippetPickerSession",
]

LOGGER = logging.getLogger(__name__)

_PLACEHOLDER_HINT = "Use ↑/↓ arrows to navigate, Enter to select, Esc to cancel."

ContentReader = Callable[[str], Awaitable[str]]


class SessionState(Enum):
    IDLE = "idle"
    BROWSING = "browsing"
    FILTERING = "filtering"
    CLOSED = "closed"


@dataclass(slots=True, frozen=True)
class SessionConfig:
    """Explicit per-session configuration."""

    page_size: int = 50
    preview: PreviewConfig = field(default_factory=PreviewConfig)


class PickerListener(Protocol):
    """Events a picker widget reports back to its session."""

    def on_query_changed(self, text: str) -> None:
        ...

    def on_highlight_changed(self, item: ListItem | None) -> None:
        ...

    def on_accept(self) -> None:
        ...

    def on_dismiss(self) -> None:
        ...


class PickerWidget(Protocol):
    """Single-selection list widget rendered by the session.

    ``render`` must not report events back to the listener.
    """

    @property
    def selected_item(self) -> ListItem | None:
        ...

    @property
    def highlighted_items(self) -> Sequence[ListItem]:
        ...

    def bind(self, listener: PickerListener) -> None:
        ...

    def render(self, items: Sequence[ListItem], placeholder: str, *, active: ListItem | None = None) -> None:
        ...

    def show(self) -> None:
        ...

    def dispose(self) -> None:
        ...


class SnippetPickerSession:
    """State machine behind one snippet picker invocation."""

    def __init__(
        self,
        catalog: Sequence[CatalogEntry],
        *,
        widget: PickerWidget,
        read_content: ContentReader,
        insertion: InsertionService,
        notifier: Notifier,
        scheduler: Scheduler,
        config: SessionConfig | None = None,
    ) -> None:
        self._config = config or SessionConfig()
        self._catalog = list(catalog)
        self._projector = DisplayProjector(self._catalog)
        self._search = SearchFilter(self._projector)
        self._page = PageState.for_count(len(self._catalog), self._config.page_size)
        self._widget = widget
        self._read_content = read_content
        self._insertion = insertion
        self._notifier = notifier
        self._preview = PreviewService(
            read_content,
            self._apply_preview,
            scheduler=scheduler,
            config=self._config.preview,
        )
        self._state = SessionState.IDLE
        self._query = ""
        self._items: list[ListItem] = []
        self._placeholder = ""
        self._highlighted: ListItem | None = None
        self._accepting = False
        self._tasks: set[asyncio.Task[Any]] = set()
        widget.bind(self)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def page(self) -> PageState:
        return self._page

    @property
    def query(self) -> str:
        return self._query

    @property
    def items(self) -> list[ListItem]:
        return list(self._items)

    @property
    def placeholder(self) -> str:
        return self._placeholder

    @property
    def highlighted(self) -> ListItem | None:
        return self._highlighted

    @property
    def preview_service(self) -> PreviewService:
        return self._preview

    @property
    def is_open(self) -> bool:
        return self._state in (SessionState.BROWSING, SessionState.FILTERING)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> None:
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Cannot open a snippet session in state {self._state.value}")
        self._state = SessionState.BROWSING
        self._page.page_index = 0
        LOGGER.debug(
            "Opening snippet picker: %d file(s), %d page(s)",
            len(self._catalog),
            self._page.total_pages,
        )
        self._render()
        self._widget.show()

    def close(self) -> None:
        """Dispose the widget; safe to call repeatedly."""

        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        self._preview.cancel()
        self._highlighted = None
        self._widget.dispose()
        LOGGER.debug("Snippet picker closed")

    async def wait_idle(self) -> None:
        """Wait for pending accept handlers and preview loads."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._preview.wait_idle()

    # ------------------------------------------------------------------
    # Widget events
    # ------------------------------------------------------------------
    def on_query_changed(self, text: str) -> None:
        if not self.is_open:
            return
        self._query = text or ""
        if self._search.is_active(self._query):
            self._state = SessionState.FILTERING
        else:
            self._state = SessionState.BROWSING
            self._page.page_index = 0
        self._render()

    def on_highlight_changed(self, item: ListItem | None) -> None:
        if not self.is_open:
            return
        self._highlighted = item
        if not isinstance(item, DisplayRecord):
            self._preview.request(None)
            return
        if item.preview is not None and self._preview.target == item.absolute_path:
            return
        self._preview.request(item.absolute_path)

    def on_accept(self) -> None:
        if not self.is_open:
            return
        self._spawn(self.accept())

    def on_dismiss(self) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_page(self) -> None:
        self._go_to_page(self._page.page_index + 1)

    def previous_page(self) -> None:
        self._go_to_page(self._page.page_index - 1)

    def _go_to_page(self, index: int) -> None:
        if self._state is not SessionState.BROWSING:
            return
        self._page.page_index = self._page.clamp(index)
        self._render()

    # ------------------------------------------------------------------
    # Acceptance
    # ------------------------------------------------------------------
    async def accept(self) -> None:
        """Resolve the selected row: turn the page, or insert the file and close."""

        if not self.is_open or self._accepting:
            return
        picked = self._widget.selected_item
        if isinstance(picked, NavigationMarker):
            if picked.direction is NavigationDirection.PREVIOUS:
                self.previous_page()
            else:
                self.next_page()
            return

        entry = self._projector.resolve(picked)
        if picked is None or entry is None:
            self.close()
            return

        self._accepting = True
        try:
            try:
                content = await self._read_content(entry.absolute_path)
            except (OSError, UnicodeDecodeError) as exc:
                raise ContentReadError(entry.absolute_path, exc) from exc
            if self._state is SessionState.CLOSED:
                LOGGER.debug("Picker dismissed while reading %s; not inserting", entry.absolute_path)
                return
            self._insertion.insert(content, picked)
        except SnippetError as exc:
            LOGGER.error("%s", exc)
            self._notifier.error(str(exc))
        finally:
            self.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(self) -> None:
        if self._state is SessionState.FILTERING:
            matches = self._search.apply(self._query, self._catalog)
            items: list[ListItem] = list(self._projector.project_all(matches))
            placeholder = f"Select a snippet file to insert ({len(matches)} results). {_PLACEHOLDER_HINT}"
        else:
            start, end = self._page.slice_bounds(len(self._catalog))
            items = list(self._projector.project_all(self._catalog[start:end]))
            if self._page.has_previous:
                items.insert(0, NavigationMarker.previous_page())
            if self._page.has_next:
                items.append(NavigationMarker.next_page())
            placeholder = (
                "Select a snippet file to insert "
                f"(Page {self._page.page_index + 1} of {self._page.total_pages}). {_PLACEHOLDER_HINT}"
            )
        self._items = items
        self._placeholder = placeholder
        self._widget.render(items, placeholder)
        # Replacing the items activates the first row.
        self.on_highlight_changed(items[0] if items else None)

    def _apply_preview(self, absolute_path: str, preview: str) -> None:
        if not self.is_open:
            return
        target: DisplayRecord | None = None
        highlighted = self._highlighted
        if isinstance(highlighted, DisplayRecord) and highlighted.absolute_path == absolute_path:
            if any(item is highlighted for item in self._items):
                target = highlighted
        if target is None:
            target = next(
                (
                    item
                    for item in self._items
                    if isinstance(item, DisplayRecord) and item.absolute_path == absolute_path
                ),
                None,
            )
        if target is None:
            return
        for item in self._items:
            if isinstance(item, DisplayRecord):
                item.preview = preview if item is target else None
        self._widget.render(self._items, self._placeholder, active=target)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
