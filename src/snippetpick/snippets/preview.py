"""Debounced, asynchronous preview loading for the highlighted snippet."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from .errors import PreviewLoadError, SnippetError

__all__ = [
    "TRUNCATION_MARKER",
    "LoopScheduler",
    "PreviewConfig",
    "PreviewService",
    "Scheduler",
    "build_preview",
]

LOGGER = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... (truncated)"

ContentReader = Callable[[str], Awaitable[str]]
PreviewSink = Callable[[str, str], None]


@dataclass(slots=True, frozen=True)
class PreviewConfig:
    """Limits for preview text and the highlight debounce window."""

    max_lines: int = 30
    max_chars: int = 1_000
    debounce_seconds: float = 0.1


def build_preview(content: str, max_lines: int = 30, max_chars: int = 1_000) -> str:
    """Return the first ``max_lines`` lines, cut to ``max_chars`` with a marker when longer."""

    preview = "\n".join(content.split("\n")[:max_lines])
    if len(preview) > max_chars:
        return preview[:max_chars] + TRUNCATION_MARKER
    return preview


class Scheduler(Protocol):
    """Cancellable one-shot timer capability."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class LoopScheduler:
    """:class:`Scheduler` backed by ``loop.call_later``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)

    def cancel(self, handle: Any) -> None:
        handle.cancel()


class PreviewService:
    """Loads previews for the current highlight, one debounce window at a time.

    Every :meth:`request` clears the pending timer and bumps a generation
    counter. A load only hands its result to ``apply`` when its generation is
    still the latest, so a superseded read that finishes late is dropped.
    Timer callbacks must run on the event loop thread.
    """

    def __init__(
        self,
        read_content: ContentReader,
        apply: PreviewSink,
        *,
        scheduler: Scheduler,
        config: PreviewConfig | None = None,
    ) -> None:
        self._read_content = read_content
        self._apply = apply
        self._scheduler = scheduler
        self._config = config or PreviewConfig()
        self._timer: Any | None = None
        self._generation = 0
        self._target: str | None = None
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def target(self) -> str | None:
        """Absolute path of the most recently requested preview."""

        return self._target

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def request(self, absolute_path: str | None) -> None:
        self._cancel_timer()
        self._generation += 1
        self._target = absolute_path
        if absolute_path is None:
            return
        generation = self._generation
        self._timer = self._scheduler.schedule(
            self._config.debounce_seconds,
            lambda: self._fire(absolute_path, generation),
        )

    def cancel(self) -> None:
        self._cancel_timer()
        self._generation += 1
        self._target = None

    async def wait_idle(self) -> None:
        """Wait until every started load has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def load(self, absolute_path: str, generation: int | None = None) -> bool:
        """Read and apply a preview; returns ``True`` when the result was applied."""

        expected = self._generation if generation is None else generation
        try:
            content = await self._read_content(absolute_path)
        except (OSError, UnicodeDecodeError, SnippetError) as exc:
            LOGGER.debug("%s", PreviewLoadError(absolute_path, exc))
            return False
        if expected != self._generation:
            LOGGER.debug("Discarding superseded preview for %s", absolute_path)
            return False
        preview = build_preview(content, self._config.max_lines, self._config.max_chars)
        self._apply(absolute_path, preview)
        return True

    def _fire(self, absolute_path: str, generation: int) -> None:
        self._timer = None
        if generation != self._generation:
            return
        task = asyncio.get_running_loop().create_task(self.load(absolute_path, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
            self._timer = None
