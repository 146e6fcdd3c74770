"""User-facing notification collaborator."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

__all__ = ["Notifier", "LoggingNotifier"]

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Surface for info, warning and error messages shown to the user."""

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Headless notifier that writes user messages to the log."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
