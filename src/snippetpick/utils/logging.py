"""Logging setup for the snippet picker (rotating log file plus console)."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_log_path", "route_qt_messages"]

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILENAME = "snippetpick.log"
_LOG_DIR_ENV = "SNIPPETPICK_LOG_DIR"
_DEFAULT_LOG_DIR = Path.home() / ".snippetpick" / "logs"
# Event loop internals are chatty at DEBUG; keep them at WARNING or above.
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio", "qasync")
_QT_LOGGER = "snippetpick.qt"
_QT_LEVELS: dict[str, int] = {
    "QtDebugMsg": logging.DEBUG,
    "QtInfoMsg": logging.INFO,
    "QtWarningMsg": logging.WARNING,
    "QtCriticalMsg": logging.ERROR,
    "QtFatalMsg": logging.CRITICAL,
}

_active_log_path: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path:
    """Install the root handlers once and return the log file path.

    Subsequent calls are no-ops unless ``force`` is set, which lets the
    bootstrap code raise the level to DEBUG after settings are loaded.
    """

    global _active_log_path
    if _active_log_path is not None and not force:
        return _active_log_path

    directory = Path(log_dir or os.environ.get(_LOG_DIR_ENV) or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / _LOG_FILENAME

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    quiet_level = max(level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _active_log_path = log_path
    return log_path


def get_log_path() -> Path | None:
    """Return the log file installed by :func:`setup_logging`, if any."""

    return _active_log_path


def route_qt_messages() -> None:
    """Send qDebug/qWarning output to the ``snippetpick.qt`` logger."""

    from PySide6.QtCore import qInstallMessageHandler

    qt_logger = logging.getLogger(_QT_LOGGER)

    def _forward(kind, _context, message):  # type: ignore[no-untyped-def]
        qt_logger.log(_QT_LEVELS.get(getattr(kind, "name", ""), logging.INFO), message)

    qInstallMessageHandler(_forward)
