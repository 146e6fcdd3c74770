"""Tests for the logging bootstrap."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from snippetpick.services.notifications import LoggingNotifier, Notifier
from snippetpick.utils import logging as logging_utils


@pytest.fixture
def restore_logging(monkeypatch: pytest.MonkeyPatch):
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    monkeypatch.setattr(logging_utils, "_active_log_path", None)
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path: Path, restore_logging) -> None:
    log_path = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path, console=False)

    logging.getLogger("snippetpick.test").debug("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "snippetpick.log"
    assert logging_utils.get_log_path() == log_path
    assert "hello from the test" in log_path.read_text(encoding="utf-8")
    assert logging.getLogger("asyncio").level == logging.WARNING


def test_setup_logging_is_idempotent_unless_forced(tmp_path: Path, restore_logging) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "one", console=False)
    second = logging_utils.setup_logging(log_dir=tmp_path / "two", console=False)
    forced = logging_utils.setup_logging(log_dir=tmp_path / "two", console=False, force=True)

    assert second == first
    assert forced == tmp_path / "two" / "snippetpick.log"


def test_setup_logging_honours_environment_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
) -> None:
    monkeypatch.setenv("SNIPPETPICK_LOG_DIR", str(tmp_path / "env-logs"))

    log_path = logging_utils.setup_logging(console=False)

    assert log_path == tmp_path / "env-logs" / "snippetpick.log"


def test_logging_notifier_routes_levels(caplog: pytest.LogCaptureFixture) -> None:
    notifier = LoggingNotifier(logging.getLogger("snippetpick.notify"))

    with caplog.at_level(logging.INFO, logger="snippetpick.notify"):
        notifier.info("fyi")
        notifier.warning("careful")
        notifier.error("broken")

    assert isinstance(notifier, Notifier)
    assert [(record.levelno, record.getMessage()) for record in caplog.records] == [
        (logging.INFO, "fyi"),
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
    ]


def test_qt_messages_are_routed_to_logging(qapp, caplog: pytest.LogCaptureFixture) -> None:
    from PySide6.QtCore import qInstallMessageHandler, qWarning

    logging_utils.route_qt_messages()
    try:
        with caplog.at_level(logging.DEBUG, logger="snippetpick.qt"):
            qWarning("widget geometry is odd")
    finally:
        qInstallMessageHandler(None)

    routed = [record for record in caplog.records if record.name == "snippetpick.qt"]
    assert [record.levelno for record in routed] == [logging.WARNING]
    assert "widget geometry is odd" in routed[0].getMessage()
