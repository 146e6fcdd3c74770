"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

# Qt widgets are exercised headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from snippetpick.snippets.models import CatalogEntry, RootFolder  # noqa: E402
from tests.helpers import FakeEditingSurface, FakePickerWidget, ManualScheduler, RecordingNotifier  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in list(os.environ):
        if name.startswith("SNIPPETPICK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SNIPPETPICK_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def surface() -> FakeEditingSurface:
    return FakeEditingSurface()


@pytest.fixture
def widget() -> FakePickerWidget:
    return FakePickerWidget()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_catalog():
    """Build a catalog of ``count`` files named ``file-000.txt`` onwards under one root."""

    def _make(count: int, root: str = "/snips") -> list[CatalogEntry]:
        folder = RootFolder(root)
        return [CatalogEntry(f"file-{index:03d}.txt", folder) for index in range(count)]

    return _make
