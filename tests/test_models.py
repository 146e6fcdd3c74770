"""Tests for the snippet data model helpers."""

from __future__ import annotations

import os

import pytest

from snippetpick.snippets.models import (
    CatalogEntry,
    NavigationDirection,
    NavigationMarker,
    PageState,
    RootFolder,
    has_hidden_segment,
    split_segments,
)


def test_split_segments_accepts_both_separators() -> None:
    assert split_segments("a/b\\c") == ["a", "b", "c"]
    assert split_segments("/leading//double/") == ["leading", "double"]


def test_has_hidden_segment_checks_every_segment() -> None:
    assert has_hidden_segment(".git/config") is True
    assert has_hidden_segment("src/.cache/file.py") is True
    assert has_hidden_segment("src\\.hidden") is True
    assert has_hidden_segment("src/file.test.py") is False


def test_root_folder_name_is_last_segment() -> None:
    assert RootFolder("/home/me/snips").name == "snips"
    assert RootFolder("/home/me/snips/").name == "snips"


def test_catalog_entry_paths() -> None:
    root = RootFolder("/snips")
    entry = CatalogEntry("python/loop.py", root)

    assert entry.file_name == "loop.py"
    assert entry.absolute_path == os.path.join("/snips", "python", "loop.py")
    assert entry.key == ("/snips", "python/loop.py")


def test_navigation_markers_carry_direction_and_labels() -> None:
    previous = NavigationMarker.previous_page()
    following = NavigationMarker.next_page()

    assert previous.direction is NavigationDirection.PREVIOUS
    assert previous.label == "← Previous Page"
    assert following.direction is NavigationDirection.NEXT
    assert following.label == "Next Page →"


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, 1), (1, 1), (50, 1), (51, 2), (120, 3)],
)
def test_page_state_total_pages(count: int, expected: int) -> None:
    assert PageState.for_count(count, 50).total_pages == expected


def test_page_state_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError):
        PageState.for_count(10, 0)


def test_page_state_clamp_and_bounds() -> None:
    page = PageState.for_count(120, 50)

    assert page.clamp(-3) == 0
    assert page.clamp(7) == 2
    assert page.has_previous is False
    assert page.has_next is True

    page.page_index = 2
    assert page.slice_bounds(120) == (100, 120)
    assert page.has_previous is True
    assert page.has_next is False
