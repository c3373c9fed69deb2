"""
Unit tests for src/xms_client/pages.py.

The page-fetch function is a plain recording stub, so these tests pin
down exactly when and how often pages are fetched.
"""

from __future__ import annotations

import pytest

from xms_client.api import Page
from xms_client.errors import TransportError
from xms_client.pages import Pages


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class RecordingFetcher:
    """Deterministic page source that records every page index requested."""

    def __init__(self, pages: list[list], fail_on: int | None = None) -> None:
        self.pages = pages
        self.fail_on = fail_on
        self.calls: list[int] = []

    def __call__(self, index: int) -> Page:
        self.calls.append(index)
        if index == self.fail_on:
            raise TransportError(f"page {index} unavailable")
        content = self.pages[index] if index < len(self.pages) else []
        return Page(
            page=index,
            size=len(content),
            total_size=sum(len(p) for p in self.pages),
            total_pages=len(self.pages),
            content=content,
        )


THREE_PAGES = [["a", "b"], ["c", "d"], ["e"]]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestLaziness:
    def test_no_fetch_on_creation(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        Pages(fetcher)
        assert fetcher.calls == []

    def test_no_fetch_on_iter(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        iter(Pages(fetcher))
        assert fetcher.calls == []

    def test_next_page_fetched_only_when_current_exhausted(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        it = iter(Pages(fetcher))

        assert next(it) == "a"
        assert fetcher.calls == [0]
        assert next(it) == "b"
        assert fetcher.calls == [0]
        assert next(it) == "c"
        assert fetcher.calls == [0, 1]


class TestTermination:
    def test_three_pages_three_fetches(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        items = list(Pages(fetcher))

        assert items == ["a", "b", "c", "d", "e"]
        assert fetcher.calls == [0, 1, 2]

    def test_empty_listing_single_fetch(self):
        fetcher = RecordingFetcher([])
        assert list(Pages(fetcher)) == []
        assert fetcher.calls == [0]

    def test_exhausted_iterator_keeps_stopping(self):
        fetcher = RecordingFetcher([["a"]])
        it = iter(Pages(fetcher))
        assert list(it) == ["a"]

        with pytest.raises(StopIteration):
            next(it)
        assert fetcher.calls == [0]

    def test_empty_middle_page_skipped(self):
        fetcher = RecordingFetcher([["a"], [], ["b"]])
        assert list(Pages(fetcher)) == ["a", "b"]
        assert fetcher.calls == [0, 1, 2]

    def test_page_count_taken_from_first_page(self):
        """A later page overstating the page count does not extend iteration."""
        def fetch(index):
            content = [["a", "b"], ["c"]][index]
            total_pages = 2 if index == 0 else 3
            return Page(page=index, size=len(content), total_size=3,
                        total_pages=total_pages, content=content)

        assert list(Pages(fetch)) == ["a", "b", "c"]


class TestRestart:
    def test_reiteration_starts_from_page_zero(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        pages = Pages(fetcher)

        first = list(pages)
        second = list(pages)

        assert first == second
        assert fetcher.calls == [0, 1, 2, 0, 1, 2]

    def test_independent_iterators(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        pages = Pages(fetcher)
        it1, it2 = iter(pages), iter(pages)

        assert next(it1) == "a"
        assert next(it2) == "a"
        assert next(it1) == "b"


class TestCancellationAndFailure:
    def test_early_stop_fetches_nothing_more(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        for item in Pages(fetcher):
            if item == "b":
                break
        assert fetcher.calls == [0]

    def test_failure_surfaces_at_failing_page(self):
        fetcher = RecordingFetcher(THREE_PAGES, fail_on=1)
        it = iter(Pages(fetcher))
        yielded = [next(it), next(it)]

        with pytest.raises(TransportError):
            next(it)
        assert yielded == ["a", "b"]

    def test_get_fetches_single_page(self):
        fetcher = RecordingFetcher(THREE_PAGES)
        page = Pages(fetcher).get(2)

        assert list(page) == ["e"]
        assert fetcher.calls == [2]
