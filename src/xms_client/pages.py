"""
Lazy pagination over XMS list endpoints.

A :class:`Pages` object wraps a page-fetch function ``(page_index) -> Page``
and performs no I/O until it is iterated. Each iteration starts over from
page 0, fetches a page only once the previous page's items are used up,
and keeps no page beyond the one currently being consumed.

Not thread-safe: drive one iterator from one consumer at a time.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterator, TypeVar

from .api import Page

T = TypeVar("T")

PageFetcher = Callable[[int], Page[T]]


class Pages(Generic[T]):
    """
    Restartable lazy sequence of the items of a paged listing.

    Example::

        for batch in client.fetch_batches(BatchFilter(tags=("promo",))):
            print(batch.batch_id)
    """

    def __init__(self, fetcher: PageFetcher) -> None:
        self._fetcher = fetcher

    def get(self, page: int) -> Page[T]:
        """
        Fetch a single page.

        Args:
            page: 0-based page index.

        Returns:
            The fetched page.
        """
        return self._fetcher(page)

    def __iter__(self) -> "PagesIterator[T]":
        return PagesIterator(self)


class PagesIterator(Iterator[T]):
    """
    Forward-only cursor over the items of a :class:`Pages`.

    State is explicit: the page index to fetch next, the page count
    (unknown until the first fetch), the page being consumed and the
    position within it.
    """

    def __init__(self, pages: Pages[T]) -> None:
        self._pages = pages
        self._next_page = 0
        self._total_pages: int | None = None
        self._current: Page[T] | None = None
        self._position = 0

    def __iter__(self) -> "PagesIterator[T]":
        return self

    def _has_more_pages(self) -> bool:
        if self._total_pages is None:
            return True
        return self._next_page < self._total_pages

    def _advance(self) -> bool:
        """Fetch the next page; return ``False`` when the listing is exhausted."""
        if not self._has_more_pages():
            return False

        page = self._pages.get(self._next_page)
        if self._total_pages is None:
            self._total_pages = page.total_pages
        self._current = page
        self._position = 0
        self._next_page = page.page + 1
        return True

    def __next__(self) -> T:
        while self._current is None or self._position >= len(self._current.content):
            if not self._advance():
                self._current = None
                raise StopIteration
        item = self._current.content[self._position]
        self._position += 1
        return item
