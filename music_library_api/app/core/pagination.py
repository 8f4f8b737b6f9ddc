"""
Page arithmetic shared by song listing and lyric retrieval.

``paginate`` turns a total item count and the page/page size requested
by a client into the page size, offset and total page count used to
slice the result.  Non‑positive requests fall back to the defaults.
A page beyond the last one is reported as ``NotFound``; since an empty
result has zero pages, even page 1 of an empty result is out of range.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

from .errors import NotFound

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


class Pagination(NamedTuple):
    page: int
    page_size: int
    offset: int
    total_pages: int

    @property
    def limit(self) -> int:
        return self.page_size


def normalize_page(page: int, page_size: int) -> Tuple[int, int]:
    """Substitute defaults for non‑positive page and page size values."""
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    if page <= 0:
        page = DEFAULT_PAGE
    return page, page_size


def paginate(total_items: int, page: int, page_size: int) -> Pagination:
    """Compute the window of ``total_items`` covered by ``page``.

    Parameters
    ----------
    total_items : int
        Number of items in the full result set (never negative).
    page : int
        Requested 1‑based page; ``<= 0`` means the first page.
    page_size : int
        Requested number of items per page; ``<= 0`` means the default.

    Returns
    -------
    Pagination
        Normalized page and page size, offset of the first item and the
        total number of pages.

    Raises
    ------
    NotFound
        If ``page`` is greater than the total number of pages.
    """
    page, page_size = normalize_page(page, page_size)
    total_pages = (total_items + page_size - 1) // page_size
    if page > total_pages:
        raise NotFound(f"page {page} does not exist, total pages: {total_pages}")
    return Pagination(
        page=page,
        page_size=page_size,
        offset=(page - 1) * page_size,
        total_pages=total_pages,
    )
