import math

import pytest

from music_library_api.app.core.errors import ErrorKind, NotFound
from music_library_api.app.core.pagination import (
    DEFAULT_PAGE_SIZE,
    normalize_page,
    paginate,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "total, page, page_size",
    [(1, 1, 1), (10, 1, 10), (11, 2, 10), (25, 3, 10), (7, 2, 3), (100, 5, 25)],
)
def test_total_pages_and_offset(total, page, page_size):
    window = paginate(total, page, page_size)
    assert window.total_pages == math.ceil(total / page_size)
    assert window.offset == (page - 1) * page_size
    assert window.page == page
    assert window.limit == page_size


@pytest.mark.unit
def test_non_positive_values_get_defaults():
    assert normalize_page(0, 0) == (1, DEFAULT_PAGE_SIZE)
    assert normalize_page(-3, -1) == (1, DEFAULT_PAGE_SIZE)
    window = paginate(35, 0, 0)
    assert (window.page, window.page_size, window.offset, window.total_pages) == (1, 10, 0, 4)


@pytest.mark.unit
def test_page_past_the_end_is_not_found():
    with pytest.raises(NotFound) as exc_info:
        paginate(20, 3, 10)
    assert exc_info.value.kind is ErrorKind.NOT_FOUND
    assert exc_info.value.message == "page 3 does not exist, total pages: 2"


@pytest.mark.unit
def test_empty_result_has_no_first_page():
    with pytest.raises(NotFound):
        paginate(0, 1, 10)
    with pytest.raises(NotFound):
        paginate(0, 0, 0)


@pytest.mark.unit
def test_last_partial_page():
    window = paginate(21, 3, 10)
    assert window.offset == 20
    assert window.total_pages == 3
