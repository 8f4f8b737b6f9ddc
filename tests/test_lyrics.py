import pytest

from music_library_api.app.core.errors import LyricsNotFound, NotFound
from music_library_api.app.services.lyrics import paginate_lyrics, split_verses

LYRICS = "A\n\nB\n\nC"


@pytest.mark.unit
@pytest.mark.parametrize("page, expected", [(1, "A"), (2, "B"), (3, "C")])
def test_one_verse_per_page(page, expected):
    result = paginate_lyrics(LYRICS, page, 1)
    assert result.text == expected
    assert result.current_page == page
    assert result.total_pages == 3
    assert result.page_size == 1


@pytest.mark.unit
def test_page_past_last_verse_is_not_found():
    with pytest.raises(NotFound) as exc_info:
        paginate_lyrics(LYRICS, 4, 1)
    assert not isinstance(exc_info.value, LyricsNotFound)


@pytest.mark.unit
def test_two_verses_per_page_rejoined_with_blank_line():
    assert paginate_lyrics(LYRICS, 1, 2).text == "A\n\nB"
    last = paginate_lyrics(LYRICS, 2, 2)
    assert last.text == "C"
    assert last.total_pages == 2


@pytest.mark.unit
def test_defaults_return_whole_text():
    result = paginate_lyrics(LYRICS, 0, 0)
    assert result.text == LYRICS
    assert (result.current_page, result.page_size, result.total_pages) == (1, 10, 1)


@pytest.mark.unit
def test_empty_text_is_lyrics_not_found():
    with pytest.raises(LyricsNotFound) as exc_info:
        paginate_lyrics("", 1, 1)
    assert exc_info.value.message == "lyrics not found"


@pytest.mark.unit
def test_single_line_breaks_stay_inside_a_verse():
    text = "line one\nline two\n\nchorus"
    assert split_verses(text) == ["line one\nline two", "chorus"]
