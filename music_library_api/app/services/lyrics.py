"""
Verse pagination for song lyrics.

Lyrics are stored as one text blob in which verses are separated by a
blank line.  ``paginate_lyrics`` splits the text into verses and
returns the verses of one page joined back with the same separator.
"""

from typing import List

from music_library_api.app.core.errors import LyricsNotFound
from music_library_api.app.core.pagination import paginate
from music_library_api.app.schemas.song import LyricsPage

VERSE_SEPARATOR = "\n\n"


def split_verses(text: str) -> List[str]:
    return text.split(VERSE_SEPARATOR)


def paginate_lyrics(text: str, page: int, page_size: int) -> LyricsPage:
    """Return one page of verses from ``text``.

    Raises ``LyricsNotFound`` when ``text`` is empty and ``NotFound``
    when ``page`` is past the last page of verses.
    """
    if not text:
        raise LyricsNotFound("lyrics not found")

    verses = split_verses(text)
    window = paginate(len(verses), page, page_size)
    selected = verses[window.offset:window.offset + window.limit]
    return LyricsPage(
        text=VERSE_SEPARATOR.join(selected),
        current_page=window.page,
        total_pages=window.total_pages,
        page_size=window.page_size,
    )
