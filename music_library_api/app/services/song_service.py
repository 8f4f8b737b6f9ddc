"""
Business logic for the song catalog.

``SongService`` sits between the HTTP routes and ``SongRepository``.
It enforces the uniqueness of (group, title) before writes, applies
the partial update merge, stamps the release date on creation and the
update time on every update, and turns page requests into
``SongsPage``/``LyricsPage`` results.

Errors coming from the repository are propagated unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from music_library_api.app.core.errors import AlreadyExists, LyricsNotFound
from music_library_api.app.core.pagination import normalize_page, paginate
from music_library_api.app.schemas.song import (
    LyricsPage,
    Song,
    SongCreate,
    SongFilter,
    SongsPage,
    SongUpdate,
)
from music_library_api.app.services.lyrics import paginate_lyrics
from music_library_api.app.services.song_repository import (
    DUPLICATE_SONG_MESSAGE,
    SongRepository,
    utcnow,
)

logger = logging.getLogger(__name__)

# Fields of SongUpdate paired with the Song attribute they overwrite.
_UPDATABLE_FIELDS = (
    ("group", "group_name"),
    ("song", "song_name"),
    ("text", "text"),
    ("link", "link"),
)
# Only these may be cleared to an empty string when clearing is enabled.
_CLEARABLE_FIELDS = {"text", "link"}


class SongService:
    """Service for listing, reading and modifying songs.

    Parameters
    ----------
    repository : SongRepository
        Store used for every read and write.
    clock : Callable[[], datetime]
        Source of the current time for release dates and update stamps.
    clear_empty_fields : bool
        If true, an update that explicitly sends an empty ``text`` or
        ``link`` clears it.  By default empty strings mean "unchanged".
    """

    def __init__(
        self,
        repository: SongRepository,
        clock: Callable[[], datetime] = utcnow,
        clear_empty_fields: bool = False,
    ) -> None:
        self.repository = repository
        self._clock = clock
        self.clear_empty_fields = clear_empty_fields

    async def get_songs(self, song_filter: SongFilter) -> SongsPage:
        """Return one page of songs matching ``song_filter``.

        Raises ``NotFound`` if the page is past the last one, which
        includes page 1 when nothing matches.
        """
        page, page_size = normalize_page(song_filter.page, song_filter.page_size)
        logger.info(
            "Getting songs group=%r song=%r from_date=%s to_date=%s text=%r link=%r page=%s page_size=%s",
            song_filter.group_name,
            song_filter.song_name,
            song_filter.from_date,
            song_filter.to_date,
            song_filter.text,
            song_filter.link,
            page,
            page_size,
        )
        total_items = self.repository.count(song_filter)
        window = paginate(total_items, page, page_size)
        songs = self.repository.list(song_filter, limit=window.limit, offset=window.offset)
        return SongsPage(
            songs=songs,
            current_page=window.page,
            total_pages=window.total_pages,
            total_items=total_items,
            page_size=window.page_size,
        )

    async def get_song(self, song_id: int) -> Song:
        logger.info("Getting song %s", song_id)
        return self.repository.get_by_id(song_id)

    async def get_lyrics(self, song_id: int, page: int, page_size: int) -> LyricsPage:
        """Return one page of verses of a song's lyrics."""
        logger.info("Getting lyrics song_id=%s page=%s page_size=%s", song_id, page, page_size)
        song = self.repository.get_by_id(song_id)
        if not song.text:
            raise LyricsNotFound("lyrics not found")
        return paginate_lyrics(song.text, page, page_size)

    async def create_song(self, request: SongCreate) -> Song:
        """Create a song released "now".

        Raises ``AlreadyExists`` without inserting anything if the
        (group, title) pair is taken.
        """
        logger.info("Creating new song group=%r song=%r", request.group, request.song)
        if self.repository.exists_by_group_and_title(request.group, request.song):
            raise AlreadyExists(DUPLICATE_SONG_MESSAGE)
        song = Song(
            group_name=request.group,
            song_name=request.song,
            release_date=self._clock(),
            text=request.text,
            link=request.link,
        )
        return self.repository.insert(song)

    async def update_song(self, song_id: int, request: SongUpdate) -> Song:
        """Merge ``request`` into the stored song and save it.

        A field replaces the stored value when it is present and not
        empty.  Absent fields and empty strings keep the stored value,
        except that ``text`` and ``link`` are cleared by an explicit
        empty string when ``clear_empty_fields`` is enabled.  The update
        time is refreshed even if nothing changed.
        """
        logger.info(
            "Updating song id=%s fields=%s", song_id, sorted(request.model_fields_set)
        )
        current = self.repository.get_by_id(song_id)
        changes = self._merge(request)
        merged = current.model_copy(update=changes)

        if self.repository.exists_by_group_and_title(
            merged.group_name, merged.song_name, exclude_id=song_id
        ):
            raise AlreadyExists(DUPLICATE_SONG_MESSAGE)

        merged.updated_at = self._clock()
        return self.repository.update(merged)

    async def delete_song(self, song_id: int) -> None:
        logger.info("Deleting song %s", song_id)
        self.repository.delete(song_id)

    def _merge(self, request: SongUpdate) -> dict:
        changes = {}
        for request_field, song_field in _UPDATABLE_FIELDS:
            if request_field not in request.model_fields_set:
                continue
            value: Optional[str] = getattr(request, request_field)
            if value:
                changes[song_field] = value
            elif (
                value == ""
                and self.clear_empty_fields
                and request_field in _CLEARABLE_FIELDS
            ):
                changes[song_field] = ""
        return changes
