"""
Song endpoints for API v1.

These routes expose listing with filters and pagination, single song
lookup, paginated lyrics and create/update/delete.  Business errors
raised by ``SongService`` are ``AppError`` subclasses and are turned
into HTTP responses by the exception handlers registered in
``main.py``.
"""

import logging
from datetime import date, datetime, time
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status

from music_library_api.app.schemas.song import (
    LyricsPage,
    Song,
    SongCreate,
    SongFilter,
    SongsPage,
    SongUpdate,
)
from music_library_api.app.services.song_service import SongService

logger = logging.getLogger(__name__)

router = APIRouter()

# Range of a SQLite INTEGER.
SQLITE_MIN_INT = -(2**63)
SQLITE_MAX_INT = 2**63 - 1

SongId = Annotated[int, Path(ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT, description="Song ID")]


def get_song_service(request: Request) -> SongService:
    """Return the service instance created at application startup."""
    return request.app.state.song_service


def _parse_date(value: Optional[str], *, end_of_day: bool = False) -> Optional[datetime]:
    """Parse a ``YYYY-MM-DD`` query value; unparseable values are ignored."""
    if not value:
        return None
    try:
        day = date.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring malformed date %r", value)
        return None
    return datetime.combine(day, time.max if end_of_day else time.min)


def _parse_page_number(value: Optional[str]) -> int:
    """Parse a page or page size; malformed or out of range values become 0 (the default)."""
    if not value:
        return 0
    try:
        number = int(value)
    except ValueError:
        logger.debug("Ignoring malformed page value %r", value)
        return 0
    if not SQLITE_MIN_INT <= number <= SQLITE_MAX_INT:
        logger.debug("Ignoring out of range page value %r", value)
        return 0
    return number


@router.get("", response_model=SongsPage)
async def list_songs(
    group_name: str = Query("", description="Group name substring"),
    song_name: str = Query("", description="Song title substring"),
    from_date: Optional[str] = Query(None, description="Released on or after (YYYY-MM-DD)"),
    to_date: Optional[str] = Query(None, description="Released on or before (YYYY-MM-DD)"),
    text: str = Query("", description="Lyrics substring"),
    link: str = Query("", description="Link substring"),
    page: Optional[str] = Query(None, description="Page number, 1 when omitted"),
    page_size: Optional[str] = Query(None, description="Songs per page, 10 when omitted"),
    service: SongService = Depends(get_song_service),
) -> SongsPage:
    """List songs with filtering and pagination.

    String filters are case‑insensitive substring matches.  Results
    are ordered by creation time, newest first.  A page past the last
    one, including page 1 of an empty result, returns 404.
    """
    song_filter = SongFilter(
        group_name=group_name,
        song_name=song_name,
        text=text,
        link=link,
        from_date=_parse_date(from_date),
        to_date=_parse_date(to_date, end_of_day=True),
        page=_parse_page_number(page),
        page_size=_parse_page_number(page_size),
    )
    return await service.get_songs(song_filter)


@router.get("/{song_id}", response_model=Song)
async def get_song(song_id: SongId, service: SongService = Depends(get_song_service)) -> Song:
    """Retrieve a single song by its ID."""
    return await service.get_song(song_id)


@router.get("/{song_id}/lyrics", response_model=LyricsPage)
async def get_lyrics(
    song_id: SongId,
    page: Optional[str] = Query(None, description="Page number, 1 when omitted"),
    page_size: Optional[str] = Query(None, description="Verses per page, 10 when omitted"),
    service: SongService = Depends(get_song_service),
) -> LyricsPage:
    """Return song lyrics paginated by verses (blank‑line separated)."""
    return await service.get_lyrics(song_id, _parse_page_number(page), _parse_page_number(page_size))


@router.post("", response_model=Song, status_code=status.HTTP_201_CREATED)
async def create_song(
    song_in: SongCreate,
    service: SongService = Depends(get_song_service),
) -> Song:
    """Create a new song.

    The release date is set to the time of creation.  Returns 409 if
    a song with the same group and title already exists.
    """
    return await service.create_song(song_in)


@router.put("/{song_id}", response_model=Song)
async def update_song(
    song_id: SongId,
    song_in: SongUpdate,
    service: SongService = Depends(get_song_service),
) -> Song:
    """Update an existing song.

    Partial updates are supported; omitted or empty fields remain
    unchanged.  Returns 409 if the new group and title belong to
    another song.
    """
    return await service.update_song(song_id, song_in)


@router.delete("/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(song_id: SongId, service: SongService = Depends(get_song_service)) -> None:
    """Delete a song by ID."""
    await service.delete_song(song_id)
    return None
