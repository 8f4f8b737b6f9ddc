"""
Pydantic models for song data.

``Song`` is the stored record as returned by the API.  ``SongCreate``
and ``SongUpdate`` are request bodies; release date and timestamps are
never supplied by clients.  ``SongFilter`` carries the listing
criteria and ``SongsPage``/``LyricsPage`` wrap paginated results.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Song(BaseModel):
    """A song in the catalog.

    ``id``, ``created_at`` and ``updated_at`` are assigned by the store
    and are ``None`` only on a record that has not been inserted yet.
    """

    id: Optional[int] = None
    group_name: str = Field(..., examples=["Muse"])
    song_name: str = Field(..., examples=["Supermassive Black Hole"])
    release_date: datetime
    text: str = ""
    link: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class SongCreate(BaseModel):
    """Schema for creating a song."""

    group: str = Field(..., min_length=1, examples=["Muse"])
    song: str = Field(..., min_length=1, examples=["Supermassive Black Hole"])
    text: str = Field("", description="Lyrics; verses are separated by a blank line")
    link: str = Field("", examples=["https://www.youtube.com/watch?v=Xsp3_a-PMTw"])


class SongUpdate(BaseModel):
    """Schema for updating a song.

    All fields are optional.  Omitted fields and empty strings leave
    the stored value unchanged; see ``SongService.update_song`` for the
    exact merge rule.
    """

    group: Optional[str] = None
    song: Optional[str] = None
    text: Optional[str] = None
    link: Optional[str] = None


class SongFilter(BaseModel):
    """Listing criteria.

    String criteria are case‑insensitive substring matches; an empty
    string matches every song.  Date bounds are inclusive and ``None``
    means unbounded.
    """

    group_name: str = ""
    song_name: str = ""
    text: str = ""
    link: str = ""
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    page: int = 0
    page_size: int = 0


class SongsPage(BaseModel):
    songs: List[Song]
    current_page: int
    total_pages: int
    total_items: int
    page_size: int


class LyricsPage(BaseModel):
    text: str
    current_page: int
    total_pages: int
    page_size: int
