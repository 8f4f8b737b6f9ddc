from datetime import datetime

from music_library_api.app.schemas.song import Song, SongCreate

from .helpers import START


def make_song(group="Muse", song="Hysteria", text="", link="", release_date: datetime = START) -> Song:
    """Build an unsaved song for ``SongRepository.insert``."""
    return Song(group_name=group, song_name=song, release_date=release_date, text=text, link=link)


def make_create(group="Muse", song="Hysteria", text="", link="") -> SongCreate:
    return SongCreate(group=group, song=song, text=text, link=link)
