from datetime import datetime

import pytest

from music_library_api.app.core.errors import AlreadyExists, LyricsNotFound, NotFound
from music_library_api.app.schemas.song import SongFilter, SongUpdate
from music_library_api.app.services.song_service import SongService
from tests.support.factories import make_create
from tests.support.helpers import START, run


def test_create_sets_release_date_to_now(service):
    song = run(service.create_song(make_create("Muse", "Hysteria", text="verse", link="https://x")))
    assert song.id is not None
    assert song.release_date == START
    assert song.created_at > song.release_date
    assert (song.group_name, song.song_name, song.text, song.link) == ("Muse", "Hysteria", "verse", "https://x")


def test_create_duplicate_fails_without_insert(service, repository, monkeypatch):
    run(service.create_song(make_create("Muse", "Hysteria")))

    def _fail_insert(song):
        raise AssertionError("insert must not be called")

    monkeypatch.setattr(repository, "insert", _fail_insert)
    with pytest.raises(AlreadyExists) as exc_info:
        run(service.create_song(make_create("Muse", "Hysteria")))
    assert exc_info.value.message == "song with this group name and song name already exists"
    assert repository.count(SongFilter()) == 1


def test_get_songs_wraps_page_metadata(service):
    for title in ("One", "Two", "Three"):
        run(service.create_song(make_create("Band", title)))
    result = run(service.get_songs(SongFilter(page=2, page_size=2)))
    assert result.current_page == 2
    assert result.total_pages == 2
    assert result.total_items == 3
    assert result.page_size == 2
    assert [s.song_name for s in result.songs] == ["One"]


def test_get_songs_defaults_return_everything_newest_first(service):
    for title in ("One", "Two", "Three"):
        run(service.create_song(make_create("Band", title)))
    result = run(service.get_songs(SongFilter()))
    assert [s.song_name for s in result.songs] == ["Three", "Two", "One"]
    assert (result.current_page, result.page_size) == (1, 10)


def test_get_songs_on_empty_catalog_is_not_found(service):
    with pytest.raises(NotFound):
        run(service.get_songs(SongFilter()))


def test_get_songs_page_out_of_range(service):
    run(service.create_song(make_create()))
    with pytest.raises(NotFound):
        run(service.get_songs(SongFilter(page=2)))


def test_get_lyrics_paginates_verses(service):
    song = run(service.create_song(make_create(text="A\n\nB\n\nC")))
    page = run(service.get_lyrics(song.id, 2, 2))
    assert page.text == "C"
    assert (page.current_page, page.total_pages, page.page_size) == (2, 2, 2)


def test_get_lyrics_missing_song_is_plain_not_found(service):
    with pytest.raises(NotFound) as exc_info:
        run(service.get_lyrics(404, 1, 1))
    assert not isinstance(exc_info.value, LyricsNotFound)
    assert exc_info.value.message == "song not found"


def test_get_lyrics_on_empty_text_is_lyrics_not_found(service):
    song = run(service.create_song(make_create(text="")))
    with pytest.raises(LyricsNotFound):
        run(service.get_lyrics(song.id, 1, 1))


def test_partial_update_keeps_empty_fields(service):
    song = run(service.create_song(make_create("A", "B", text="T", link="L")))
    updated = run(service.update_song(song.id, SongUpdate(group="", song="C", text="", link="")))
    assert (updated.group_name, updated.song_name, updated.text, updated.link) == ("A", "C", "T", "L")
    assert updated.updated_at > song.updated_at
    assert updated.release_date == song.release_date
    assert updated.created_at == song.created_at


def test_update_without_changes_still_refreshes_timestamp(service):
    song = run(service.create_song(make_create("A", "B")))
    updated = run(service.update_song(song.id, SongUpdate()))
    assert (updated.group_name, updated.song_name) == ("A", "B")
    assert updated.updated_at > song.updated_at


def test_update_to_own_pair_succeeds(service):
    song = run(service.create_song(make_create("A", "B", text="old")))
    updated = run(service.update_song(song.id, SongUpdate(group="A", song="B", text="new")))
    assert updated.text == "new"


def test_update_to_other_songs_pair_fails(service, repository):
    run(service.create_song(make_create("A", "B")))
    other = run(service.create_song(make_create("A", "C")))
    with pytest.raises(AlreadyExists):
        run(service.update_song(other.id, SongUpdate(song="B")))
    assert repository.get_by_id(other.id).song_name == "C"


def test_update_missing_song_is_not_found(service):
    with pytest.raises(NotFound):
        run(service.update_song(999, SongUpdate(song="X")))


def test_update_can_clear_text_when_enabled(repository, clock):
    service = SongService(repository, clock=clock, clear_empty_fields=True)
    song = run(service.create_song(make_create("A", "B", text="T", link="L")))
    updated = run(service.update_song(song.id, SongUpdate(group="", text="", link="")))
    assert (updated.group_name, updated.text, updated.link) == ("A", "", "")


def test_clearing_ignores_absent_fields(repository, clock):
    service = SongService(repository, clock=clock, clear_empty_fields=True)
    song = run(service.create_song(make_create("A", "B", text="T", link="L")))
    updated = run(service.update_song(song.id, SongUpdate(link="")))
    assert (updated.text, updated.link) == ("T", "")


def test_delete_twice(service):
    song = run(service.create_song(make_create()))
    run(service.delete_song(song.id))
    with pytest.raises(NotFound):
        run(service.delete_song(song.id))


def test_errors_from_store_pass_through(service, repository, monkeypatch):
    failure = NotFound("song not found")

    def _raise(song_id):
        raise failure

    monkeypatch.setattr(repository, "get_by_id", _raise)
    with pytest.raises(NotFound) as exc_info:
        run(service.get_song(1))
    assert exc_info.value is failure


def test_release_date_uses_injected_clock(repository):
    fixed = datetime(2030, 6, 15, 8, 0, 0)
    service = SongService(repository, clock=lambda: fixed)
    song = run(service.create_song(make_create()))
    assert song.release_date == fixed
