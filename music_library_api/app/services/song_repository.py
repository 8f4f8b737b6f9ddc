"""
SQLite storage for songs.

``SongRepository`` performs the filtered count/select and the
insert/update/delete statements against the ``songs`` table.  It is
constructed with the database path and opens a short‑lived connection
per call.

Driver failures are translated into the application error taxonomy:
a missing row becomes ``NotFound``, a violation of the
``UNIQUE(group_name, song_name)`` constraint becomes ``AlreadyExists``
(so two concurrent writers racing past the service pre‑check still get
a conflict) and anything else becomes ``InternalError``.

All queries use parameterized statements.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from music_library_api.app.core.db import from_db_timestamp, get_connection, to_db_timestamp
from music_library_api.app.core.errors import AlreadyExists, InternalError, NotFound
from music_library_api.app.schemas.song import Song, SongFilter

logger = logging.getLogger(__name__)

SONG_COLUMNS = "id, group_name, song_name, release_date, text, link, created_at, updated_at"

DUPLICATE_SONG_MESSAGE = "song with this group name and song name already exists"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SongRepository:
    """Data access for the ``songs`` table."""

    def __init__(self, database_path: str, clock: Callable[[], datetime] = utcnow) -> None:
        self.database_path = database_path
        self._clock = clock

    def count(self, song_filter: SongFilter) -> int:
        """Return the number of songs matching ``song_filter``."""
        where, params = self._build_where(song_filter)
        conn = self._connect()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS total FROM songs{where}", params).fetchone()
            return row["total"]
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to count songs", exc) from exc
        finally:
            conn.close()

    def list(self, song_filter: SongFilter, limit: int, offset: int) -> List[Song]:
        """Return one window of matching songs, newest first."""
        where, params = self._build_where(song_filter)
        query = (
            f"SELECT {SONG_COLUMNS} FROM songs{where}"
            " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        )
        conn = self._connect()
        try:
            rows = conn.execute(query, (*params, limit, offset)).fetchall()
            return [self._row_to_song(row) for row in rows]
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to query songs", exc) from exc
        finally:
            conn.close()

    def get_by_id(self, song_id: int) -> Song:
        """Return the song with ``song_id`` or raise ``NotFound``."""
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to get song", exc) from exc
        finally:
            conn.close()
        if row is None:
            raise NotFound("song not found")
        return self._row_to_song(row)

    def exists_by_group_and_title(
        self, group_name: str, song_name: str, exclude_id: Optional[int] = None
    ) -> bool:
        """Check whether another song already uses this (group, title) pair.

        The comparison is exact, like the table's uniqueness constraint.
        ``exclude_id`` skips the song being updated.
        """
        conn = self._connect()
        try:
            row = conn.execute(
                """
                SELECT EXISTS(
                    SELECT 1 FROM songs
                    WHERE group_name = ? AND song_name = ? AND (? IS NULL OR id != ?)
                ) AS found
                """,
                (group_name, song_name, exclude_id, exclude_id),
            ).fetchone()
            return bool(row["found"])
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to check song existence", exc) from exc
        finally:
            conn.close()

    def insert(self, song: Song) -> Song:
        """Store a new song; ``id`` and both timestamps are assigned here."""
        now = to_db_timestamp(self._clock())
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO songs (group_name, song_name, release_date, text, link, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    song.group_name,
                    song.song_name,
                    to_db_timestamp(song.release_date),
                    song.text,
                    song.link,
                    now,
                    now,
                ),
            )
            song_id = cursor.lastrowid
            conn.commit()
            logger.info("Created song %s", song_id)
            row = cursor.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
            return self._row_to_song(row)
        except sqlite3.IntegrityError as exc:
            raise AlreadyExists(DUPLICATE_SONG_MESSAGE, exc) from exc
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to create song", exc) from exc
        finally:
            conn.close()

    def update(self, song: Song) -> Song:
        """Overwrite the mutable columns of an existing song.

        ``updated_at`` is taken from ``song`` when set, otherwise the
        current time is used.  Raises ``NotFound`` if the row is gone.
        """
        updated_at = song.updated_at or self._clock()
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE songs
                SET group_name = ?, song_name = ?, release_date = ?, text = ?, link = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    song.group_name,
                    song.song_name,
                    to_db_timestamp(song.release_date),
                    song.text,
                    song.link,
                    to_db_timestamp(updated_at),
                    song.id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFound("song not found")
            conn.commit()
            logger.info("Updated song %s", song.id)
            row = cursor.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song.id,)
            ).fetchone()
            return self._row_to_song(row)
        except sqlite3.IntegrityError as exc:
            raise AlreadyExists(DUPLICATE_SONG_MESSAGE, exc) from exc
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to update song", exc) from exc
        finally:
            conn.close()

    def delete(self, song_id: int) -> None:
        """Delete a song; raises ``NotFound`` if nothing was deleted."""
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM songs WHERE id = ?", (song_id,))
            affected = cursor.rowcount
            conn.commit()
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to delete song", exc) from exc
        finally:
            conn.close()
        if not affected:
            raise NotFound("song not found")
        logger.info("Deleted song %s", song_id)

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.database_path)
        except (sqlite3.Error, OverflowError) as exc:
            raise InternalError("failed to open database", exc) from exc

    @staticmethod
    def _build_where(song_filter: SongFilter) -> Tuple[str, tuple]:
        """Translate a filter into a WHERE clause and its parameters."""
        where_clauses: list[str] = []
        params: list = []
        substring_columns = (
            ("group_name", song_filter.group_name),
            ("song_name", song_filter.song_name),
            ("text", song_filter.text),
            ("link", song_filter.link),
        )
        for column, value in substring_columns:
            if value:
                where_clauses.append(f"instr(casefold({column}), casefold(?)) > 0")
                params.append(value)
        if song_filter.from_date is not None:
            where_clauses.append("release_date >= ?")
            params.append(to_db_timestamp(song_filter.from_date))
        if song_filter.to_date is not None:
            where_clauses.append("release_date <= ?")
            params.append(to_db_timestamp(song_filter.to_date))
        if not where_clauses:
            return "", ()
        return " WHERE " + " AND ".join(where_clauses), tuple(params)

    @staticmethod
    def _row_to_song(row: sqlite3.Row) -> Song:
        """Convert a database row to a ``Song``."""
        return Song(
            id=row["id"],
            group_name=row["group_name"],
            song_name=row["song_name"],
            release_date=from_db_timestamp(row["release_date"]),
            text=row["text"] or "",
            link=row["link"] or "",
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )
