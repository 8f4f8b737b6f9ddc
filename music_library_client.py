"""Music library API client.

This module defines a small client wrapper around the REST API served
by ``music_library_api``.  It uses the ``requests`` library internally
and exposes one method per endpoint:

* :meth:`list_songs` – filtered, paginated song listing.
* :meth:`get_song` – fetch a single song by its identifier.
* :meth:`get_lyrics` – fetch one page of a song's verses.
* :meth:`create_song` – add a song to the catalog.
* :meth:`update_song` – partially update a song.
* :meth:`delete_song` – remove a song.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a
dictionary with ``status_code`` and ``message`` keys, where
``message`` is the ``detail`` returned by the server.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class MusicLibraryAPI:
    """Client for the music library API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8080``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/songs``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    if isinstance(err_json, dict):
                        message = err_json.get("detail") or err_json.get("message") or str(err_json)
                    else:
                        message = str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Song operations
    # ------------------------------------------------------------------
    def list_songs(
        self,
        *,
        group_name: str = "",
        song_name: str = "",
        text: str = "",
        link: str = "",
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        page: int = 0,
        page_size: int = 0,
    ) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
        """Retrieve one page of songs.

        Only non-empty filters are sent.  Dates use ``YYYY-MM-DD``.

        Returns:
            A tuple ``(page, error)``; ``page`` contains ``songs`` and the
            pagination fields, or is empty on failure.
        """
        params = {
            "group_name": group_name,
            "song_name": song_name,
            "text": text,
            "link": link,
            "from_date": from_date,
            "to_date": to_date,
            "page": page,
            "page_size": page_size,
        }
        params = {key: value for key, value in params.items() if value}
        data, error = self._request("GET", "/songs", params=params)
        if error:
            return {}, error
        return data or {}, None

    def get_song(self, song_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("GET", f"/songs/{song_id}")

    def get_lyrics(
        self, song_id: int, page: int = 0, page_size: int = 0
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve one page of verses of a song."""
        params = {key: value for key, value in (("page", page), ("page_size", page_size)) if value}
        return self._request("GET", f"/songs/{song_id}/lyrics", params=params)

    def create_song(
        self, group: str, song: str, text: str = "", link: str = ""
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        payload = {"group": group, "song": song, "text": text, "link": link}
        return self._request("POST", "/songs", json_body=payload)

    def update_song(
        self, song_id: int, changes: Dict[str, str]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Send a partial update.

        Args:
            song_id: Identifier of the song.
            changes: Subset of ``group``, ``song``, ``text`` and ``link``.
        """
        return self._request("PUT", f"/songs/{song_id}", json_body=changes)

    def delete_song(self, song_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a song.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"/songs/{song_id}")
        if error:
            return False, error
        return True, None

    def list_all_songs(self, page_size: int = 50, **filters: Any) -> List[Dict[str, Any]]:
        """Collect every song matching ``filters`` across all pages.

        A 404 on the first page means nothing matched and yields an
        empty list; other errors are logged and stop the iteration.
        """
        songs: List[Dict[str, Any]] = []
        page = 1
        while True:
            data, error = self.list_songs(page=page, page_size=page_size, **filters)
            if error:
                if error.get("status_code") != 404:
                    logger.warning("Stopped listing songs at page %s: %s", page, error["message"])
                break
            songs.extend(data.get("songs", []))
            if page >= data.get("total_pages", 0):
                break
            page += 1
        return songs
