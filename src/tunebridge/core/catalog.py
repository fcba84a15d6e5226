"""
Typed catalog operations on top of the backend HTTP API.

Each operation first asks the supervisor to make sure the backend is up; a
supervisor error propagates unchanged and no request is made. Responses are
parsed with the best-effort scanner: records missing an id or a title are
dropped, the rest of the list is kept.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .capabilities import BrowserOpener, WebBrowserOpener
from .errors import RequestFailed, StreamUnavailable
from .http import HttpClient, encode_query
from .jsonscan import extract_string
from .models import Playlist, Track, parse_playlists, parse_tracks
from .supervisor import BackendSupervisor

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200
STREAM_PREVIEW_CHARS = 400
DEFAULT_STREAM_ERROR = "Stream URL not available"


class CatalogGateway:
    def __init__(
        self,
        client: HttpClient,
        supervisor: BackendSupervisor,
        browser: Optional[BrowserOpener] = None,
    ):
        self.client = client
        self.supervisor = supervisor
        self.browser = browser or WebBrowserOpener()

        self._data_lock = threading.Lock()
        self._search_results: list[Track] = []
        self._playlists: list[Playlist] = []

        self._auth_lock = threading.Lock()
        self._auth_prompt_shown = False

    @property
    def config_url(self) -> str:
        return f"{self.client.base_url}/config"

    @property
    def auth_prompt_shown(self) -> bool:
        return self._auth_prompt_shown

    def _request(self, endpoint: str, preview: int = PREVIEW_CHARS) -> str:
        self.supervisor.ensure_running()
        body = self.client.get(endpoint)
        if not body:
            raise RequestFailed(f"Empty response from backend for {endpoint}")
        logger.info("%s: response received (%d bytes)", endpoint, len(body))
        logger.debug("%s: response preview: %s", endpoint, body[:preview])
        return body

    # ---- catalog operations ----

    def search(self, query: str) -> list[Track]:
        logger.info("search: query=%r", query)
        body = self._request(f"/search?q={encode_query(query)}")
        tracks = parse_tracks(body)
        with self._data_lock:
            self._search_results = tracks
        logger.info("search: parsed %d tracks", len(tracks))
        return list(tracks)

    def list_playlists(self) -> list[Playlist]:
        body = self._request("/playlists")
        playlists = parse_playlists(body)
        with self._data_lock:
            self._playlists = playlists
        logger.info("playlists: parsed %d playlists", len(playlists))
        return list(playlists)

    def list_playlist_tracks(self, playlist_id: str) -> list[Track]:
        # Playlist ids are backend-generated tokens; passed verbatim
        body = self._request(f"/playlist_tracks?id={playlist_id}")
        tracks = parse_tracks(body)
        logger.info("playlist %s: parsed %d tracks", playlist_id, len(tracks))
        return tracks

    def resolve_stream_url(self, track_id: str) -> str:
        """Ask the backend for a playable URL.

        Slow (the backend resolves remotely) and bounded only by the request
        timeout. Raises StreamUnavailable carrying the backend's `detail`.
        """
        logger.info("get_url: id=%s", track_id)
        body = self._request(f"/get_url?id={track_id}", preview=STREAM_PREVIEW_CHARS)
        url = extract_string(body, "streamUrl") or extract_string(body, "url")
        if not url:
            detail = extract_string(body, "detail")
            logger.error(
                "get_url: no streamUrl in response. Detail: %s; Raw: %s",
                detail,
                body[:STREAM_PREVIEW_CHARS],
            )
            raise StreamUnavailable(detail or DEFAULT_STREAM_ERROR)
        logger.info("get_url: stream URL = %s...", url[:100])
        return url

    def check_auth_and_maybe_prompt(self) -> bool:
        """Return the backend's auth state, opening the config page once if signed out."""
        self.supervisor.ensure_running()
        if self.client.is_authenticated():
            return True
        with self._auth_lock:
            if self._auth_prompt_shown:
                return False
            self._auth_prompt_shown = True
        logger.info("Auth not configured, opening config page: %s", self.config_url)
        self.browser.open(self.config_url)
        return False

    # ---- cached views ----

    def search_results(self) -> list[Track]:
        with self._data_lock:
            return list(self._search_results)

    def playlists(self) -> list[Playlist]:
        with self._data_lock:
            return list(self._playlists)
