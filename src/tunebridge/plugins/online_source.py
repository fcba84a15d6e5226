"""
Online source plugin: the host-facing facade over the catalog gateway.

Features:
- Auto-start of the backend on load, with a one-time sign-in prompt
- Search, playlist browsing and cached "search" folder
- Stream URL resolution with a transient "resolving" notification
- Every failure is logged, alerted and returned as a failure flag
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.capabilities import (
    BrowserOpener,
    ConsoleAlert,
    ConsoleNotifier,
    ErrorAlert,
    FolderSink,
    Notifier,
    ProcessLauncher,
    TrackSink,
)
from ..core.catalog import CatalogGateway
from ..core.config import BridgeSettings, get_settings
from ..core.errors import TunebridgeError
from ..core.http import HttpClient
from ..core.supervisor import BackendSupervisor
from .base import BasePlugin

logger = logging.getLogger(__name__)

SEARCH_FOLDER = "search"
PLAYLISTS_FOLDER = "playlists"
RESOLVING_MESSAGE = "Resolving stream..."


@dataclass(frozen=True)
class PluginInfo:
    name: str = "Music Catalog"
    author: str = "tunebridge"
    description: str = "Search, browse and stream from a local catalog backend"
    version: str = ""


class OnlineSourcePlugin(BasePlugin):
    def __init__(
        self,
        gateway: CatalogGateway,
        *,
        notifier: Optional[Notifier] = None,
        alert: Optional[ErrorAlert] = None,
    ):
        self.gateway = gateway
        self.notifier = notifier or ConsoleNotifier()
        self.alert = alert or ConsoleAlert()

    def _fail(self, where: str, error: Exception) -> bool:
        message = str(error) or error.__class__.__name__
        logger.error("%s: %s", where, message)
        self.alert.alert(message)
        return False

    def info(self) -> PluginInfo:
        from .. import __version__

        return PluginInfo(version=__version__)

    def on_load(self) -> bool:
        logger.info("=== Plugin loading ===")
        try:
            self.gateway.supervisor.ensure_running()
            self.gateway.check_auth_and_maybe_prompt()
        except TunebridgeError as e:
            return self._fail("on_load", e)
        logger.info("on_load: backend ready")
        return True

    def on_search(self, query: str, sink: TrackSink) -> bool:
        try:
            tracks = self.gateway.search(query)
        except TunebridgeError as e:
            return self._fail("on_search", e)
        for track in tracks:
            sink.add(track)
        return True

    def on_search_cancel(self) -> bool:
        # Requests can't be interrupted; the per-request timeout bounds them
        logger.debug("on_search_cancel: nothing to cancel")
        return True

    def get_stream_url(self, track_id: str) -> tuple[bool, str, str]:
        url, error = "", None
        self.notifier.show(RESOLVING_MESSAGE)
        try:
            url = self.gateway.resolve_stream_url(track_id)
        except TunebridgeError as e:
            error = e
        finally:
            self.notifier.hide()
        if error is not None:
            self._fail("get_stream_url", error)
            return False, "", str(error)
        return True, url, ""

    def get_folder_list(self, sink: FolderSink) -> bool:
        sink.add(SEARCH_FOLDER, "Search results")
        sink.add(PLAYLISTS_FOLDER, "Playlists")
        for playlist in self.gateway.playlists():
            sink.add(playlist.playlist_id, playlist.title)
        return True

    def get_folder(self, folder_id: str, sink: TrackSink) -> bool:
        try:
            if folder_id == SEARCH_FOLDER:
                self.gateway.supervisor.ensure_running()
                tracks = self.gateway.search_results()
            elif folder_id == PLAYLISTS_FOLDER:
                # Refreshes the playlist cache; playlists surface via get_folder_list
                self.gateway.list_playlists()
                return True
            else:
                tracks = self.gateway.list_playlist_tracks(folder_id)
        except TunebridgeError as e:
            return self._fail("get_folder", e)
        for track in tracks:
            sink.add(track)
        return True

    def shutdown(self) -> None:
        self.gateway.supervisor.shutdown()
        self.gateway.client.close()


def create_plugin(
    settings: Optional[BridgeSettings] = None,
    *,
    launcher: Optional[ProcessLauncher] = None,
    browser: Optional[BrowserOpener] = None,
    notifier: Optional[Notifier] = None,
    alert: Optional[ErrorAlert] = None,
) -> OnlineSourcePlugin:
    """Wire client, supervisor, gateway and facade from settings."""
    settings = settings or get_settings()
    client = HttpClient(settings.base_url, timeout=settings.request_timeout)
    supervisor = BackendSupervisor(
        client,
        settings.backend_path,
        settings.launch_command(),
        launcher=launcher,
        settle_delay=settings.settle_delay,
        startup_retries=settings.startup_retries,
    )
    gateway = CatalogGateway(client, supervisor, browser=browser)
    return OnlineSourcePlugin(gateway, notifier=notifier, alert=alert)
