"""
Defines the abstract base class for host-facing source plugins.

A host media application drives a source plugin through a handful of entry
points: load, search, browse a folder, resolve a playable URL. `BasePlugin`
fixes that interface so a host binding can talk to any implementation the
same way. Entry points return a success flag and never raise across the host
boundary.
"""

from abc import ABC, abstractmethod

from ..core.capabilities import FolderSink, TrackSink


class BasePlugin(ABC):
    """An abstract base class that all source plugins must inherit from."""

    @abstractmethod
    def on_load(self) -> bool:
        """
        Prepare the plugin when the host loads it.

        Typically starts whatever service the plugin depends on.
        """
        pass

    @abstractmethod
    def on_search(self, query: str, sink: TrackSink) -> bool:
        """Run a search and feed results to `sink`."""
        pass

    @abstractmethod
    def get_stream_url(self, track_id: str) -> tuple[bool, str, str]:
        """Return `(ok, url, error_message)` for a track."""
        pass

    @abstractmethod
    def get_folder_list(self, sink: FolderSink) -> bool:
        pass

    @abstractmethod
    def get_folder(self, folder_id: str, sink: TrackSink) -> bool:
        pass

    def on_search_cancel(self) -> bool:
        return True

    def shutdown(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
