# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .jsonscan import extract_array, extract_bool, extract_int, extract_string


class BackendState(Enum):
    UNKNOWN = auto()
    STARTING = auto()
    RUNNING = auto()
    FAILED = auto()


@dataclass(frozen=True)
class Track:
    track_id: str
    title: str
    artist: str = ""
    album: str = ""
    duration: float = 0.0  # seconds
    thumbnail: str = ""
    is_video: bool = False

    @classmethod
    def from_json(cls, item: str) -> Optional[Track]:
        """Build a Track from one raw JSON object; None when id or title is missing."""
        track_id = extract_string(item, "videoId")
        title = extract_string(item, "title")
        if not track_id or not title:
            return None
        return cls(
            track_id=track_id,
            title=title,
            artist=extract_string(item, "artist"),
            album=extract_string(item, "album"),
            duration=float(max(0, extract_int(item, "duration"))),
            thumbnail=extract_string(item, "thumbnail"),
            is_video=extract_bool(item, "isVideo"),
        )


@dataclass(frozen=True)
class Playlist:
    playlist_id: str
    title: str
    count: int = 0
    thumbnail: str = ""

    @classmethod
    def from_json(cls, item: str) -> Optional[Playlist]:
        playlist_id = extract_string(item, "playlistId")
        title = extract_string(item, "title")
        if not playlist_id or not title:
            return None
        return cls(
            playlist_id=playlist_id,
            title=title,
            count=max(0, extract_int(item, "count")),
            thumbnail=extract_string(item, "thumbnail"),
        )


def parse_tracks(body: str) -> list[Track]:
    """Parse an array response; records without id or title are dropped."""
    tracks = (Track.from_json(item) for item in extract_array(body))
    return [t for t in tracks if t is not None]


def parse_playlists(body: str) -> list[Playlist]:
    playlists = (Playlist.from_json(item) for item in extract_array(body))
    return [p for p in playlists if p is not None]
