"""Playback status and track metadata reads for a single player."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from typing_extensions import TypeAlias

from polybar_now_playing.registry import PlayerHandle
from polybar_now_playing.transport import BusTransport, TransportError

PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"

TrackMetadata: TypeAlias = dict[str, str]


class PlaybackStatus(Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"
    STOPPED = "Stopped"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str) -> "PlaybackStatus":
        for status in cls:
            if status.value == value:
                return status
        return cls.UNKNOWN


def _metadata_text(value: object) -> str | None:
    if isinstance(value, (list, tuple)):
        parts = [str(item) for item in value if str(item)]
        return ", ".join(parts) if parts else None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class StatusFetcher:
    """Reads PlaybackStatus and Metadata through the bus transport."""

    def __init__(self, transport: BusTransport) -> None:
        self._transport = transport

    def fetch_status(self, handle: PlayerHandle) -> PlaybackStatus:
        raw = self._transport.get_property(
            handle.ref, PLAYER_IFACE, "PlaybackStatus"
        )
        if not isinstance(raw, str):
            raise TransportError(
                f"{handle.name} returned a malformed PlaybackStatus: {raw!r}"
            )
        return PlaybackStatus.parse(str(raw))

    def fetch_metadata(self, handle: PlayerHandle) -> TrackMetadata:
        """Return string metadata; list values such as artists are joined."""
        raw = self._transport.get_property(handle.ref, PLAYER_IFACE, "Metadata")
        if not isinstance(raw, Mapping):
            raise TransportError(f"{handle.name} returned malformed Metadata")
        metadata: TrackMetadata = {}
        for key, value in raw.items():
            text = _metadata_text(value)
            if text is not None:
                metadata[str(key)] = text
        return metadata
