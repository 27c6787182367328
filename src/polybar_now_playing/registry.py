"""Discovery of MPRIS players on the bus."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional

from polybar_now_playing.transport import BusTransport

logger = logging.getLogger(__name__)

MPRIS_PREFIX = "org.mpris.MediaPlayer2."


@dataclass(frozen=True)
class PlayerHandle:
    """A single media-player endpoint and its transport proxy."""

    name: str
    ref: object = field(default=None, compare=False, repr=False)

    @property
    def short_name(self) -> str:
        """Return the name as playerctl expects it."""
        if self.name.startswith(MPRIS_PREFIX):
            return self.name[len(MPRIS_PREFIX) :]
        return self.name


class PlayerRegistry:
    """Player list rebuilt each tick plus the index of the current player."""

    def __init__(self, transport: BusTransport) -> None:
        self._transport = transport
        self._players: list[PlayerHandle] = []
        self.current_index = 0

    @property
    def players(self) -> list[PlayerHandle]:
        return list(self._players)

    @property
    def current(self) -> Optional[PlayerHandle]:
        if not self._players:
            return None
        return self._players[self.current_index]

    def refresh(self) -> list[PlayerHandle]:
        """Re-enumerate players and keep the current index in range."""
        names = [
            name
            for name in self._transport.list_names()
            if name.startswith(MPRIS_PREFIX)
        ]
        players = [PlayerHandle(name, self._transport.open(name)) for name in names]
        if [p.name for p in players] != [p.name for p in self._players]:
            logger.debug("Players: %s", ", ".join(names) or "none")
        self._players = players
        if self.current_index >= len(players) or self.current_index < 0:
            self.current_index = 0
        return self.players
