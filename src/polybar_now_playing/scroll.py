"""Marquee buffer that rotates text wider than the display."""

from __future__ import annotations

import logging
from typing import Optional

from polybar_now_playing.text_width import clamp, width

logger = logging.getLogger(__name__)


class ScrollBuffer:
    """Text buffer rotated one character per tick while it overflows."""

    def __init__(self, display_width: int) -> None:
        self._width = max(0, display_width)
        self._text = ""
        self._source: Optional[tuple[Optional[str], str]] = None
        self.paused = False

    @property
    def text(self) -> str:
        """Return the current rotation of the buffer."""
        return self._text

    @property
    def width(self) -> int:
        return self._width

    @property
    def active(self) -> bool:
        return self._source is not None

    def load(self, text: str, key: Optional[str] = None) -> bool:
        """Load marquee text, keeping the rotation when nothing changed.

        Returns True when the buffer was reset.
        """
        source = (key, text)
        if source == self._source:
            return False
        logger.debug("Marquee reset for %s", key)
        self._source = source
        self._text = text
        return True

    def clear(self) -> None:
        self._source = None
        self._text = ""

    def tick(self) -> None:
        """Advance the marquee by one step."""
        if self.paused or self._source is None:
            return
        current = width(self._text)
        if current > self._width:
            self._text = self._text[1:] + self._text[:1]
        elif current < self._width:
            self._text += " " * (self._width - current)

    def window(self) -> str:
        """Return the visible slice of the buffer."""
        return clamp(self._text, self._width)
