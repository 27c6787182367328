"""Turns player state into polybar markup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from polybar_now_playing.registry import PlayerHandle
from polybar_now_playing.scroll import ScrollBuffer
from polybar_now_playing.status import PlaybackStatus, TrackMetadata
from polybar_now_playing.text_width import clamp, width

# First matching pattern wins, so more specific names go first.
PLAYER_ICONS: tuple[tuple[str, str], ...] = (
    ("spotify", "\uf1bc"),
    ("firefox", "\uf269"),
)
DEFAULT_ICON = "\uf001"

PREV_GLYPH = "\uf048"
PLAY_GLYPH = "\uf04b"
PAUSE_GLYPH = "\uf04c"
NEXT_GLYPH = "\uf051"

NO_PLAYER_TEXT = "No player available"
SCROLL_BRACKET = "| "


class DisplayMode(Enum):
    IDLE = "idle"
    STATIC = "static"
    SCROLLING = "scrolling"
    PAUSED = "paused"


@dataclass(frozen=True)
class DisplayState:
    """Everything needed to render one output line."""

    prefix: str
    body: str
    suffix: str
    paused: bool = False
    mode: DisplayMode = DisplayMode.STATIC
    scroll_body: str = ""

    @property
    def scrolling(self) -> bool:
        return self.mode in (DisplayMode.SCROLLING, DisplayMode.PAUSED)


def select_icon(
    player_name: str,
    icons: Sequence[tuple[str, str]] = PLAYER_ICONS,
    default: str = DEFAULT_ICON,
) -> str:
    """Return the icon of the first pattern found in the player name."""
    lowered = player_name.lower()
    for pattern, icon in icons:
        if pattern.lower() in lowered:
            return icon
    return default


def field_label(field: str) -> str:
    """Return the bare field name, e.g. ``artist`` for ``xesam:artist``."""
    return field.rsplit(":", 1)[-1]


def join_metadata(
    metadata: TrackMetadata, fields: Sequence[str], separator: str
) -> str:
    parts = [metadata.get(field) or f"No {field_label(field)}" for field in fields]
    return f" {separator} ".join(parts)


class PresentationFormatter:
    """Builds prefix, body and suffix for the current player."""

    def __init__(
        self,
        *,
        display_width: int = 20,
        metadata_fields: Sequence[str] = ("xesam:title", "xesam:artist"),
        separator: str = "-",
        control_command: str = "playerctl",
        icons: Sequence[tuple[str, str]] = PLAYER_ICONS,
        default_icon: str = DEFAULT_ICON,
    ) -> None:
        self.display_width = display_width
        self._fields = tuple(metadata_fields)
        self._separator = separator
        self._command = control_command
        self._icons = tuple(icons)
        self._default_icon = default_icon

    def idle(self, scroll: ScrollBuffer) -> DisplayState:
        scroll.clear()
        return DisplayState(
            prefix="",
            body="",
            suffix=NO_PLAYER_TEXT,
            paused=True,
            mode=DisplayMode.IDLE,
        )

    def build(
        self,
        handle: PlayerHandle,
        status: PlaybackStatus,
        metadata: TrackMetadata,
        scroll: ScrollBuffer,
    ) -> DisplayState:
        """Return the display for one player and load the marquee if needed."""
        paused = status is not PlaybackStatus.PLAYING
        prefix = select_icon(handle.name, self._icons, self._default_icon)
        controls = self.controls(handle, status)
        text = join_metadata(metadata, self._fields, self._separator)
        scroll.paused = paused
        if width(text) <= self.display_width:
            scroll.clear()
            return DisplayState(
                prefix=prefix,
                body=clamp(text, self.display_width),
                suffix=f" {controls}",
                paused=paused,
                mode=DisplayMode.STATIC,
            )
        scroll.load(f" {self._separator} {text} |", key=handle.name)
        return DisplayState(
            prefix=prefix,
            body="",
            suffix=SCROLL_BRACKET + controls,
            paused=paused,
            mode=DisplayMode.PAUSED if paused else DisplayMode.SCROLLING,
            scroll_body=scroll.text,
        )

    def buttons(self, handle: PlayerHandle) -> dict[str, str]:
        """Return the four click-action buttons keyed by action."""
        glyphs = {
            "previous": PREV_GLYPH,
            "play": PLAY_GLYPH,
            "pause": PAUSE_GLYPH,
            "next": NEXT_GLYPH,
        }
        player = handle.short_name.replace(":", "\\:")
        return {
            action: f"%{{A1:{self._command} -p {player} {action}:}}{glyph}%{{A}}"
            for action, glyph in glyphs.items()
        }

    def controls(self, handle: PlayerHandle, status: PlaybackStatus) -> str:
        buttons = self.buttons(handle)
        playing = status is PlaybackStatus.PLAYING
        toggle = buttons["pause"] if playing else buttons["play"]
        return " ".join((buttons["previous"], toggle, buttons["next"]))


def render_line(state: DisplayState, display_width: int, font_index: int = 1) -> str:
    """Return the polybar line for a display state."""
    body = clamp(state.scroll_body, display_width) if state.scrolling else state.body
    return f"{state.prefix} %{{T{font_index}}}{body}%{{T-}}{state.suffix}"
