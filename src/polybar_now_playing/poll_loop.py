"""The fixed-cadence loop that refreshes and prints the bar line."""

from __future__ import annotations

from dataclasses import replace
import logging
import time
from typing import Callable, Optional

from polybar_now_playing.config import AppConfig
from polybar_now_playing.formatter import (
    DisplayMode,
    DisplayState,
    PresentationFormatter,
    render_line,
)
from polybar_now_playing.registry import PlayerRegistry
from polybar_now_playing.scroll import ScrollBuffer
from polybar_now_playing.status import StatusFetcher
from polybar_now_playing.transport import TransportError

logger = logging.getLogger(__name__)


def _write_line(line: str) -> None:
    print(line, flush=True)


class PollLoop:
    """Single-threaded tick loop: refresh, fetch, format, scroll, emit.

    A ``TransportError`` during a tick is transient. The previous display and
    scroll position are kept, the previous line is emitted again and the next
    tick retries.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        fetcher: StatusFetcher,
        formatter: PresentationFormatter,
        config: AppConfig,
        *,
        emit: Callable[[str], None] = _write_line,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._formatter = formatter
        self._config = config
        self._emit = emit
        self._sleep = sleep
        self._now = now
        self.scroll = ScrollBuffer(config.display_width)
        self.state: Optional[DisplayState] = None
        self._last_line: Optional[str] = None
        self._failures = 0
        self._running = False
        self.last_tick = now()

    def _build(self) -> DisplayState:
        self._registry.refresh()
        handle = self._registry.current
        if handle is None:
            return self._formatter.idle(self.scroll)
        status = self._fetcher.fetch_status(handle)
        metadata = self._fetcher.fetch_metadata(handle)
        return self._formatter.build(handle, status, metadata, self.scroll)

    def step(self) -> Optional[str]:
        """Run one tick and return the emitted line, if any."""
        try:
            state = self._build()
        except TransportError as exc:
            self._failures += 1
            if self._failures == 1:
                logger.warning("Bus query failed, keeping last display: %s", exc)
            else:
                logger.debug("Bus query still failing (%d): %s", self._failures, exc)
            if self._last_line is not None:
                self._emit(self._last_line)
            self.last_tick = self._now()
            return self._last_line
        if self._failures:
            logger.info("Bus query recovered after %d failed ticks", self._failures)
            self._failures = 0

        self.scroll.tick()
        if state.scrolling:
            state = replace(state, scroll_body=self.scroll.text)
        if self.state is None or self.state.mode is not state.mode:
            logger.info("Display mode -> %s", state.mode.value)
        self.state = state

        if state.mode is DisplayMode.IDLE and self._config.hide_when_idle:
            line = ""
        else:
            line = render_line(
                state, self._config.display_width, self._config.font_index
            )
        self._last_line = line
        self._emit(line)
        self.last_tick = self._now()
        return line

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Loop until stopped, sleeping the update delay before each tick."""
        self._running = True
        ticks = 0
        delay = self._config.update_delay_ms / 1000.0
        while self._running and (max_ticks is None or ticks < max_ticks):
            self._sleep(delay)
            self.step()
            ticks += 1

    def stop(self) -> None:
        self._running = False
