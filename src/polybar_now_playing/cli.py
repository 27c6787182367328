"""Command-line entry point for polybar-now-playing."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from polybar_now_playing.config import AppConfig, load_config
from polybar_now_playing.formatter import PresentationFormatter
from polybar_now_playing.hangwatch import (
    HangWatchdog,
    dump_threads,
    enable_faulthandler,
)
from polybar_now_playing.logging_setup import init_logging, set_console_level
from polybar_now_playing.poll_loop import PollLoop
from polybar_now_playing.registry import PlayerRegistry
from polybar_now_playing.status import StatusFetcher
from polybar_now_playing.transport import BusTransport, DBusTransport, TransportError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="polybar-now-playing",
        description="Print the current MPRIS track as a polybar line.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON config file",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print a single line and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--hang-dump",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Dump stacks when a tick takes longer than SECONDS (0 disables)",
    )
    return parser


def build_loop(config: AppConfig, transport: BusTransport) -> PollLoop:
    formatter = PresentationFormatter(
        display_width=config.display_width,
        metadata_fields=config.metadata_fields,
        separator=config.metadata_separator,
        control_command=config.control_command,
    )
    return PollLoop(
        PlayerRegistry(transport),
        StatusFetcher(transport),
        formatter,
        config,
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    log_path = init_logging()
    enable_faulthandler(log_path)
    if args.verbose:
        set_console_level(logging.DEBUG)

    def excepthook(exc_type, exc, tb) -> None:
        logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    config = load_config(args.config)
    try:
        transport = DBusTransport()
    except (RuntimeError, TransportError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    loop = build_loop(config, transport)
    if args.once:
        loop.step()
        return 0

    watchdog = None
    if args.hang_dump > 0:
        watchdog = HangWatchdog(
            lambda: loop.last_tick, threshold_seconds=args.hang_dump
        )
        watchdog.start()
    logger.info("Polling every %d ms", config.update_delay_ms)
    try:
        loop.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        if watchdog is not None:
            watchdog.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
