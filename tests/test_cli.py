"""Tests for CLI parsing and dispatch."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

from polybar_now_playing import cli
from polybar_now_playing.config import AppConfig
from polybar_now_playing.transport import TransportError


@pytest.fixture
def quiet_startup(monkeypatch) -> None:
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(cli, "init_logging", lambda: Path("app.log"))
    monkeypatch.setattr(cli, "enable_faulthandler", lambda _: Path("hangdump.log"))
    monkeypatch.setattr(cli, "load_config", lambda _path: AppConfig())


def test_parse_defaults() -> None:
    args = cli.build_parser().parse_args([])
    assert args.config is None
    assert args.once is False
    assert args.verbose is False
    assert args.hang_dump == 0.0


def test_parse_options() -> None:
    args = cli.build_parser().parse_args(
        ["--config", "np.json", "--once", "-v", "--hang-dump", "20"]
    )
    assert args.config == Path("np.json")
    assert args.once is True
    assert args.verbose is True
    assert args.hang_dump == 20.0


def test_main_once_prints_single_line(
    monkeypatch, capsys, transport, quiet_startup
) -> None:
    transport.add_player(
        "org.mpris.MediaPlayer2.spotify",
        metadata={"xesam:title": "Song", "xesam:artist": "Band"},
    )
    monkeypatch.setattr(cli, "DBusTransport", lambda: transport)
    assert cli.main(["--once"]) == 0
    out = capsys.readouterr().out
    assert out.count("\n") == 1
    assert "Song - Band" in out
    assert "playerctl -p spotify" in out


def test_main_reports_missing_backend(monkeypatch, capsys, quiet_startup) -> None:
    def boom():
        raise RuntimeError("D-Bus backend is unavailable")

    monkeypatch.setattr(cli, "DBusTransport", boom)
    assert cli.main(["--once"]) == 1
    assert "unavailable" in capsys.readouterr().err


def test_main_reports_missing_session_bus(monkeypatch, capsys, quiet_startup) -> None:
    def boom():
        raise TransportError("Cannot connect to session bus")

    monkeypatch.setattr(cli, "DBusTransport", boom)
    assert cli.main([]) == 1
    assert "session bus" in capsys.readouterr().err


def test_main_runs_loop_until_interrupted(
    monkeypatch, transport, quiet_startup
) -> None:
    monkeypatch.setattr(cli, "DBusTransport", lambda: transport)

    def interrupted(self, max_ticks=None) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(cli.PollLoop, "run", interrupted)
    assert cli.main([]) == 0


def test_main_starts_and_stops_watchdog(monkeypatch, transport, quiet_startup) -> None:
    events: list[str] = []

    class FakeWatchdog:
        def __init__(self, get_last_tick, *, threshold_seconds: float) -> None:
            events.append(f"init {threshold_seconds}")
            assert isinstance(get_last_tick(), float)

        def start(self) -> None:
            events.append("start")

        def stop(self) -> None:
            events.append("stop")

    monkeypatch.setattr(cli, "DBusTransport", lambda: transport)
    monkeypatch.setattr(cli, "HangWatchdog", FakeWatchdog)
    monkeypatch.setattr(cli.PollLoop, "run", lambda self, max_ticks=None: None)
    assert cli.main(["--hang-dump", "12"]) == 0
    assert events == ["init 12.0", "start", "stop"]


def test_build_loop_uses_config(transport) -> None:
    loop = cli.build_loop(AppConfig(display_width=8), transport)
    assert loop.scroll.width == 8
