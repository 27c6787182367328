"""Pytest configuration and bus fakes for polybar-now-playing."""

from __future__ import annotations

import os
from typing import Any

import pytest

from polybar_now_playing.transport import TransportError


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "session_bus: needs dbus-python and a live session bus"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("NOW_PLAYING_CI") != "1" and os.environ.get(
        "DBUS_SESSION_BUS_ADDRESS"
    ):
        return
    skip_bus = pytest.mark.skip(reason="No session bus available.")
    for item in items:
        if "session_bus" in item.keywords:
            item.add_marker(skip_bus)


class FakeTransport:
    """In-memory bus: players map a bus name to its properties."""

    def __init__(self) -> None:
        self.players: dict[str, dict[str, Any]] = {}
        self.extra_names: list[str] = ["org.freedesktop.Notifications"]
        self.fail_names = False
        self.fail_properties: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def add_player(
        self,
        name: str,
        status: Any = "Playing",
        metadata: Any = None,
    ) -> str:
        self.players[name] = {
            "PlaybackStatus": status,
            "Metadata": {} if metadata is None else metadata,
        }
        return name

    def list_names(self) -> list[str]:
        if self.fail_names:
            raise TransportError("bus went away")
        return [*self.extra_names, *self.players]

    def open(self, name: str) -> object:
        return name

    def get_property(self, ref: object, interface: str, prop: str) -> object:
        name = str(ref)
        self.calls.append((name, prop))
        if name in self.fail_properties or name not in self.players:
            raise TransportError(f"{name} did not answer")
        return self.players[name][prop]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
