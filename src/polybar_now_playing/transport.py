"""Session-bus transport used to reach MPRIS players."""

from __future__ import annotations

from typing import Any, Optional, Protocol, cast

MPRIS_PATH = "/org/mpris/MediaPlayer2"
PROPERTIES_IFACE = "org.freedesktop.DBus.Properties"

dbus: Any | None = None
_DBUS_IMPORT_ERROR: Optional[Exception] = None


class TransportError(Exception):
    """A bus call failed or returned data of the wrong shape.

    Treated as transient: the caller keeps its previous state and retries on
    the next tick.
    """


class BusTransport(Protocol):
    def list_names(self) -> list[str]: ...

    def open(self, name: str) -> object: ...

    def get_property(self, ref: object, interface: str, prop: str) -> object: ...


def _load_dbus() -> None:
    global dbus
    global _DBUS_IMPORT_ERROR
    if dbus is not None or _DBUS_IMPORT_ERROR is not None:
        return
    try:
        import dbus as dbus_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        dbus = None
        _DBUS_IMPORT_ERROR = exc
    else:
        dbus = cast(Any, dbus_module)
        _DBUS_IMPORT_ERROR = None


class DBusTransport:
    """Thin wrapper around dbus-python's session bus."""

    def __init__(self, *, timeout: float = 5.0) -> None:
        _load_dbus()
        if dbus is None:
            raise RuntimeError(
                "D-Bus backend is unavailable. Install the dbus-python package."
            ) from _DBUS_IMPORT_ERROR
        self._dbus = cast(Any, dbus)
        self._timeout = timeout
        try:
            self._bus = self._dbus.SessionBus()
        except self._dbus.exceptions.DBusException as exc:
            raise TransportError(f"Cannot connect to session bus: {exc}") from exc

    def list_names(self) -> list[str]:
        """Return every name currently owned on the bus."""
        try:
            names = self._bus.list_names()
        except self._dbus.exceptions.DBusException as exc:
            raise TransportError(f"ListNames failed: {exc}") from exc
        return [str(name) for name in names]

    def open(self, name: str) -> object:
        """Return a proxy for the player object owned by name."""
        try:
            return self._bus.get_object(name, MPRIS_PATH, introspect=False)
        except self._dbus.exceptions.DBusException as exc:
            raise TransportError(f"Cannot reach {name}: {exc}") from exc

    def get_property(self, ref: object, interface: str, prop: str) -> object:
        """Read one property through org.freedesktop.DBus.Properties."""
        try:
            return cast(Any, ref).Get(
                interface,
                prop,
                dbus_interface=PROPERTIES_IFACE,
                timeout=self._timeout,
            )
        except self._dbus.exceptions.DBusException as exc:
            raise TransportError(f"Get {interface}.{prop} failed: {exc}") from exc
