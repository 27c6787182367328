"""Startup configuration for polybar-now-playing."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Immutable settings; the defaults are the widget's fixed constants."""

    display_width: int = 20
    font_index: int = 1
    update_delay_ms: int = 300
    metadata_fields: tuple[str, ...] = ("xesam:title", "xesam:artist")
    metadata_separator: str = "-"
    hide_when_idle: bool = False
    control_command: str = "playerctl"


def get_config_dir(app_name: str = "polybar-now-playing") -> Path:
    """Return the per-user config directory."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = path or get_config_path()
    if not path.is_file():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    """Fetch a boolean value with fallback for invalid types."""
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    return default


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allow_empty: bool = False,
) -> str:
    """Fetch a string value, optionally allowing empty strings."""
    value = raw.get(key, default)
    if not isinstance(value, str):
        return default
    if not value and not allow_empty:
        return default
    return value


def _get_fields(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    value = raw.get(key, default)
    if not isinstance(value, (list, tuple)):
        return default
    fields = tuple(item for item in value if isinstance(item, str) and item)
    return fields or default


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    defaults = AppConfig()
    return AppConfig(
        display_width=_get_int(
            raw, "display_width", defaults.display_width, min_value=1
        ),
        font_index=_get_int(raw, "font_index", defaults.font_index, min_value=0),
        update_delay_ms=_get_int(
            raw, "update_delay_ms", defaults.update_delay_ms, min_value=10
        ),
        metadata_fields=_get_fields(
            raw, "metadata_fields", defaults.metadata_fields
        ),
        metadata_separator=_get_str(
            raw, "metadata_separator", defaults.metadata_separator
        ),
        hide_when_idle=_get_bool(raw, "hide_when_idle", defaults.hide_when_idle),
        control_command=_get_str(raw, "control_command", defaults.control_command),
    )
