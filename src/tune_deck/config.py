"""Configuration persistence for TuneDeck."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LIST_PANEL_NAMES = ("playlists", "main")


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    queue_name: str = "TuneDeck Queue"
    poll_interval: float = 1.0
    script_timeout: float = 5.0
    volume_step: int = 10
    seek_step: int = 5
    playlist_cache_ttl: float = 30.0
    hidden_playlists: tuple[str, ...] = ("Library", "Music")
    list_panels: tuple[str, ...] = field(default=LIST_PANEL_NAMES)


def get_config_dir(app_name: str = "tune-deck") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    if _is_macos():
        return _ensure_dir(Path.home() / "Library" / "Application Support" / app_name)
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return _ensure_dir(root / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "queue_name": cfg.queue_name,
        "poll_interval": cfg.poll_interval,
        "script_timeout": cfg.script_timeout,
        "volume_step": cfg.volume_step,
        "seek_step": cfg.seek_step,
        "playlist_cache_ttl": cfg.playlist_cache_ttl,
        "hidden_playlists": list(cfg.hidden_playlists),
        "list_panels": list(cfg.list_panels),
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def _ensure_dir(path: Path) -> Path:
    """Create the directory if needed and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _get_number(
    raw: dict[str, Any],
    key: str,
    default: float,
    *,
    min_value: float,
    max_value: float,
) -> float:
    """Fetch a number, clamping it into range; bools and strings are rejected."""
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        value = default
    return float(max(min_value, min(max_value, value)))


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int,
    max_value: int,
) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        value = default
    return max(min_value, min(max_value, value))


def _get_str(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        return default
    return value


def _get_str_list(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    value = raw.get(key)
    if not isinstance(value, list):
        return default
    return tuple(item for item in value if isinstance(item, str) and item)


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    defaults = AppConfig()
    panels = tuple(
        name
        for name in _get_str_list(raw, "list_panels", defaults.list_panels)
        if name in LIST_PANEL_NAMES
    )
    if not panels:
        panels = defaults.list_panels
    return AppConfig(
        queue_name=_get_str(raw, "queue_name", defaults.queue_name),
        poll_interval=_get_number(
            raw, "poll_interval", defaults.poll_interval, min_value=0.25, max_value=30.0
        ),
        script_timeout=_get_number(
            raw,
            "script_timeout",
            defaults.script_timeout,
            min_value=0.5,
            max_value=60.0,
        ),
        volume_step=_get_int(
            raw, "volume_step", defaults.volume_step, min_value=1, max_value=50
        ),
        seek_step=_get_int(raw, "seek_step", defaults.seek_step, min_value=1, max_value=60),
        playlist_cache_ttl=_get_number(
            raw,
            "playlist_cache_ttl",
            defaults.playlist_cache_ttl,
            min_value=0.0,
            max_value=3600.0,
        ),
        hidden_playlists=_get_str_list(
            raw, "hidden_playlists", defaults.hidden_playlists
        ),
        list_panels=tuple(dict.fromkeys(panels)),
    )
