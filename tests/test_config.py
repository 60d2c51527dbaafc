"""Tests for config persistence."""

from __future__ import annotations

import json
import os
from pathlib import Path


from tune_deck import config


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    loaded = config.load_config()
    assert loaded == config.AppConfig()


def test_load_defaults_when_corrupt(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    config_path = tmp_path / "config.json"
    config_path.write_text("{not-json", encoding="utf-8")
    loaded = config.load_config()
    assert loaded == config.AppConfig()


def test_load_defaults_when_not_an_object(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / "config.json").write_text("[1, 2]", encoding="utf-8")
    assert config.load_config() == config.AppConfig()


def test_save_load_round_trip(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    original = config.AppConfig(
        queue_name="Up Next",
        poll_interval=2.5,
        script_timeout=8.0,
        volume_step=5,
        seek_step=15,
        playlist_cache_ttl=0.0,
        hidden_playlists=("Library", "Podcasts"),
        list_panels=("main", "playlists"),
    )
    config.save_config(original)
    loaded = config.load_config()
    assert loaded == original


def test_save_config_atomic_write(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    replaced: list[tuple[Path, Path]] = []

    def fake_replace(src: Path, dest: Path) -> None:
        replaced.append((src, dest))
        assert src.exists()
        data = json.loads(src.read_text(encoding="utf-8"))
        assert data["queue_name"] == "TuneDeck Queue"
        dest.write_text(json.dumps(data), encoding="utf-8")

    monkeypatch.setattr(config.os, "replace", fake_replace)
    config.save_config(config.AppConfig())
    assert replaced
    src, dest = replaced[0]
    assert src.suffix == ".tmp"
    assert dest.name == "config.json"


def test_config_from_mapping_sanitizes_values() -> None:
    raw = {
        "queue_name": "   ",
        "poll_interval": True,
        "script_timeout": "slow",
        "volume_step": 500,
        "seek_step": 0,
        "playlist_cache_ttl": -4,
        "hidden_playlists": "Library",
        "list_panels": ["sidebar", 3],
    }
    cfg = config._config_from_mapping(raw)
    assert cfg.queue_name == "TuneDeck Queue"
    assert cfg.poll_interval == 1.0
    assert cfg.script_timeout == 5.0
    assert cfg.volume_step == 50
    assert cfg.seek_step == 1
    assert cfg.playlist_cache_ttl == 0.0
    assert cfg.hidden_playlists == ("Library", "Music")
    assert cfg.list_panels == ("playlists", "main")


def test_config_from_mapping_clamps_poll_interval() -> None:
    assert config._config_from_mapping({"poll_interval": 0.01}).poll_interval == 0.25
    assert config._config_from_mapping({"poll_interval": 99}).poll_interval == 30.0


def test_config_from_mapping_dedupes_panels() -> None:
    cfg = config._config_from_mapping({"list_panels": ["main", "main", "playlists"]})
    assert cfg.list_panels == ("main", "playlists")


def test_get_config_dir_prefers_xdg(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "_is_macos", lambda: False)
    monkeypatch.setattr(config.os, "name", "posix")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    path = config.get_config_dir()
    assert path == tmp_path / "tune-deck"
    assert os.path.isdir(path)


def test_get_config_dir_macos(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "_is_macos", lambda: True)
    monkeypatch.setattr(config.os, "name", "posix")
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
    path = config.get_config_dir()
    assert path == tmp_path / "Library" / "Application Support" / "tune-deck"
