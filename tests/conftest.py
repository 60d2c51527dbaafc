"""Pytest configuration for TuneDeck."""

from __future__ import annotations

import os
import shutil

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("TUNEDECK_CI") != "1" and shutil.which("osascript"):
        return
    skip_live = pytest.mark.skip(reason="Needs a running Music app.")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live: talks to the real Music app")
