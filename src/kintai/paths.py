"""Helpers for locating application directories."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "kintai"
APP_AUTHOR = "kintai"
CONFIG_ENV_VAR = "KINTAI_CONFIG"


def get_config_dir() -> Path:
    """Return the per-user configuration directory (not created)."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    return Path(dirs.user_config_path)


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.toml"
