"""Shared filesystem path helpers."""
from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "jwks-service"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=_APP_NAME, appauthor=False, roaming=False)


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(_dirs().user_config_path)


def default_store_dir() -> Path:
    """Return the per-user data directory used by the file record store."""
    return Path(_dirs().user_data_path)
