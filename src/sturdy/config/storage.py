"""On-disk location of the sqlite protocol cache."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "sturdy"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


def cache_dir() -> Path:
    """``STURDY_CACHE_DIR`` if set, otherwise the platform's per-user cache directory."""
    override = os.getenv("STURDY_CACHE_DIR")
    if override and override.strip():
        return Path(override).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
        return (root / APP_DIR_NAME / "Cache").resolve()
    base = os.getenv("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return (root / APP_DIR_NAME).expanduser().resolve()


def http_cache_path(filename: str = HTTP_CACHE_FILENAME, *, create: bool = True) -> Path:
    directory = cache_dir()
    if create:
        directory.mkdir(parents=True, exist_ok=True)
    return directory / filename
