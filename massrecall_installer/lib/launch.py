from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .env import LAYOUT

logger = logging.getLogger(__name__)

LAUNCHER_CANDIDATES = (
    ("Support64", "SC2Switcher_x64.exe"),
    ("Support64", "SC2Switcher.exe"),
)
GAME_EXECUTABLE = "StarCraft II.exe"


def find_entry_point(maps_root: str | Path) -> Optional[Path]:
    """Locate ``<canonical>/<entry file>`` under the maps root.

    Tries the exact name first, then a case-insensitive match among the
    files of that one directory. Returns None if either is missing.
    """

    content_dir = Path(maps_root) / LAYOUT.canonical_name
    if not content_dir.is_dir():
        return None

    exact = content_dir / LAYOUT.entry_file
    if exact.is_file():
        return exact

    wanted = LAYOUT.entry_file.casefold()
    try:
        entries = sorted(content_dir.iterdir())
    except OSError as e:
        logger.warning("Cannot list %s: %s", str(content_dir), e)
        return None
    for item in entries:
        if item.is_file() and item.name.casefold() == wanted:
            return item
    return None


def find_launcher_executable(install_root: str | Path) -> Path:
    """The switcher if present, else the game executable (which may not exist)."""

    root = Path(install_root)
    for parts in LAUNCHER_CANDIDATES:
        candidate = root.joinpath(*parts)
        if candidate.is_file():
            return candidate
    return root / GAME_EXECUTABLE
