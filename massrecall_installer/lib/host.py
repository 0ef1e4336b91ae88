"""Host integration boundary.

Finding the game installation and creating desktop shortcuts are platform
specific. The installer only talks to these protocols; platform backends
(registry lookups, COM shell links) can be injected without touching the core.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence

from .launch import GAME_EXECUTABLE, LAUNCHER_CANDIDATES

logger = logging.getLogger(__name__)

ENV_INSTALL_ROOT = "SC2PATH"

DEFAULT_INSTALL_ROOTS = (
    r"C:\Program Files (x86)\StarCraft II",
    r"C:\Program Files\StarCraft II",
    "~/Games/StarCraft II",
    "/Applications/StarCraft II",
)


class InstallRootLocator(Protocol):
    def locate(self) -> Optional[str]:
        ...


class ShortcutCreator(Protocol):
    def create(
        self,
        *,
        name: str,
        target: Path,
        arguments: Sequence[str],
        working_dir: Path,
        icon: Optional[Path],
    ) -> Optional[Path]:
        ...


def is_valid_install_root(path: Optional[str]) -> bool:
    if not path:
        return False
    p = Path(path).expanduser()
    if not p.is_dir():
        return False
    if (p / GAME_EXECUTABLE).is_file():
        return True
    return p.joinpath(*LAUNCHER_CANDIDATES[0]).is_file()


class ConfiguredInstallRoot:
    """An explicitly supplied root; it only has to be an existing directory."""

    def __init__(self, path: str) -> None:
        self.path = path

    def locate(self) -> Optional[str]:
        p = Path(self.path).expanduser()
        return str(p) if p.is_dir() else None


class DefaultInstallRootLocator:
    """Environment variable first, then the usual install folders."""

    def __init__(self, candidates: Iterable[str] = DEFAULT_INSTALL_ROOTS) -> None:
        self.candidates = list(candidates)

    def locate(self) -> Optional[str]:
        env_root = os.environ.get(ENV_INSTALL_ROOT)
        for c in ([env_root] if env_root else []) + self.candidates:
            if is_valid_install_root(c):
                return str(Path(c).expanduser())
        return None


class LoggingShortcutCreator:
    """Records the launch command instead of writing a platform shortcut."""

    def __init__(self) -> None:
        self.created: list[dict] = []

    def create(
        self,
        *,
        name: str,
        target: Path,
        arguments: Sequence[str],
        working_dir: Path,
        icon: Optional[Path],
    ) -> Optional[Path]:
        entry = {
            "name": name,
            "target": str(target),
            "arguments": list(arguments),
            "working_dir": str(working_dir),
            "icon": str(icon) if icon else None,
        }
        self.created.append(entry)
        logger.info("Launch command for %s: %s %s", name, str(target), " ".join(f'"{a}"' for a in arguments))
        return None
