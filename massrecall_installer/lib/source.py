from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .env import LAYOUT
from .manifests import Manifest

logger = logging.getLogger(__name__)


class UserChoice(str, Enum):
    DOWNLOAD = "download"
    SKIP = "skip"


class AcquisitionMode(str, Enum):
    AUTO_DOWNLOAD = "auto_download"
    MANUAL_PROMPT = "manual_prompt"
    LOCAL_SCAN = "local_scan"


def resolve_mode(*, online: bool, manifest: Optional[Manifest], choice: UserChoice) -> AcquisitionMode:
    """Decide where archives come from. Pure; touches neither disk nor network."""

    if not online or choice is not UserChoice.DOWNLOAD:
        return AcquisitionMode.LOCAL_SCAN
    if manifest:
        return AcquisitionMode.AUTO_DOWNLOAD
    return AcquisitionMode.MANUAL_PROMPT


def find_local_archives(directory: str | Path) -> List[Path]:
    """Top-level zip archives in ``directory`` (no recursion)."""

    d = Path(directory)
    if not d.is_dir():
        return []
    found = [
        p for p in d.iterdir() if p.is_file() and p.suffix.lower() == LAYOUT.archive_ext
    ]
    return sorted(found, key=lambda p: p.name.lower())
