from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_tree(src: str | Path, dst: str | Path, *, overwrite: bool = True, dry_run: bool = False) -> int:
    """Copy the contents of ``src`` into ``dst`` and return the number of files written.

    The whole directory skeleton is created before the first file is copied.
    With ``overwrite=False`` files already present at the destination are
    left alone and not counted. ``src`` itself is never modified.
    """

    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(str(src))

    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return 0

    files: list[Path] = []
    d.mkdir(parents=True, exist_ok=True)
    for dirpath, dirnames, filenames in os.walk(s):
        base = Path(dirpath)
        for name in dirnames:
            (d / (base / name).relative_to(s)).mkdir(parents=True, exist_ok=True)
        files.extend(base / name for name in filenames)

    count = 0
    for item in files:
        out = d / item.relative_to(s)
        if not overwrite and out.exists():
            continue
        out.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(item, out)
        count += 1
    return count
