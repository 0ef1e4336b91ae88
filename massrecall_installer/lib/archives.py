from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import ExtractionError

logger = logging.getLogger(__name__)


def make_staging_root(base: str | Path, *, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    root = Path(base) / f"_extract_{stamp}"
    root.mkdir(parents=True, exist_ok=True)
    return root


def _extract_zip(archive: Path, dest: Path) -> None:
    dest_resolved = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        for member in zf.infolist():
            out = (dest / member.filename).resolve()
            if out != dest_resolved and dest_resolved not in out.parents:
                raise ExtractionError(archive.name, f"member escapes target: {member.filename}")
        # extractall() replaces files that already exist.
        zf.extractall(dest)


def extract_each(archives: Sequence[str | Path], staging_root: str | Path) -> List[Path]:
    """Expand every archive into its own ``staging_root/<stem>`` subtree.

    Subtrees are never merged here. Any failure is fatal and names the archive.
    """

    root = Path(staging_root)
    root.mkdir(parents=True, exist_ok=True)

    staged: List[Path] = []
    for a in archives:
        archive = Path(a)
        dest = root / archive.stem
        try:
            dest.mkdir(parents=True, exist_ok=True)
            _extract_zip(archive, dest)
        except ExtractionError:
            raise
        except (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, RuntimeError, EOFError, OSError) as e:
            # RuntimeError: encrypted members; EOFError: truncated archives.
            raise ExtractionError(archive.name, str(e)) from e
        logger.info("Extracted %s -> %s", archive.name, str(dest))
        staged.append(dest)
    return staged
