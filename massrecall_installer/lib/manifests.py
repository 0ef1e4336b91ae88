from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Manifest:
    """Ordered download locators. Duplicates are kept as given."""

    packages: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.packages)


def _parse(path: Path) -> Any:
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    return json.loads(text)


def load_manifest(path: str | Path) -> Optional[Manifest]:
    """Load the package manifest, or None when it is missing or unusable.

    Only the ``packages`` field is read (key matched case-insensitively).
    A malformed document is logged and treated as absent.
    """

    p = Path(path)
    if not p.exists():
        logger.info("No manifest at %s", str(p))
        return None

    try:
        data = _parse(p)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable manifest %s: %s", str(p), e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring manifest %s: expected an object", str(p))
        return None

    raw = next((v for k, v in data.items() if str(k).lower() == "packages"), None)
    if raw is None:
        return Manifest()
    if not isinstance(raw, list):
        logger.warning("Ignoring manifest %s: packages must be a list", str(p))
        return None

    packages = tuple(str(u).strip() for u in raw if u is not None and str(u).strip())
    logger.info("Manifest %s lists %d package(s)", str(p), len(packages))
    return Manifest(packages=packages)
