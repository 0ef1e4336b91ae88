from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .assets import copy_tree
from .env import LAYOUT

logger = logging.getLogger(__name__)

ALIAS_TOKEN = "Mass Recall"
SHORT_CODE = "SCMR"
EXTRAS_SUFFIXES: Tuple[Tuple[str, str], ...] = (
    ("Extras", "8. Enslavers Redux"),
    ("Extras", "Enslavers Redux"),
)
# (category, overwrite)
AUX_CATEGORIES: Tuple[Tuple[str, bool], ...] = (
    ("Mods", False),
    ("Assets", True),
    ("Localization", False),
    ("Cinematics", True),
)


@dataclass(frozen=True)
class Targets:
    maps_root: Path
    mods_root: Path

    @property
    def content_root(self) -> Path:
        return self.maps_root / LAYOUT.canonical_name


@dataclass(frozen=True)
class ClassificationRule:
    """Matches one directory of a staged archive and says where its contents go.

    ``matches`` receives the directory path relative to the staged subtree.
    ``destination`` receives the matched source directory and the targets.
    """

    category: str
    matches: Callable[[Path], bool]
    destination: Callable[[Path, Targets], Path]
    overwrite: bool = True


def _fold(s: str) -> str:
    return s.casefold()


def _is_primary(rel: Path) -> bool:
    name = _fold(rel.name)
    return (
        name == _fold(LAYOUT.canonical_name)
        or _fold(ALIAS_TOKEN) in name
        or name == _fold(SHORT_CODE)
    )


def _is_extras(rel: Path) -> bool:
    tail = tuple(_fold(p) for p in rel.parts[-2:])
    return any(tail == (_fold(a), _fold(b)) for a, b in EXTRAS_SUFFIXES)


def _is_top_level_maps(rel: Path) -> bool:
    return len(rel.parts) == 1 and _fold(rel.name) == _fold(LAYOUT.maps_dir)


def _named(category: str) -> Callable[[Path], bool]:
    return lambda rel: _fold(rel.name) == _fold(category)


# Evaluated in this order for every staged archive; each rule places at most one directory.
RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("primary", _is_primary, lambda src, t: t.content_root),
    ClassificationRule(
        "extras",
        _is_extras,
        lambda src, t: t.content_root / LAYOUT.extras_dir / src.name,
    ),
    ClassificationRule("maps", _is_top_level_maps, lambda src, t: t.maps_root),
) + tuple(
    ClassificationRule(name.lower(), _named(name), lambda src, t: t.mods_root, overwrite=ow)
    for name, ow in AUX_CATEGORIES
)


def _directories(root: Path) -> List[Path]:
    """Every directory below ``root`` (not root itself), in walk order."""
    out: List[Path] = []
    for dirpath, dirnames, _ in os.walk(root):
        base = Path(dirpath)
        out.extend(base / name for name in dirnames)
    return out


def _first_match(root: Path, dirs: Sequence[Path], rule: ClassificationRule) -> Optional[Path]:
    # With several candidates the first one enumerated is used.
    return next((d for d in dirs if rule.matches(d.relative_to(root))), None)


def _inside(path: Path, roots: Sequence[Path]) -> bool:
    return any(r == path or r in path.parents for r in roots)


def _place_loose_files(root: Path, targets: Targets, handled: Sequence[Path]) -> int:
    count = 0
    map_ext = _fold(LAYOUT.map_ext)
    mod_ext = _fold(LAYOUT.mod_ext)
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            src = Path(dirpath) / name
            if _inside(src, handled):
                continue
            ext = _fold(src.suffix)
            if ext == map_ext:
                dest = targets.content_root / name
            elif ext == mod_ext:
                dest = targets.mods_root / name
            else:
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
            logger.info("Copy loose file: %s -> %s", str(src), str(dest))
            count += 1
    return count


def place_archive(subtree: str | Path, targets: Targets) -> int:
    """Classify one staged archive and copy what it recognizes. Returns files copied."""

    root = Path(subtree)
    dirs = _directories(root)
    handled: List[Path] = []
    count = 0

    for rule in RULES:
        src = _first_match(root, dirs, rule)
        if src is None:
            continue
        dest = rule.destination(src, targets)
        logger.info("Copy %s: %s -> %s (overwrite=%s)", rule.category, str(src), str(dest), rule.overwrite)
        count += copy_tree(src, dest, overwrite=rule.overwrite)
        handled.append(src)

    count += _place_loose_files(root, targets, handled)
    return count


def place_all(subtrees: Sequence[str | Path], target_maps: str | Path, target_mods: str | Path) -> int:
    """Place every staged archive in turn; returns the total number of files copied.

    Zero means nothing recognizable was found in any archive.
    """

    targets = Targets(maps_root=Path(target_maps), mods_root=Path(target_mods))
    total = 0
    for subtree in subtrees:
        placed = place_archive(subtree, targets)
        logger.info("Placed %d file(s) from %s", placed, Path(subtree).name)
        total += placed
    return total


def recover_orphans(maps_root: str | Path, content_root: str | Path) -> int:
    """Move map files left directly under the maps root into the canonical directory.

    Same-named files in the canonical directory are replaced. A file that
    cannot be moved is logged and skipped.
    """

    root = Path(maps_root)
    dest_dir = Path(content_root)
    dest_dir.mkdir(parents=True, exist_ok=True)

    moved = 0
    for item in sorted(root.iterdir()):
        if not item.is_file() or _fold(item.suffix) != _fold(LAYOUT.map_ext):
            continue
        dest = dest_dir / item.name
        try:
            if dest.exists():
                dest.unlink()
            shutil.move(str(item), str(dest))
            moved += 1
        except OSError as e:
            logger.warning("Could not move orphan %s: %s", str(item), e)
    return moved
