from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest


def _write_tree(root: Path, files: Dict[str, bytes]) -> Path:
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
    return root


@pytest.fixture
def write_tree() -> Callable[[Path, Dict[str, bytes]], Path]:
    return _write_tree


@pytest.fixture
def make_zip() -> Callable[[Path, Dict[str, bytes]], Path]:
    def _make(path: Path, files: Dict[str, bytes]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as zf:
            for rel, data in files.items():
                zf.writestr(rel, data)
        return path

    return _make


@pytest.fixture
def targets(tmp_path: Path):
    from massrecall_installer.lib.placement import Targets

    t = Targets(maps_root=tmp_path / "sc2" / "Maps", mods_root=tmp_path / "sc2" / "Mods")
    t.maps_root.mkdir(parents=True)
    t.mods_root.mkdir(parents=True)
    return t


def snapshot(root: Path) -> Dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


@pytest.fixture
def tree_snapshot() -> Callable[[Path], Dict[str, bytes]]:
    return snapshot
