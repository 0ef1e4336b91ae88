from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Layout:
    maps_dir: str = "Maps"
    mods_dir: str = "Mods"
    canonical_name: str = "Starcraft Mass Recall"
    extras_dir: str = "Extras"
    entry_file: str = "SCMR Campaign Launcher.SC2Map"
    icon_file: str = "icon.ico"
    map_ext: str = ".SC2Map"
    mod_ext: str = ".SC2Mod"
    archive_ext: str = ".zip"


LAYOUT = Layout()


@dataclass(frozen=True)
class TargetLayout:
    """The two fixed roots under the host installation root."""

    install_root: Path

    @property
    def maps_root(self) -> Path:
        return self.install_root / LAYOUT.maps_dir

    @property
    def mods_root(self) -> Path:
        return self.install_root / LAYOUT.mods_dir

    @property
    def content_root(self) -> Path:
        return self.maps_root / LAYOUT.canonical_name

    def ensure(self) -> None:
        self.maps_root.mkdir(parents=True, exist_ok=True)
        self.mods_root.mkdir(parents=True, exist_ok=True)
