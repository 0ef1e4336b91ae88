from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .lib.download import DownloadPolicy
from .lib.net import DEFAULT_PROBE_URL

DEFAULT_MANUAL_PAGE = "https://www.curseforge.com/sc2/maps/starcraft-mass-recall"


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def work_dir(self) -> str:
        return str(((self.raw.get("paths") or {}).get("work_dir")) or ".")

    @property
    def manifest_path(self) -> str:
        configured = (self.raw.get("paths") or {}).get("manifest")
        return str(configured or Path(self.work_dir) / "packages.json")

    @property
    def install_root(self) -> Optional[str]:
        value = (self.raw.get("paths") or {}).get("install_root")
        return str(value) if value else None

    @property
    def download_choice(self) -> Optional[str]:
        """'download', 'skip' or None (ask)."""
        value = self._section("download").get("choice")
        return str(value).lower() if value else None

    @property
    def online_probe_url(self) -> str:
        return str(self._section("network").get("probe_url") or DEFAULT_PROBE_URL)

    @property
    def online_probe_timeout(self) -> float:
        return float(self._section("network").get("probe_timeout_s") or 3.0)

    @property
    def manual_download_page(self) -> str:
        return str(self._section("network").get("manual_page") or DEFAULT_MANUAL_PAGE)

    @property
    def download_policy(self) -> DownloadPolicy:
        d = self._section("download")
        base = DownloadPolicy()
        return DownloadPolicy(
            attempt_timeout=float(d.get("attempt_timeout_s", base.attempt_timeout)),
            overall_timeout=float(d.get("overall_timeout_s", base.overall_timeout)),
            max_retries=int(d.get("max_retries", base.max_retries)),
            retry_delay=float(d.get("retry_delay_s", base.retry_delay)),
            chunk_size=int(d.get("chunk_size", base.chunk_size)),
            connect_timeout=float(d.get("connect_timeout_s", base.connect_timeout)),
            read_timeout=float(d.get("read_timeout_s", base.read_timeout)),
        )

    def with_overrides(self, **paths: Optional[str]) -> "InstallConfig":
        """Copy with CLI-supplied path values layered over the file's."""
        raw = dict(self.raw)
        merged = dict(raw.get("paths") or {})
        merged.update({k: v for k, v in paths.items() if v is not None})
        raw["paths"] = merged
        return InstallConfig(raw=raw)


def load_install_config(path: Optional[str]) -> InstallConfig:
    if path is None:
        return InstallConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("install config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("install config must contain a mapping/object")

    return InstallConfig(raw=raw)
