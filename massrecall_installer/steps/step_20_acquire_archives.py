from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..errors import DownloadError, NoArchivesError
from ..lib.download import fetch_all
from ..lib.manifests import load_manifest
from ..lib.net import is_online
from ..lib.source import AcquisitionMode, find_local_archives, resolve_mode
from ..pipeline import InstallCtx
from ..state_store import add_warning

logger = logging.getLogger(__name__)

DOWNLOAD_SUBDIR = "_downloads"


class AcquireArchivesStep:
    step_id = "20_acquire_archives"

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        cfg = ctx.cfg
        work_dir = ctx.work_dir

        online = is_online(cfg.online_probe_url, timeout=cfg.online_probe_timeout, session=ctx.session)
        logger.info("Network status: %s", "online" if online else "offline")

        manifest = load_manifest(cfg.manifest_path)
        choice = ctx.prompt.choose_download()
        mode = resolve_mode(online=online, manifest=manifest, choice=choice)

        acq = state.setdefault("acquisition", {})
        acq.update({"online": online, "choice": choice.value, "mode": mode.value})

        archive_dir = work_dir
        archives: List[Path] = []

        if mode is AcquisitionMode.AUTO_DOWNLOAD and manifest:
            download_dir = work_dir / DOWNLOAD_SUBDIR
            logger.info("Downloading %d package(s) into %s", len(manifest.packages), str(download_dir))
            try:
                archives = fetch_all(
                    manifest.packages,
                    download_dir,
                    policy=cfg.download_policy,
                    session=ctx.session,
                )
                archive_dir = download_dir
            except DownloadError as e:
                # Partial downloads are ignored; local archives are used instead.
                logger.warning("%s. Falling back to local archives in %s", e, str(work_dir))
                add_warning(state, step=self.step_id, locator=e.locator, error=str(e))
        elif mode is AcquisitionMode.MANUAL_PROMPT:
            ctx.prompt.wait_for_manual_placement(work_dir, cfg.manual_download_page)
        else:
            logger.info("Looking for local archives in %s", str(work_dir))

        if not archives:
            archives = find_local_archives(archive_dir)
        if not archives:
            raise NoArchivesError(
                f"No ZIP packages found in {archive_dir}. Put the packages there "
                "(or provide packages.json for automatic download) and try again."
            )

        logger.info("Found %d archive(s): %s", len(archives), ", ".join(a.name for a in archives))
        acq["archive_dir"] = str(archive_dir)
        acq["archives"] = [str(a) for a in archives]
        return state
