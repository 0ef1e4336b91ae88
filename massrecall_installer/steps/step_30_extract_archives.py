from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import NoArchivesError
from ..lib.archives import extract_each, make_staging_root
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class ExtractArchivesStep:
    step_id = "30_extract_archives"

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        acq = state.get("acquisition") or {}
        archives = acq.get("archives") or []
        if not archives:
            raise NoArchivesError("acquisition.archives is empty; run 20_acquire_archives first")

        staging_root = make_staging_root(acq.get("archive_dir") or ctx.work_dir)
        subtrees = extract_each(archives, staging_root)

        state["staging"] = {
            "root": str(staging_root),
            "subtrees": [str(s) for s in subtrees],
        }
        logger.info("Extracted %d archive(s) under %s", len(subtrees), str(staging_root))
        return state
