from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import NoContentError
from ..lib.placement import Targets, place_all, recover_orphans
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PlaceContentStep:
    step_id = "40_place_content"

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        target = state.get("target") or {}
        maps_root = target.get("maps_root")
        mods_root = target.get("mods_root")
        if not maps_root or not mods_root:
            raise RuntimeError("target.maps_root/mods_root missing; run 10_prepare_target first")

        subtrees = (state.get("staging") or {}).get("subtrees") or []
        logger.info("Copying recognized content (sources are never moved or deleted)")

        placed = place_all(subtrees, maps_root, mods_root)
        if placed == 0:
            raise NoContentError(
                "No recognizable content was found in the extracted packages. "
                "Check that the packages are correct."
            )
        logger.info("Copied %d file(s)", placed)

        targets = Targets(maps_root=Path(maps_root), mods_root=Path(mods_root))
        moved = recover_orphans(targets.maps_root, targets.content_root)
        if moved:
            logger.warning("Moved %d stray map file(s) from %s into %s", moved, maps_root, str(targets.content_root))

        state["placement"] = {"placed": placed, "orphans_moved": moved}
        return state
