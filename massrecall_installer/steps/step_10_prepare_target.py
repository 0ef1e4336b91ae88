from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import InstallRootError
from ..lib.env import TargetLayout
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PrepareTargetStep:
    step_id = "10_prepare_target"

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        root = ctx.root_locator.locate()
        if not root or not Path(root).is_dir():
            raise InstallRootError(
                "StarCraft II installation not found. Install the game first or pass --install-root."
            )

        layout = TargetLayout(install_root=Path(root))
        layout.ensure()

        state["target"] = {
            "install_root": str(layout.install_root),
            "maps_root": str(layout.maps_root),
            "mods_root": str(layout.mods_root),
            "content_root": str(layout.content_root),
        }
        logger.info("Installation root: %s", str(layout.install_root))
        return state
