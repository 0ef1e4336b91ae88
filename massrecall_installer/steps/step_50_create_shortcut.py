from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.env import LAYOUT
from ..lib.launch import find_entry_point, find_launcher_executable
from ..pipeline import InstallCtx
from ..state_store import add_warning

logger = logging.getLogger(__name__)

SHORTCUT_NAME = "StarCraft Mass Recall"


class CreateShortcutStep:
    step_id = "50_create_shortcut"

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        target = state.get("target") or {}
        install_root = target.get("install_root")
        maps_root = target.get("maps_root")
        if not install_root or not maps_root:
            raise RuntimeError("target.install_root/maps_root missing; run 10_prepare_target first")

        launch = state.setdefault("launch", {})
        entry = find_entry_point(maps_root)
        launch["entry_point"] = str(entry) if entry else None
        if entry is None:
            # Not an error: some package sets ship without the launcher map.
            logger.warning("Launcher map not found. It can still be opened from the StarCraft II editor.")
            add_warning(state, step=self.step_id, reason="launcher_map_missing")
            return state

        exe = find_launcher_executable(install_root)
        if not exe.is_file():
            logger.warning("No launcher executable under %s; skipping shortcut", install_root)
            add_warning(state, step=self.step_id, reason="launcher_executable_missing")
            launch["executable"] = None
            return state

        icon = Path(maps_root) / LAYOUT.canonical_name / LAYOUT.icon_file
        created = ctx.shortcuts.create(
            name=SHORTCUT_NAME,
            target=exe,
            arguments=[str(entry)],
            working_dir=Path(install_root),
            icon=icon if icon.is_file() else None,
        )
        launch["executable"] = str(exe)
        launch["shortcut"] = str(created) if created else None
        logger.info("Launch entry point: %s", str(entry))
        return state
