from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .errors import InstallerError
from .install_config import InstallConfig, load_install_config
from .lib.host import (
    ConfiguredInstallRoot,
    DefaultInstallRootLocator,
    InstallRootLocator,
    LoggingShortcutCreator,
    ShortcutCreator,
)
from .lib.source import UserChoice
from .logging_utils import configure_logging
from .pipeline import InstallCtx, run_pipeline
from .prompts import ConsolePrompt, FixedPrompt, UserPrompt
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    AcquireArchivesStep,
    CreateShortcutStep,
    ExtractArchivesStep,
    PlaceContentStep,
    PrepareTargetStep,
)

logger = logging.getLogger(__name__)


STATE_FILENAME = "massrecall-installer-state.json"
LOG_FILENAME = "massrecall-installer.log"


def build_steps():
    return [
        PrepareTargetStep(),
        AcquireArchivesStep(),
        ExtractArchivesStep(),
        PlaceContentStep(),
        CreateShortcutStep(),
    ]


def _default_prompt(cfg: InstallConfig) -> UserPrompt:
    if cfg.download_choice in {c.value for c in UserChoice}:
        return FixedPrompt(UserChoice(cfg.download_choice))
    return ConsolePrompt()


def _default_locator(cfg: InstallConfig) -> InstallRootLocator:
    if cfg.install_root:
        return ConfiguredInstallRoot(cfg.install_root)
    return DefaultInstallRootLocator()


def run(
    *,
    cfg: InstallConfig,
    state_path: Optional[str] = None,
    log_path: Optional[str] = None,
    prompt: Optional[UserPrompt] = None,
    root_locator: Optional[InstallRootLocator] = None,
    shortcuts: Optional[ShortcutCreator] = None,
    session: Optional[requests.Session] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> Dict[str, Any]:
    """Run the installer pipeline, persisting state for resume."""

    work_dir = Path(cfg.work_dir)
    state_path = state_path or str(work_dir / STATE_FILENAME)
    log_path = log_path or str(work_dir / LOG_FILENAME)
    actual_log_path = configure_logging(log_path=log_path)

    state = ensure_defaults(load_state(state_path))
    paths = state.setdefault("execution", {}).setdefault("paths", {})
    paths["log_path_requested"] = log_path
    paths["log_path_actual"] = actual_log_path
    paths["work_dir"] = str(work_dir)

    ctx = InstallCtx(
        cfg=cfg,
        prompt=prompt or _default_prompt(cfg),
        root_locator=root_locator or _default_locator(cfg),
        shortcuts=shortcuts or LoggingShortcutCreator(),
        session=session,
    )

    try:
        result = run_pipeline(
            state=state,
            steps=build_steps(),
            ctx=ctx,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        summary = state.setdefault("execution", {}).setdefault("summary", {})
        summary["ran_steps"] = result.ran_steps
        summary["skipped_steps"] = result.skipped_steps
        return state
    except Exception as e:
        logger.exception("Installer failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="massrecall-installer")
    p.add_argument("--config", default=None, help="Path to install config (yaml)")
    p.add_argument("--state", default=None, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--work-dir", default=None, help="Directory holding packages.json and ZIP packages")
    p.add_argument("--install-root", default=None, help="StarCraft II installation folder")
    p.add_argument("--manifest", default=None, help="Package manifest (default: <work-dir>/packages.json)")
    choice = p.add_mutually_exclusive_group()
    choice.add_argument("--download", dest="choice", action="store_const", const=UserChoice.DOWNLOAD)
    choice.add_argument("--skip-download", dest="choice", action="store_const", const=UserChoice.SKIP)
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_place_content)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")

    args = p.parse_args(argv)

    cfg = load_install_config(args.config).with_overrides(
        work_dir=args.work_dir,
        install_root=args.install_root,
        manifest=args.manifest,
    )

    try:
        run(
            cfg=cfg,
            state_path=args.state,
            log_path=args.log,
            prompt=FixedPrompt(args.choice) if args.choice else None,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=args.force,
        )
    except InstallerError as e:
        logger.error("%s", e)
        return e.exit_code
    logger.info("Installation complete.")
    return 0
