from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests

from .install_config import InstallConfig
from .lib.host import InstallRootLocator, ShortcutCreator
from .prompts import UserPrompt
from .state_store import is_step_completed, mark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    """Collaborators shared by every step; the mutable run data lives in state."""

    cfg: InstallConfig
    prompt: UserPrompt
    root_locator: InstallRootLocator
    shortcuts: ShortcutCreator
    session: Optional[requests.Session] = None

    @property
    def work_dir(self) -> Path:
        return Path(self.cfg.work_dir)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, state: Dict[str, Any], ctx: InstallCtx) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]


def select_steps(
    steps: Sequence[Step], *, start_at: Optional[str] = None, stop_after: Optional[str] = None
) -> List[Step]:
    """The contiguous slice ``start_at..stop_after`` (both inclusive)."""

    ids = [s.step_id for s in steps]
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in ids:
            raise ValueError(f"Unknown step for {name}: {value}")

    first = ids.index(start_at) if start_at is not None else 0
    last = ids.index(stop_after) if stop_after is not None else len(ids) - 1
    return list(steps[first : last + 1])


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    ctx: InstallCtx,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> PipelineResult:
    """Run the selected steps in order; completed steps are skipped unless forced."""

    ran: List[str] = []
    skipped: List[str] = []
    exe = state.setdefault("execution", {})

    for step in select_steps(steps, start_at=start_at, stop_after=stop_after):
        exe["current_step"] = step.step_id

        if is_step_completed(state, step.step_id) and not force:
            logger.info("Skipping step %s (already completed)", step.step_id)
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        state = step.run(state, ctx)
        exe = state.setdefault("execution", {})
        mark_step_completed(state, step.step_id)
        ran.append(step.step_id)

    exe["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)
