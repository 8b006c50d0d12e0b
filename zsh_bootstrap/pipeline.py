from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from .manifest import Manifest
from .options import RunOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapCtx:
    """Everything a step may read. Immutable for the whole run."""

    options: RunOptions
    manifest: Manifest


class Step(Protocol):
    """A single idempotent provisioning step.

    Steps record decisions and warnings in the report and raise
    FatalStepError to abort the run.
    """

    step_id: str

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        ...


@dataclass
class PipelineResult:
    report: Dict[str, Any]
    ran_steps: List[str] = field(default_factory=list)


def add_warning(report: Dict[str, Any], step_id: str, message: str) -> None:
    report.setdefault("warnings", []).append({"step": step_id, "message": message})


def record(report: Dict[str, Any], step_id: str, key: str, value: Any) -> None:
    report.setdefault("decisions", {}).setdefault(step_id, {})[key] = value


def run_pipeline(
    *,
    ctx: BootstrapCtx,
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order. Nothing is rolled back; a fatal step stops the run."""

    result = PipelineResult(report={"warnings": [], "decisions": {}})

    for step in steps:
        result.report["current_step"] = step.step_id
        logger.debug("Running step %s", step.step_id)
        step.run(ctx, result.report)
        result.ran_steps.append(step.step_id)

    result.report["current_step"] = None
    return result
