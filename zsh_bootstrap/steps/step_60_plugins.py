from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError
from ..lib.git import SyncState, sync_repo
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)


class PluginsStep:
    """Clone or update each plugin independently; failures are warnings."""

    step_id = "60_plugins"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        logger.info("Installing Zsh plugins...")
        states: Dict[str, str] = {}
        for target in ctx.manifest.plugins:
            try:
                state = sync_repo(target, ctx.options, timeout=ctx.manifest.timeout)
            except BootstrapError as e:
                logger.error("%s", e)
                add_warning(report, self.step_id, str(e))
                states[target.name] = "failed"
                continue
            states[target.name] = state.value
            if state is SyncState.UPDATE_CONFLICT:
                add_warning(report, self.step_id, f"{target.name}: local changes block fast-forward; left as is")
            elif state is SyncState.FETCH_FAILED:
                add_warning(report, self.step_id, f"{target.name}: fetch failed; existing clone kept")
        record(report, self.step_id, "states", states)
