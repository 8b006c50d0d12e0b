from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError
from ..lib.snippets import write_init_snippet
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)


class InitSnippetsStep:
    """Cache `<tool> init zsh` output for the prompt and history tools."""

    step_id = "85_init_snippets"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        m = ctx.manifest
        written: list[str] = []
        for tool in (m.prompt, m.history):
            if not tool.init:
                continue
            try:
                if write_init_snippet(tool.target.command, tool.init, m.init_cache, ctx.options):
                    written.append(tool.target.command)
            except (BootstrapError, OSError) as e:
                msg = f"Could not cache {tool.target.display_name} init snippet: {e}"
                logger.warning("%s", msg)
                add_warning(report, self.step_id, msg)
        record(report, self.step_id, "written", written)
