from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError, FatalStepError
from ..lib.pkg import is_installed
from ..lib.remote import run_remote_script
from ..logging_utils import log_success
from ..pipeline import BootstrapCtx, record

logger = logging.getLogger(__name__)


class PromptToolStep:
    step_id = "70_prompt_tool"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        tool = ctx.manifest.prompt
        name = tool.target.display_name

        if is_installed(tool.target):
            log_success(logger, "%s is already installed", name)
            record(report, self.step_id, "installed", False)
            return

        logger.info("Installing %s...", name)
        try:
            run_remote_script(
                tool.installer.url,
                tool.installer.interpreter,
                tool.installer.args,
                options=ctx.options,
                preview_lines=ctx.manifest.preview_lines,
                timeout=ctx.manifest.timeout,
            )
        except BootstrapError as e:
            # The script may fail late (e.g. a PATH hint) after placing the binary.
            if not is_installed(tool.target):
                logger.error("Failed to install %s: %s", name, e)
                raise FatalStepError(self.step_id, f"Failed to install {name}") from e
            logger.warning("%s installer reported an error but %s is on PATH", name, tool.target.command)

        log_success(logger, "%s installed", name)
        record(report, self.step_id, "installed", True)
