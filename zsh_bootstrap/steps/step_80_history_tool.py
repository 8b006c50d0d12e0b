from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError
from ..lib.pkg import ensure_package, is_installed
from ..lib.remote import run_remote_script
from ..logging_utils import log_success
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)


class HistoryToolStep:
    """Remote installer first, package manager as fallback, never fatal."""

    step_id = "80_history_tool"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        tool = ctx.manifest.history
        name = tool.target.display_name

        if is_installed(tool.target):
            log_success(logger, "%s is already installed", name)
            record(report, self.step_id, "installed_via", None)
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
            log_success(logger, "%s installed", name)
            record(report, self.step_id, "installed_via", "remote")
            return
        except BootstrapError as e:
            logger.warning("%s installer failed (%s); attempting to install via apt if available", name, e)

        try:
            ensure_package(tool.target, ctx.options)
        except BootstrapError as e:
            msg = f"{name} installation could not be completed ({e})"
            logger.warning("%s", msg)
            add_warning(report, self.step_id, msg)
            record(report, self.step_id, "installed_via", None)
            return
        record(report, self.step_id, "installed_via", "apt")
