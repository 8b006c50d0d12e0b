from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError, FatalStepError
from ..lib.remote import run_remote_script
from ..logging_utils import log_success
from ..pipeline import BootstrapCtx, record

logger = logging.getLogger(__name__)


class ShellFrameworkStep:
    step_id = "50_shell_framework"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        m = ctx.manifest
        name = m.framework_name

        if m.framework_root.is_dir():
            log_success(logger, "%s is already installed", name)
            record(report, self.step_id, "installed", False)
            return

        logger.info("Installing %s...", name)
        installer = m.framework_installer
        try:
            run_remote_script(
                installer.url,
                installer.interpreter,
                installer.args,
                options=ctx.options,
                preview_lines=m.preview_lines,
                timeout=m.timeout,
            )
        except BootstrapError as e:
            logger.error("%s installation failed: %s", name, e)
            raise FatalStepError(self.step_id, f"{name} installation failed") from e

        log_success(logger, "%s installed", name)
        record(report, self.step_id, "installed", True)
