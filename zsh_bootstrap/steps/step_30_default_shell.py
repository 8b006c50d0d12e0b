from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError
from ..lib.shell import set_default_shell
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)


class DefaultShellStep:
    step_id = "30_default_shell"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        shell = ctx.manifest.package("shell").command
        try:
            changed = set_default_shell(shell, ctx.options)
        except BootstrapError as e:
            logger.warning("Could not set %s as default shell automatically: %s", shell, e)
            add_warning(report, self.step_id, str(e))
            return
        record(report, self.step_id, "changed", changed)
