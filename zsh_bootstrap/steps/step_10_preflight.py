from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError, FatalStepError
from ..lib.pkg import ensure_package, is_installed
from ..lib.remote import transfer_client
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)


class PreflightStep:
    """Make sure git and a transfer client exist before anything else."""

    step_id = "10_preflight"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        logger.info("Running preflight checks...")
        vcs = ctx.manifest.package("vcs")
        transfer = ctx.manifest.package("transfer")

        if not is_installed(vcs):
            logger.info("%s not found; attempting to install it", vcs.display_name)
            try:
                ensure_package(vcs, ctx.options)
            except BootstrapError as e:
                logger.error("%s", e)
                raise FatalStepError(self.step_id, f"{vcs.display_name} is required") from e

        client = transfer_client()
        if client is None:
            logger.info("curl/wget not found; attempting to install %s", transfer.display_name)
            try:
                ensure_package(transfer, ctx.options)
            except BootstrapError as e:
                msg = f"Neither curl nor wget present; remote installs may fail ({e})"
                logger.warning("%s", msg)
                add_warning(report, self.step_id, msg)
        record(report, self.step_id, "transfer_client", client)
