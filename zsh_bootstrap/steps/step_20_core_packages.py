from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError, FatalStepError
from ..lib.pkg import ensure_package
from ..pipeline import BootstrapCtx, add_warning, record

logger = logging.getLogger(__name__)

# role -> fatal when it cannot be installed
CORE_PACKAGES = (
    ("shell", True),
    ("vcs", True),
    ("transfer", False),
)


class CorePackagesStep:
    step_id = "20_core_packages"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        logger.info("Ensuring core dependencies are present...")
        installed: list[str] = []
        for role, fatal in CORE_PACKAGES:
            target = ctx.manifest.package(role)
            try:
                if ensure_package(target, ctx.options):
                    installed.append(target.package)
            except BootstrapError as e:
                logger.error("%s", e)
                if fatal:
                    raise FatalStepError(self.step_id, f"{target.display_name} is required") from e
                add_warning(report, self.step_id, str(e))
        record(report, self.step_id, "installed", installed)
