from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import BootstrapError
from ..pipeline import BootstrapCtx, add_warning, record
from ..lib.fonts import install_font

logger = logging.getLogger(__name__)


class FontStep:
    """Opt-in (--install-font) and never fatal."""

    step_id = "40_font"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        if not ctx.options.install_font:
            logger.info("Skipping font installation (use --install-font to enable)")
            record(report, self.step_id, "requested", False)
            return

        font = ctx.manifest.font
        try:
            installed = install_font(font, ctx.options, timeout=ctx.manifest.timeout)
        except BootstrapError as e:
            msg = f"Could not download/install {font.name} automatically ({e}). Please install a compatible Nerd Font manually."
            logger.warning("%s", msg)
            add_warning(report, self.step_id, msg)
            return
        record(report, self.step_id, "installed", installed)
