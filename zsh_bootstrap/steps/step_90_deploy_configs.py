from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..errors import BootstrapError, ManifestError
from ..lib.deploy import DeployTarget, deploy_file
from ..pipeline import BootstrapCtx, add_warning, record
from ..zshrc import render_zshrc

logger = logging.getLogger(__name__)

RENDERERS = ("zshrc",)


class DeployConfigsStep:
    step_id = "90_deploy_configs"

    def run(self, ctx: BootstrapCtx, report: Dict[str, Any]) -> None:
        if ctx.options.clean:
            logger.info("Clean install requested: existing configuration files will be replaced (no backups)")
        else:
            logger.info("Copying configuration files (backups will be created if target exists)...")

        deployed: list[str] = []
        backups: list[str] = []
        skipped: list[str] = []
        failed: list[str] = []

        with tempfile.TemporaryDirectory(prefix="zsh-bootstrap-render-") as tmpdir:
            for entry in ctx.manifest.configs:
                target = self._target(ctx, entry, Path(tmpdir))

                if target.keep_existing and not ctx.options.clean and target.dest.exists():
                    logger.warning("%s already exists - skipping to avoid duplicate keys", target.dest)
                    skipped.append(str(target.dest))
                    continue

                try:
                    result = deploy_file(target, ctx.options)
                except BootstrapError as e:
                    logger.error("%s", e)
                    add_warning(report, self.step_id, str(e))
                    failed.append(str(target.dest))
                    continue

                if result.skipped:
                    add_warning(report, self.step_id, f"source {target.source} missing")
                    skipped.append(str(target.dest))
                    continue
                deployed.append(str(target.dest))
                if result.backup is not None:
                    backups.append(str(result.backup))

        record(report, self.step_id, "deployed", deployed)
        record(report, self.step_id, "backups", backups)
        record(report, self.step_id, "skipped", skipped)
        record(report, self.step_id, "failed", failed)

    def _target(self, ctx: BootstrapCtx, entry: Dict[str, Any], workdir: Path) -> DeployTarget:
        renderer = entry.get("render")
        if not renderer:
            return ctx.manifest.deploy_target(entry)
        if renderer not in RENDERERS:
            raise ManifestError(f"manifest: unknown renderer {renderer!r} for {entry.get('dest')}")

        rendered = workdir / renderer
        rendered.write_text(
            render_zshrc(ctx.manifest.zshrc_fragments, init_cache=ctx.manifest.init_cache),
            encoding="utf-8",
        )
        rendered.chmod(0o644)
        return ctx.manifest.deploy_target(entry, source=rendered)
