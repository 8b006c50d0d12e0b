from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..logging_utils import log_success
from ..options import RunOptions
from .command import announce_dry_run, run_cmd, which

logger = logging.getLogger(__name__)


def write_init_snippet(name: str, argv: Sequence[str], cache_dir: Path, options: RunOptions) -> bool:
    """Cache the output of a tool's `init zsh` command as <cache_dir>/<name>.zsh.

    .zshrc sources the cached file instead of eval-ing the command on every
    shell start. Returns True when the file was (or would be) rewritten.
    Raises CommandError when the tool fails.
    """

    if not argv or not which(argv[0]):
        logger.warning("%s not on PATH; skipping init snippet", argv[0] if argv else name)
        return False

    out = cache_dir / f"{name}.zsh"
    if options.dry_run:
        announce_dry_run(f"{' '.join(argv)} > {out}")
        return True

    r = run_cmd(list(argv))
    text = r.stdout if r.stdout.endswith("\n") else r.stdout + "\n"
    if out.exists() and out.read_text(encoding="utf-8") == text:
        logger.debug("Init snippet %s unchanged", out)
        return False

    cache_dir.mkdir(parents=True, exist_ok=True)
    tmp = out.with_suffix(".zsh.tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(out)
    log_success(logger, "Cached %s init snippet at %s", name, out)
    return True
