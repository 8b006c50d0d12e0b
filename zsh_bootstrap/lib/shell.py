from __future__ import annotations

import logging
import os

from ..errors import CommandError, DependencyMissing
from ..logging_utils import log_success
from ..options import RunOptions
from .command import run_cmd, which

logger = logging.getLogger(__name__)


def set_default_shell(shell: str, options: RunOptions) -> bool:
    """Make `shell` the login shell of the invoking user via chsh.

    Returns False when it already is. Raises DependencyMissing if the shell is
    not on PATH and CommandError if chsh fails.
    """

    shell_path = which(shell)
    if not shell_path:
        raise DependencyMissing(f"{shell} not found in PATH; cannot set as default shell")

    current = os.environ.get("SHELL", "")
    if current and os.path.realpath(current) == os.path.realpath(shell_path):
        log_success(logger, "%s is already the default shell (%s)", shell, current)
        return False

    logger.info("Setting %s (%s) as default shell...", shell, shell_path)
    try:
        run_cmd(["chsh", "-s", shell_path], capture=False, dry_run=options.dry_run)
    except CommandError:
        logger.warning("chsh failed. You may need to run: chsh -s %s", shell_path)
        raise
    log_success(logger, "%s set as default shell", shell)
    return True
