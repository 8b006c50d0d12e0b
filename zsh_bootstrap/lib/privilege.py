from __future__ import annotations

import logging
import os
from typing import List

from ..errors import PermissionDenied
from .command import which

logger = logging.getLogger(__name__)


def is_root() -> bool:
    return os.geteuid() == 0


def privilege_prefix(*, dry_run: bool = False) -> List[str]:
    """Return the argv prefix needed to run a command as root.

    Root runs commands directly; otherwise sudo is used if it is on PATH.
    Without either there is no way to escalate, which is a hard failure
    (in dry-run only a warning, since nothing is executed).
    """

    if is_root():
        return []
    if which("sudo"):
        return ["sudo"]
    if dry_run:
        logger.warning("Root privileges would be required (run as root or install sudo)")
        return []
    raise PermissionDenied("Root privileges are required to install packages (run as root or install sudo).")
