from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..errors import CommandError, InstallError
from ..logging_utils import log_success
from ..options import RunOptions
from .command import run_cmd, which
from .privilege import privilege_prefix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallTarget:
    """An optional dependency, present when `command` resolves on PATH."""

    command: str
    package: str
    display_name: str

    @classmethod
    def simple(cls, name: str, display_name: str | None = None) -> "InstallTarget":
        return cls(command=name, package=name, display_name=display_name or name)


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd([*privilege_prefix(dry_run=dry_run), "apt-get", "update"], capture=False, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(
        [*privilege_prefix(dry_run=dry_run), "apt-get", "install", "-y", *packages],
        capture=False,
        dry_run=dry_run,
    )


def is_installed(target: InstallTarget) -> bool:
    return which(target.command) is not None


def ensure_package(target: InstallTarget, options: RunOptions) -> bool:
    """Install target via apt unless its command is already on PATH.

    Returns True when an install was performed (or would be, in dry-run) and
    False when the command was already available.

    Raises PermissionDenied when root cannot be obtained and InstallError when
    apt fails.
    """

    if is_installed(target):
        log_success(logger, "%s is already installed", target.display_name)
        return False

    logger.info("Installing %s...", target.display_name)
    try:
        apt_update(dry_run=options.dry_run)
        apt_install([target.package], dry_run=options.dry_run)
    except CommandError as e:
        raise InstallError(f"Failed to install {target.display_name} via apt: {e}") from e

    log_success(logger, "%s installed", target.display_name)
    return True
