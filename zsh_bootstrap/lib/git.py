"""Clone-or-update for git checkouts.

Never force, never lose local state: network or merge failures leave the
existing checkout exactly as it was and are reported as a state, not raised.
"""

from __future__ import annotations

import enum
import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import MergeConflict, NetworkFailure
from ..logging_utils import log_success
from ..options import RunOptions
from .command import run_cmd

logger = logging.getLogger(__name__)


class SyncState(enum.Enum):
    ABSENT = "absent"
    CLONED_FRESH = "cloned_fresh"
    UPDATED_CLEANLY = "updated_cleanly"
    UPDATE_CONFLICT = "update_conflict"
    FETCH_FAILED = "fetch_failed"


def repo_name(url: str) -> str:
    base = posixpath.basename(url.rstrip("/"))
    return base[:-4] if base.endswith(".git") else base


@dataclass(frozen=True)
class RepoTarget:
    url: str
    path: Path

    @property
    def name(self) -> str:
        return repo_name(self.url)


def repo_state(path: Path) -> SyncState:
    """ABSENT unless path already holds a git checkout."""
    return SyncState.UPDATED_CLEANLY if (path / ".git").exists() else SyncState.ABSENT


def sync_repo(target: RepoTarget, options: RunOptions, *, timeout: Optional[float] = None) -> SyncState:
    """Shallow-clone target.url into target.path, or fast-forward an existing clone.

    Raises NetworkFailure only when a fresh clone fails.
    """

    path = Path(target.path)
    dry_run = options.dry_run

    if repo_state(path) is not SyncState.ABSENT:
        logger.info("Updating existing %s at %s...", target.name, path)
        fetch = run_cmd(
            ["git", "-C", str(path), "fetch", "origin"],
            check=False,
            timeout=timeout,
            dry_run=dry_run,
        )
        if not fetch.ok:
            logger.warning("Failed to fetch updates for %s; leaving existing clone", target.name)
            return SyncState.FETCH_FAILED

        try:
            _fast_forward(target, path, timeout=timeout, dry_run=dry_run)
        except MergeConflict as e:
            logger.warning("%s", e)
            return SyncState.UPDATE_CONFLICT

        log_success(logger, "%s updated", target.name)
        return SyncState.UPDATED_CLEANLY

    logger.info("Cloning %s into %s...", target.name, path)
    if not dry_run:
        path.parent.mkdir(parents=True, exist_ok=True)
    clone = run_cmd(
        ["git", "clone", "--depth=1", target.url, str(path)],
        check=False,
        timeout=timeout,
        dry_run=dry_run,
    )
    if not clone.ok:
        raise NetworkFailure(f"Failed to clone {target.name} from {target.url}: {clone.stderr.strip()}")

    log_success(logger, "%s cloned successfully", target.name)
    return SyncState.CLONED_FRESH


def _fast_forward(target: RepoTarget, path: Path, *, timeout: Optional[float], dry_run: bool) -> None:
    pull = run_cmd(
        ["git", "-C", str(path), "pull", "--ff-only", "--rebase", "--autostash"],
        check=False,
        timeout=timeout,
        dry_run=dry_run,
    )
    if not pull.ok:
        raise MergeConflict(
            f"Could not fast-forward {target.name}; working tree may have local changes ({pull.stderr.strip()})"
        )
