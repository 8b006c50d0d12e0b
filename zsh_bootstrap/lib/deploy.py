from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..errors import CopyFailure
from ..logging_utils import log_success
from ..options import RunOptions
from .command import announce_dry_run, fmt_argv

logger = logging.getLogger(__name__)

BACKUP_STAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class DeployTarget:
    source: Path
    dest: Path
    # Config-specific policy: leave an existing dest alone unless in clean mode.
    keep_existing: bool = False


@dataclass(frozen=True)
class DeployResult:
    dest: Path
    copied: bool
    backup: Optional[Path] = None
    skipped: bool = False


def backup_path(dest: Path, now: Optional[time.struct_time] = None) -> Path:
    """`<dest>.backup.<stamp>`, or `<stamp>.<n>` when that name is already taken."""
    stamp = time.strftime(BACKUP_STAMP_FORMAT, now or time.localtime())
    candidate = dest.with_name(f"{dest.name}.backup.{stamp}")
    n = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = dest.with_name(f"{dest.name}.backup.{stamp}.{n}")
        n += 1
    return candidate


def deploy_file(target: DeployTarget, options: RunOptions) -> DeployResult:
    """Copy target.source over target.dest, preserving attributes.

    An existing dest is first copied to `<dest>.backup.<YYYYMMDDHHMMSS>`, or
    removed without a backup in clean mode. A failed backup is only a warning.

    Raises CopyFailure if the final copy fails.
    """

    src = Path(target.source)
    dst = Path(target.dest)

    if not src.exists():
        logger.warning("Source %s does not exist, skipping copy to %s", src, dst)
        return DeployResult(dest=dst, copied=False, skipped=True)

    backup: Optional[Path] = None
    if dst.exists() or dst.is_symlink():
        if options.clean:
            if options.dry_run:
                announce_dry_run(fmt_argv(["rm", "-f", str(dst)]))
            else:
                try:
                    dst.unlink()
                except OSError as e:
                    raise CopyFailure(f"Failed to remove existing {dst}: {e}") from e
        else:
            backup = backup_path(dst)
            if options.dry_run:
                announce_dry_run(fmt_argv(["cp", "-a", str(dst), str(backup)]))
            else:
                try:
                    shutil.copy2(dst, backup, follow_symlinks=False)
                    logger.info("Existing %s backed up to %s", dst, backup)
                except OSError as e:
                    logger.warning("Failed to back up existing %s to %s: %s", dst, backup, e)
                    backup = None

    if options.dry_run:
        announce_dry_run(f"{fmt_argv(['mkdir', '-p', str(dst.parent)])} && {fmt_argv(['cp', '-a', str(src), str(dst)])}")
        return DeployResult(dest=dst, copied=False, backup=backup)

    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        if dst.is_symlink():
            dst.unlink()
        shutil.copy2(src, dst)
    except OSError as e:
        raise CopyFailure(f"Failed to copy {src} to {dst}: {e}") from e

    log_success(logger, "Copied %s to %s", src, dst)
    return DeployResult(dest=dst, copied=True, backup=backup)


def copy_matching(src_dir: Path, patterns: Iterable[str], dst_dir: Path, *, dry_run: bool = False) -> int:
    """Copy files in src_dir (recursively) matching any glob into dst_dir. Returns the count."""

    matches: list[Path] = []
    for pattern in patterns:
        for item in sorted(src_dir.rglob(pattern)):
            if item.is_file() and item not in matches:
                matches.append(item)

    if dry_run:
        for item in matches:
            announce_dry_run(fmt_argv(["cp", "-a", str(item), str(dst_dir / item.name)]))
        return len(matches)

    copied = 0
    dst_dir.mkdir(parents=True, exist_ok=True)
    for item in matches:
        try:
            shutil.copy2(item, dst_dir / item.name)
            copied += 1
        except OSError as e:
            logger.warning("Could not copy %s: %s", item, e)
    return copied
