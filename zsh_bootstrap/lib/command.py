from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[DRY-RUN]"

# Exit status reported for a command killed by its timeout (as timeout(1) does).
TIMEOUT_RETURNCODE = 124


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def which(command: str) -> Optional[str]:
    """Resolve a command on PATH (capability check, not a package query)."""
    return shutil.which(command)


def announce_dry_run(text: str) -> None:
    """Print a would-be action in the plain `[DRY-RUN] ...` form."""
    logger.info("%s %s", DRY_RUN_PREFIX, text, extra={"plain": True})


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    capture: bool = True,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - capture=False lets the child write straight to the terminal (installers).
    - dry_run prints the command but does not execute it.
    - A timeout kills the child and reports TIMEOUT_RETURNCODE.
    """

    argv_list = list(argv)

    if dry_run:
        announce_dry_run(fmt_argv(argv_list))
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    logger.debug("CMD %s", fmt_argv(argv_list))

    pipe = subprocess.PIPE if capture else None
    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=pipe,
            stderr=pipe,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("TIMEOUT after %ss: %s", timeout, fmt_argv(argv_list))
        if check:
            raise CommandError(
                f"Command timed out after {timeout}s: {fmt_argv(argv_list)}",
                returncode=TIMEOUT_RETURNCODE,
            )
        return CmdResult(argv=argv_list, returncode=TIMEOUT_RETURNCODE, stdout="", stderr="timed out")
    except OSError as e:
        raise CommandError(f"Failed to execute {argv_list[0]}: {e}") from e

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(
            f"Command failed ({p.returncode}): {fmt_argv(argv_list)}\n{stderr}",
            returncode=p.returncode,
            stderr=stderr,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
