"""Download-then-run for remote installer scripts.

Scripts are fetched into a private temporary directory, previewed in the log
for auditing and executed as an argv list so every argument keeps its exact
boundaries. The temporary directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import os
import tempfile
from itertools import islice
from pathlib import Path
from typing import Optional, Sequence

from ..errors import CommandError, DependencyMissing, InstallError, NetworkFailure
from ..logging_utils import log_success
from ..options import RunOptions
from .command import announce_dry_run, fmt_argv, run_cmd, which

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LINES = 5
DEFAULT_TIMEOUT = 300.0


def transfer_client() -> Optional[str]:
    """Return the first available transfer client (curl, then wget)."""
    for name in ("curl", "wget"):
        if which(name):
            return name
    return None


def download(url: str, dest: Path, *, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
    """Fetch url into dest with curl or wget.

    Raises DependencyMissing when neither client exists and NetworkFailure
    when the transfer fails.
    """

    client = transfer_client()
    if client is None:
        raise DependencyMissing("Neither curl nor wget is available to fetch remote scripts.")

    if client == "curl":
        argv = ["curl", "-fsSL"]
        if timeout:
            argv += ["--max-time", str(int(timeout))]
        argv += ["-o", str(dest), url]
    else:
        argv = ["wget", "-q"]
        if timeout:
            argv += [f"--timeout={int(timeout)}"]
        argv += ["-O", str(dest), url]

    r = run_cmd(argv, check=False, timeout=(timeout + 30) if timeout else None)
    if not r.ok:
        raise NetworkFailure(f"Failed to download {url} ({client} exit {r.returncode})")


def preview(path: Path, lines: int = DEFAULT_PREVIEW_LINES) -> list[str]:
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return [ln.rstrip("\n") for ln in islice(f, lines)]


def run_remote_script(
    url: str,
    interpreter: str = "bash",
    args: Sequence[str] = (),
    *,
    options: RunOptions,
    preview_lines: int = DEFAULT_PREVIEW_LINES,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> None:
    """Download url and execute `interpreter <script> *args`.

    In dry-run nothing is downloaded; the command that would run is printed
    with its arguments shell-quoted.

    Raises DependencyMissing, NetworkFailure or InstallError.
    """

    args = list(args)

    if options.dry_run:
        placeholder = os.path.join(tempfile.gettempdir(), "zsh-bootstrap-XXXXXX", "install.sh")
        announce_dry_run(f"download {url} -> {placeholder}")
        announce_dry_run(fmt_argv([interpreter, placeholder, *args]))
        return

    with tempfile.TemporaryDirectory(prefix="zsh-bootstrap-") as tmpdir:
        script = Path(tmpdir) / "install.sh"
        download(url, script, timeout=timeout)

        logger.info("Downloaded remote installer to %s (first %d lines shown for audit):", script, preview_lines)
        for ln in preview(script, preview_lines):
            logger.info("    %s", ln, extra={"plain": True})

        try:
            run_cmd([interpreter, str(script), *args], capture=False)
        except CommandError as e:
            raise InstallError(f"Remote script failed: {url} (exit {e.returncode})") from e

    log_success(logger, "Remote script executed successfully")
