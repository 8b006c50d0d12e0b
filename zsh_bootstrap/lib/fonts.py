from __future__ import annotations

import logging
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..errors import NetworkFailure
from ..logging_utils import log_success
from ..options import RunOptions
from .command import announce_dry_run, run_cmd, which
from .deploy import copy_matching
from .remote import DEFAULT_TIMEOUT, download

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontSpec:
    name: str
    url: str
    directory: Path
    marker: str
    patterns: List[str] = field(default_factory=lambda: ["*NerdFont*.ttf", "*NerdFont*.otf"])


def install_font(font: FontSpec, options: RunOptions, *, timeout: Optional[float] = DEFAULT_TIMEOUT) -> bool:
    """Download the font archive and copy matching font files into font.directory.

    Returns False if the marker file is already present. Raises NetworkFailure
    (download or bad archive) or DependencyMissing (no transfer client).
    """

    if (font.directory / font.marker).is_file():
        log_success(logger, "%s already installed", font.name)
        return False

    logger.info("Attempting to install %s (best-effort)...", font.name)
    if options.dry_run:
        announce_dry_run(f"create {font.directory} and download {font.url}")
        return True

    with tempfile.TemporaryDirectory(prefix="zsh-bootstrap-font-") as tmpdir:
        archive = Path(tmpdir) / "font.zip"
        download(font.url, archive, timeout=timeout)
        extract_dir = Path(tmpdir) / "extract"
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(extract_dir)
        except zipfile.BadZipFile as e:
            raise NetworkFailure(f"Font archive from {font.url} is not a valid zip: {e}") from e

        copied = copy_matching(extract_dir, font.patterns, font.directory)

    if copied == 0:
        raise NetworkFailure(f"No font files matching {font.patterns} found in {font.url}")

    if which("fc-cache"):
        run_cmd(["fc-cache", "-f", str(font.directory)], check=False)
    log_success(logger, "%s installed (copied %d files)", font.name, copied)
    return True
