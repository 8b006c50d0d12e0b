from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunOptions:
    """Flags parsed once from the command line and passed to every call."""

    dry_run: bool = False
    clean: bool = False
    install_font: bool = False
    verbose: bool = False
    manifest_path: Optional[str] = None
    log_path: Optional[str] = None
