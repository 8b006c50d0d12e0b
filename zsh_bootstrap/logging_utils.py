from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, just_fix_windows_console

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


def default_log_path() -> str:
    state_home = os.environ.get("XDG_STATE_HOME") or os.path.join(os.path.expanduser("~"), ".local", "state")
    return os.path.join(state_home, "zsh-bootstrap", "bootstrap.log")


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)


class StatusFormatter(logging.Formatter):
    """One coloured status line per record: info, success, warn, error."""

    STYLES = {
        logging.DEBUG: (Style.DIM, "·"),
        logging.INFO: (Fore.BLUE, "ℹ️ "),
        SUCCESS: (Fore.GREEN, "✓"),
        logging.WARNING: (Fore.YELLOW, "⚠️ "),
        logging.ERROR: (Fore.RED, "✗"),
        logging.CRITICAL: (Fore.RED + Style.BRIGHT, "✗"),
    }

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if getattr(record, "plain", False):
            return msg
        color, symbol = self.STYLES.get(record.levelno, ("", ""))
        return f"{color}{symbol} {msg}{Style.RESET_ALL}"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    - File log (timestamped, DEBUG and up) at log_path. If the path is not
      writable we fall back to a file in the working directory. log_path=None
      disables the file log entirely (dry-run must not write under $HOME).
    - Console: coloured status lines, errors on stderr, everything else on stdout.

    Returns the actual file path being used, or None.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_zsh_bootstrap_configured", False):
        return getattr(logger, "_zsh_bootstrap_log_path", log_path)

    chosen_path: Optional[str] = None
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    if log_path is not None:
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
            chosen_path = log_path
        except OSError:
            fallback = str(Path.cwd() / "zsh-bootstrap.log")
            file_handler = logging.FileHandler(fallback, encoding="utf-8")
            chosen_path = fallback
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        just_fix_windows_console()
        status = StatusFormatter()

        out = logging.StreamHandler(sys.stdout)
        out.setLevel(level)
        out.addFilter(_MaxLevelFilter(logging.ERROR))
        out.setFormatter(status)
        handlers.append(out)

        err = logging.StreamHandler(sys.stderr)
        err.setLevel(logging.ERROR)
        err.setFormatter(status)
        handlers.append(err)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_zsh_bootstrap_configured", True)
    setattr(logger, "_zsh_bootstrap_log_path", chosen_path)

    logging.getLogger(__name__).debug("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path


def reset_logging() -> None:
    """Drop handlers installed by configure_logging()."""

    logger = logging.getLogger()
    if not getattr(logger, "_zsh_bootstrap_configured", False):
        return
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    setattr(logger, "_zsh_bootstrap_configured", False)
    setattr(logger, "_zsh_bootstrap_log_path", None)
