"""zsh-bootstrap: idempotent provisioning of an interactive Zsh environment.

Core design goals:
- Idempotent steps (check, install if missing, never clobber user edits)
- Backups before overwriting configuration
- Remote installers downloaded, previewed, then executed
- One immutable set of run options threaded through every call
- Centralized logging
"""

__all__ = []

__version__ = "1.0.0"
