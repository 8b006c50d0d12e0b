"""Exception types used across zsh-bootstrap.

Steps raise these; the orchestrator decides per step whether a given failure
is fatal or only worth a warning.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for all zsh-bootstrap errors."""


class PermissionDenied(BootstrapError):
    """No way to obtain root for a package manager call."""


class DependencyMissing(BootstrapError):
    """A required command is absent and could not be installed."""


class NetworkFailure(BootstrapError):
    """A download, clone or fetch failed."""


class MergeConflict(BootstrapError):
    """Local changes block a fast-forward update."""


class CopyFailure(BootstrapError):
    """Copying or backing up a file failed."""


class InstallError(BootstrapError):
    """A package manager or remote installer exited non-zero."""


class ManifestError(BootstrapError):
    """The provisioning manifest is missing or malformed."""


class FatalStepError(BootstrapError):
    """Raised by a step to abort the whole run."""

    def __init__(self, step_id: str, message: str):
        super().__init__(f"{step_id}: {message}")
        self.step_id = step_id
        self.message = message


class CommandError(BootstrapError):
    """A subprocess exited non-zero while its result was being checked."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
