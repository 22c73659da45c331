"""Error taxonomy for the publish pipeline"""

from typing import Optional, Sequence


class PublishError(Exception):
    """Base class for all pipeline errors."""


class CleanError(PublishError, OSError):
    """The output directory could not be cleared. Fatal."""


class BuildError(PublishError):
    """The site generator failed; diagnostics holds its output verbatim. Fatal."""

    def __init__(self, message: str, diagnostics: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.diagnostics = diagnostics
        self.returncode = returncode


class NoChangesError(PublishError):
    """Nothing changed since the last revision. Not a failure."""


class VcsError(PublishError):
    """A git command exited non-zero."""

    def __init__(self, cmd: Sequence[str], returncode: int, output: str = ""):
        super().__init__(f"{' '.join(cmd)} exited with status {returncode}")
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output


class SnapshotError(PublishError):
    """Staging or committing failed for a reason other than an empty change set. Fatal."""


class RemoteRejectedError(PublishError):
    """A single remote refused the push. Reported per remote; other remotes still run."""

    def __init__(self, remote, diagnostics: str = ""):
        super().__init__(f"Push to {remote} rejected")
        self.remote = remote
        self.diagnostics = diagnostics


class LockError(PublishError):
    """Another publisher holds the lock file."""
