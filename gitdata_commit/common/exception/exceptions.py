"""Errors raised while building a commit through the Git data API."""

from typing import Optional


class CommitPipelineError(Exception):
    """Base class for every failure that aborts a pipeline run."""

    pass


class ConfigError(CommitPipelineError):
    """Raised when the commit configuration file is unreadable or malformed."""

    pass


class ConnectivityError(CommitPipelineError):
    """Raised when the pre-flight reachability check fails."""

    pass


class PipelineTimeoutError(CommitPipelineError):
    """Raised when a run does not finish within the pipeline timeout."""

    pass


class RemoteError(CommitPipelineError):
    """A remote call failed at a given pipeline stage."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.status_code = status_code


class RemoteLookupError(RemoteError):
    """Raised when the branch lookup fails or returns an unusable body."""

    pass


class RemoteWriteError(RemoteError):
    """Raised when an object-creation or reference-update call fails."""

    pass
