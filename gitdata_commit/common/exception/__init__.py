from gitdata_commit.common.exception.exceptions import (
    CommitPipelineError,
    ConfigError,
    ConnectivityError,
    PipelineTimeoutError,
    RemoteError,
    RemoteLookupError,
    RemoteWriteError,
)

__all__ = [
    "CommitPipelineError",
    "ConfigError",
    "ConnectivityError",
    "PipelineTimeoutError",
    "RemoteError",
    "RemoteLookupError",
    "RemoteWriteError",
]
