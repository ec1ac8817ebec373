"""
GitHub Models Module

Shared types for Git data API operations.
"""

from gitdata_commit.services.github.models.types import (
    REGULAR_FILE_MODE,
    SHA,
    PipelineResult,
    StageName,
    TreeEntry,
)

__all__ = [
    "REGULAR_FILE_MODE",
    "SHA",
    "PipelineResult",
    "StageName",
    "TreeEntry",
]
