"""
Shared types and models for Git data API operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, TypeAlias

SHA: TypeAlias = str  # opaque object identifier returned by GitHub

REGULAR_FILE_MODE = "100644"


class StageName(str, Enum):
    RESOLVE_BRANCH_HEAD = "resolve_branch_head"
    CREATE_BLOB = "create_blob"
    CREATE_TREE = "create_tree"
    CREATE_COMMIT = "create_commit"
    VERIFY_BRANCH_HEAD = "verify_branch_head"
    UPDATE_REF = "update_ref"
    PATCH_BRANCH = "patch_branch"


@dataclass(frozen=True)
class TreeEntry:
    path: str
    sha: SHA
    mode: str = REGULAR_FILE_MODE
    type: str = "blob"

    def to_payload(self) -> Dict[str, Any]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass
class PipelineResult:
    parent_sha: SHA
    blob_sha: SHA
    tree_sha: SHA
    commit_sha: SHA
    branch_sha: Optional[SHA] = None
