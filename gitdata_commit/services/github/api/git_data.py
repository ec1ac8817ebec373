"""
GitHub Git data operations.

Provides the low-level object calls (blobs, trees, commits, refs) used to
build a commit remotely without a local clone.
"""

import logging
from typing import Any, Dict, Optional, Type

from gitdata_commit.common.config.commit_config import CommitConfig
from gitdata_commit.common.exception.exceptions import (
    RemoteError,
    RemoteLookupError,
    RemoteWriteError,
)
from gitdata_commit.services.github.api.client import GitHubAPIClient, GitHubAPIError
from gitdata_commit.services.github.models.types import SHA, StageName, TreeEntry

logger = logging.getLogger(__name__)


def _extract_sha(
    body: Dict[str, Any],
    keys: tuple,
    stage: StageName,
    error_cls: Type[RemoteError],
) -> SHA:
    """Walk ``keys`` into a response body and return the string found there."""
    value: Any = body
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            field = ".".join(keys)
            logger.error(f"{stage.value}: response has no '{field}' field")
            raise error_cls(
                f"{stage.value}: response has no '{field}' field", stage=stage.value
            )
        value = value[key]

    if not isinstance(value, str) or not value:
        field = ".".join(keys)
        logger.error(f"{stage.value}: '{field}' is not a non-empty string")
        raise error_cls(
            f"{stage.value}: '{field}' is not a non-empty string", stage=stage.value
        )
    return value


class GitDataOperations:
    """Handles GitHub Git data (object and reference) operations."""

    def __init__(self, client: GitHubAPIClient):
        """Initialize Git data operations.

        Args:
            client: GitHub API client
        """
        self.client = client

    async def _call(
        self,
        method: str,
        path: str,
        stage: StageName,
        error_cls: Type[RemoteError],
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            return await self.client.request(method, path, data=data)
        except GitHubAPIError as e:
            raise error_cls(
                f"{stage.value} failed: {e}", stage=stage.value, status_code=e.status_code
            ) from e

    async def resolve_branch_head(self, config: CommitConfig) -> SHA:
        """Get the SHA of the commit at the tip of the configured branch.

        Args:
            config: Commit configuration (account, repository, branch)

        Returns:
            Parent commit SHA

        Raises:
            RemoteLookupError: If the branch cannot be read or the body lacks commit.sha
        """
        stage = StageName.RESOLVE_BRANCH_HEAD
        body = await self._call(
            "GET",
            f"{config.repo_path}/branches/{config.branch_path}",
            stage,
            RemoteLookupError,
        )
        return _extract_sha(body, ("commit", "sha"), stage, RemoteLookupError)

    async def create_blob(self, config: CommitConfig, content: str) -> SHA:
        """Create a blob holding ``content``.

        Args:
            config: Commit configuration
            content: File content, sent UTF-8 encoded

        Returns:
            Blob SHA

        Raises:
            RemoteWriteError: If the blob cannot be created
        """
        stage = StageName.CREATE_BLOB
        body = await self._call(
            "POST",
            f"{config.repo_path}/git/blobs",
            stage,
            RemoteWriteError,
            data={"content": content, "encoding": "utf-8"},
        )
        return _extract_sha(body, ("sha",), stage, RemoteWriteError)

    async def create_tree(self, config: CommitConfig, base_tree: SHA, blob_sha: SHA) -> SHA:
        """Create a tree that overlays a single file onto ``base_tree``.

        Files not named here are kept from the base tree by GitHub.

        Args:
            config: Commit configuration (file path)
            base_tree: SHA of the tree-ish to build on, passed through untouched
            blob_sha: SHA of the blob holding the new file content

        Returns:
            Tree SHA

        Raises:
            RemoteWriteError: If the tree cannot be created
        """
        stage = StageName.CREATE_TREE
        entry = TreeEntry(path=config.github_file_path, sha=blob_sha)
        body = await self._call(
            "POST",
            f"{config.repo_path}/git/trees",
            stage,
            RemoteWriteError,
            data={"base_tree": base_tree, "tree": [entry.to_payload()]},
        )
        return _extract_sha(body, ("sha",), stage, RemoteWriteError)

    async def create_commit(self, config: CommitConfig, parent_sha: SHA, tree_sha: SHA) -> SHA:
        """Create a single-parent commit.

        Args:
            config: Commit configuration (commit message)
            parent_sha: SHA of the parent commit
            tree_sha: SHA of the commit's tree

        Returns:
            New commit SHA

        Raises:
            RemoteWriteError: If the commit cannot be created
        """
        stage = StageName.CREATE_COMMIT
        body = await self._call(
            "POST",
            f"{config.repo_path}/git/commits",
            stage,
            RemoteWriteError,
            data={
                "message": config.github_commit_message,
                "tree": tree_sha,
                "parents": [parent_sha],
            },
        )
        return _extract_sha(body, ("sha",), stage, RemoteWriteError)

    async def update_ref(self, config: CommitConfig, commit_sha: SHA) -> None:
        """Point ``refs/heads/<branch>`` at ``commit_sha``.

        The update is sent with ``force: false`` so GitHub refuses anything
        that is not a fast-forward of the current branch tip.

        Raises:
            RemoteWriteError: If the reference cannot be updated
        """
        await self._call(
            "PATCH",
            f"{config.repo_path}/git/refs/heads/{config.branch_path}",
            StageName.UPDATE_REF,
            RemoteWriteError,
            data={"sha": commit_sha, "force": False},
        )

    async def patch_branch(self, config: CommitConfig, commit_sha: SHA) -> Optional[SHA]:
        """Re-send the new commit SHA to the branch endpoint.

        Returns:
            The ``sha`` field of the response, if present

        Raises:
            RemoteWriteError: If the call fails
        """
        body = await self._call(
            "PATCH",
            f"{config.repo_path}/branches/{config.branch_path}",
            StageName.PATCH_BRANCH,
            RemoteWriteError,
            data={"sha": commit_sha},
        )
        sha = body.get("sha")
        return sha if isinstance(sha, str) else None
