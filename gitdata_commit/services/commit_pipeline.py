"""
Commit pipeline.

Builds one commit on a remote branch through the Git data API:

    branch head -> blob -> tree -> commit -> ref update -> branch patch

Each stage consumes the SHA produced by the one before it. The first failure
aborts the run; objects already created stay on GitHub unreferenced.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

import httpx

from gitdata_commit.common.config.commit_config import CommitConfig, load_commit_config
from gitdata_commit.common.config.config import (
    COMMIT_CONFIG_PATH,
    CONFIRM_BRANCH_PATCH,
    GITHUB_API_URL,
    GITHUB_USER_AGENT,
    PIPELINE_TIMEOUT,
    VERIFY_BRANCH_HEAD,
)
from gitdata_commit.common.exception.exceptions import (
    ConfigError,
    PipelineTimeoutError,
    RemoteWriteError,
)
from gitdata_commit.services.github.api.client import GitHubAPIClient
from gitdata_commit.services.github.api.git_data import GitDataOperations
from gitdata_commit.services.github.models.types import PipelineResult, StageName

logger = logging.getLogger(__name__)


_last_marker_ns = 0


def build_marker() -> str:
    """Return a marker line that differs on every call."""
    global _last_marker_ns
    # strictly increasing even when the clock is coarser than the call rate
    _last_marker_ns = max(time.time_ns(), _last_marker_ns + 1)
    now = datetime.now(timezone.utc)
    return f"Commit + {now.isoformat()} ({_last_marker_ns})"


def build_blob_content(localfile_path: Optional[str] = None) -> str:
    """Build the new file content for this run.

    Without a local file the content is the marker line alone. With one, the
    marker is appended to the local file and the whole file is returned.

    Raises:
        ConfigError: If the local file cannot be updated or read back
    """
    marker = build_marker()
    if not localfile_path:
        return marker + "\n"

    path = Path(localfile_path)
    try:
        with path.open("a", encoding="utf-8") as f:
            f.write(marker + "\n")
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot update local file {path}: {e}")
        raise ConfigError(f"Cannot update local file {path}: {e}") from e


class CommitPipeline:
    """Runs the commit-construction stages in order for one configuration."""

    def __init__(
        self,
        config: CommitConfig,
        client: Optional[GitHubAPIClient] = None,
        confirm_branch_patch: bool = CONFIRM_BRANCH_PATCH,
        verify_branch_head: bool = VERIFY_BRANCH_HEAD,
        content_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Commit configuration
            client: GitHub API client (creates one from the config token if not provided)
            confirm_branch_patch: Send the branch-endpoint patch after the ref update
            verify_branch_head: Re-read the branch tip before the ref update and
                refuse to move it if it changed since the run started
            content_factory: Builds the blob content (defaults to build_blob_content)
        """
        self.config = config
        self.client = client or GitHubAPIClient(token=config.github_token.get_secret_value())
        self.git_data = GitDataOperations(client=self.client)
        self.confirm_branch_patch = confirm_branch_patch
        self.verify_branch_head = verify_branch_head
        self.content_factory = content_factory or (
            lambda: build_blob_content(config.localfile_path)
        )

    async def run(self) -> PipelineResult:
        """Run every stage once, stopping at the first failure.

        Returns:
            PipelineResult with the SHA produced by each stage

        Raises:
            RemoteLookupError: If the branch head cannot be resolved
            RemoteWriteError: If any object creation or reference update fails
            ConfigError: If the local content file cannot be updated
        """
        config = self.config
        logger.info(
            f"Committing {config.github_file_path} to "
            f"{config.github_account}/{config.github_repo_name}@{config.github_branch}"
        )

        logger.info("Getting last commit SHA...")
        parent_sha = await self.git_data.resolve_branch_head(config)
        logger.info(f"sha: {parent_sha}")

        logger.info("Creating blob...")
        if config.localfile_path:
            # local file append and read back block, keep them off the event loop
            content = await asyncio.to_thread(self.content_factory)
        else:
            content = self.content_factory()
        blob_sha = await self.git_data.create_blob(config, content)
        logger.info(f"sha: {blob_sha}")

        logger.info("Creating tree...")
        tree_sha = await self.git_data.create_tree(config, parent_sha, blob_sha)
        logger.info(f"sha: {tree_sha}")

        logger.info("Creating commit...")
        commit_sha = await self.git_data.create_commit(config, parent_sha, tree_sha)
        logger.info(f"sha: {commit_sha}")

        if self.verify_branch_head:
            await self._verify_branch_head(parent_sha)

        logger.info("Updating ref...")
        await self.git_data.update_ref(config, commit_sha)
        logger.info(f"updated refs/heads/{config.github_branch} -> {commit_sha}")

        result = PipelineResult(
            parent_sha=parent_sha,
            blob_sha=blob_sha,
            tree_sha=tree_sha,
            commit_sha=commit_sha,
        )

        if self.confirm_branch_patch:
            logger.info("Patching branch...")
            result.branch_sha = await self.git_data.patch_branch(config, commit_sha)
            logger.info(f"patched, sha: {result.branch_sha}")

        return result

    async def _verify_branch_head(self, expected_sha: str) -> None:
        """Refuse to update the ref when the branch moved during the run."""
        current_sha = await self.git_data.resolve_branch_head(self.config)
        if current_sha != expected_sha:
            stage = StageName.VERIFY_BRANCH_HEAD.value
            error_msg = (
                f"{stage}: branch {self.config.github_branch} moved from "
                f"{expected_sha} to {current_sha} during the run"
            )
            logger.error(error_msg)
            raise RemoteWriteError(error_msg, stage=stage)


async def run_commit_pipeline(
    config_path: Union[str, Path] = COMMIT_CONFIG_PATH,
    base_url: str = GITHUB_API_URL,
    user_agent: str = GITHUB_USER_AGENT,
    timeout: float = PIPELINE_TIMEOUT,
    check_connectivity: bool = True,
    confirm_branch_patch: bool = CONFIRM_BRANCH_PATCH,
    verify_branch_head: bool = VERIFY_BRANCH_HEAD,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PipelineResult:
    """Load the configuration, check the API is reachable and run the pipeline.

    Args:
        config_path: Path to the JSON commit configuration
        base_url: GitHub API root URL
        user_agent: User-Agent header value
        timeout: Seconds the whole run may take
        check_connectivity: Ping the API root before the first stage
        confirm_branch_patch: Send the branch-endpoint patch after the ref update
        verify_branch_head: Re-read the branch tip before the ref update
        transport: Optional httpx transport for the API client

    Returns:
        PipelineResult of the completed run

    Raises:
        ConfigError: Before any network call, if the configuration is invalid
        ConnectivityError: If the API root cannot be reached
        PipelineTimeoutError: If the run exceeds ``timeout``
        RemoteLookupError, RemoteWriteError: From the failing stage
    """
    config = load_commit_config(config_path)

    client = GitHubAPIClient(
        token=config.github_token.get_secret_value(),
        base_url=base_url,
        user_agent=user_agent,
        transport=transport,
    )
    pipeline = CommitPipeline(
        config,
        client=client,
        confirm_branch_patch=confirm_branch_patch,
        verify_branch_head=verify_branch_head,
    )

    async def _run() -> PipelineResult:
        if check_connectivity:
            await client.check_connectivity()
        return await pipeline.run()

    try:
        return await asyncio.wait_for(_run(), timeout=timeout)
    except asyncio.TimeoutError as e:
        error_msg = f"Commit pipeline did not finish within {timeout} seconds"
        logger.error(error_msg)
        raise PipelineTimeoutError(error_msg) from e
