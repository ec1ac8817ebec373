"""Tests for GitDataOperations."""

from unittest.mock import AsyncMock

import pytest

from gitdata_commit.common.exception.exceptions import RemoteLookupError, RemoteWriteError
from gitdata_commit.services.github.api.client import GitHubAPIClient
from gitdata_commit.services.github.api.git_data import GitDataOperations
from tests.fixtures.github_fixtures import INITIAL_HEAD, create_test_config


@pytest.fixture
def git_data(api_client):
    return GitDataOperations(client=api_client)


class TestResolveBranchHead:
    """Test GitDataOperations.resolve_branch_head."""

    @pytest.mark.asyncio
    async def test_returns_commit_sha(self, git_data, commit_config, fake_github):
        sha = await git_data.resolve_branch_head(commit_config)

        assert sha == INITIAL_HEAD
        assert fake_github.calls == [("GET", "/repos/octo-org/hello-world/branches/main")]

    @pytest.mark.asyncio
    async def test_missing_branch_raises_lookup_error(self, git_data, fake_github):
        with pytest.raises(RemoteLookupError) as exc_info:
            await git_data.resolve_branch_head(create_test_config(github_branch="gone"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.stage == "resolve_branch_head"

    @pytest.mark.asyncio
    async def test_missing_commit_field_raises_lookup_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("GET", "/branches/main", 200, {"name": "main"})

        with pytest.raises(RemoteLookupError) as exc_info:
            await git_data.resolve_branch_head(commit_config)

        assert "commit.sha" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_string_sha_raises_lookup_error(self, git_data, commit_config, fake_github):
        fake_github.fail("GET", "/branches/main", 200, {"commit": {"sha": None}})

        with pytest.raises(RemoteLookupError):
            await git_data.resolve_branch_head(commit_config)

    @pytest.mark.asyncio
    async def test_malformed_body_raises_lookup_error(self, git_data, commit_config, fake_github):
        fake_github.fail("GET", "/branches/main", 200, b"not json")

        with pytest.raises(RemoteLookupError):
            await git_data.resolve_branch_head(commit_config)

    @pytest.mark.asyncio
    async def test_goes_through_client_request(self, commit_config):
        """Test stages call the client's single request entry point."""
        client = AsyncMock(spec=GitHubAPIClient)
        client.request.return_value = {"commit": {"sha": "abc"}}

        sha = await GitDataOperations(client=client).resolve_branch_head(commit_config)

        assert sha == "abc"
        client.request.assert_awaited_once_with(
            "GET", "repos/octo-org/hello-world/branches/main", data=None
        )


class TestObjectCreation:
    """Test blob, tree and commit creation."""

    @pytest.mark.asyncio
    async def test_create_blob_sends_utf8_content(self, git_data, commit_config, fake_github):
        sha = await git_data.create_blob(commit_config, "héllo\n")

        assert sha
        assert fake_github.body_of("POST", "/git/blobs") == {
            "content": "héllo\n",
            "encoding": "utf-8",
        }

    @pytest.mark.asyncio
    async def test_create_blob_failure_raises_write_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("POST", "/git/blobs", 403, {"message": "Resource not accessible"})

        with pytest.raises(RemoteWriteError) as exc_info:
            await git_data.create_blob(commit_config, "content")

        assert exc_info.value.status_code == 403
        assert exc_info.value.stage == "create_blob"

    @pytest.mark.asyncio
    async def test_create_blob_without_sha_raises_write_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("POST", "/git/blobs", 201, {"url": "somewhere"})

        with pytest.raises(RemoteWriteError):
            await git_data.create_blob(commit_config, "content")

    @pytest.mark.asyncio
    async def test_create_tree_payload(self, git_data, commit_config, fake_github):
        await git_data.create_tree(commit_config, "base-sha", "blob-sha")

        assert fake_github.body_of("POST", "/git/trees") == {
            "base_tree": "base-sha",
            "tree": [
                {
                    "path": "docs/heartbeat.txt",
                    "mode": "100644",
                    "type": "blob",
                    "sha": "blob-sha",
                }
            ],
        }

    @pytest.mark.asyncio
    async def test_create_tree_passes_identifiers_verbatim(
        self, git_data, commit_config, fake_github
    ):
        """Test identifiers needing JSON escaping arrive intact."""
        odd_sha = 'ab"c\\d'

        await git_data.create_tree(commit_config, odd_sha, odd_sha)

        body = fake_github.body_of("POST", "/git/trees")
        assert body["base_tree"] == odd_sha
        assert body["tree"][0]["sha"] == odd_sha

    @pytest.mark.asyncio
    async def test_create_tree_failure_raises_write_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("POST", "/git/trees", 422, {"message": "Invalid tree info"})

        with pytest.raises(RemoteWriteError) as exc_info:
            await git_data.create_tree(commit_config, "base", "blob")

        assert exc_info.value.stage == "create_tree"

    @pytest.mark.asyncio
    async def test_create_commit_payload(self, git_data, commit_config, fake_github):
        sha = await git_data.create_commit(commit_config, "parent-sha", "tree-sha")

        assert sha
        assert fake_github.body_of("POST", "/git/commits") == {
            "message": "Automated heartbeat commit",
            "tree": "tree-sha",
            "parents": ["parent-sha"],
        }

    @pytest.mark.asyncio
    async def test_create_commit_failure_raises_write_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("POST", "/git/commits", 500)

        with pytest.raises(RemoteWriteError) as exc_info:
            await git_data.create_commit(commit_config, "parent", "tree")

        assert exc_info.value.stage == "create_commit"


class TestReferenceUpdate:
    """Test update_ref and patch_branch."""

    @pytest.mark.asyncio
    async def test_update_ref_is_not_forced(self, git_data, commit_config, fake_github):
        await git_data.update_ref(commit_config, "new-sha")

        assert fake_github.calls == [
            ("PATCH", "/repos/octo-org/hello-world/git/refs/heads/main")
        ]
        assert fake_github.body_of("PATCH", "/git/refs/heads/main") == {
            "sha": "new-sha",
            "force": False,
        }
        assert fake_github.head == "new-sha"

    @pytest.mark.asyncio
    async def test_update_ref_rejected_raises_write_error(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail(
            "PATCH", "/git/refs/heads/main", 422, {"message": "Update is not a fast forward"}
        )

        with pytest.raises(RemoteWriteError) as exc_info:
            await git_data.update_ref(commit_config, "new-sha")

        assert exc_info.value.status_code == 422
        assert exc_info.value.stage == "update_ref"

    @pytest.mark.asyncio
    async def test_patch_branch_returns_sha(self, git_data, commit_config, fake_github):
        fake_github.head = "new-sha"

        sha = await git_data.patch_branch(commit_config, "new-sha")

        assert sha == "new-sha"
        assert fake_github.body_of("PATCH", "/branches/main") == {"sha": "new-sha"}

    @pytest.mark.asyncio
    async def test_patch_branch_without_sha_field(self, git_data, commit_config, fake_github):
        fake_github.fail("PATCH", "/branches/main", 200, {"name": "main"})

        assert await git_data.patch_branch(commit_config, "new-sha") is None

    @pytest.mark.asyncio
    async def test_patch_branch_failure_has_own_stage(
        self, git_data, commit_config, fake_github
    ):
        fake_github.fail("PATCH", "/branches/main", 404)

        with pytest.raises(RemoteWriteError) as exc_info:
            await git_data.patch_branch(commit_config, "new-sha")

        assert exc_info.value.stage == "patch_branch"
