"""Pytest configuration for tests.

Sets up Python path and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.fixtures.github_fixtures import (  # noqa: E402
    API_URL,
    TEST_TOKEN,
    FakeGitHub,
    create_test_config,
    write_test_config,
)
from gitdata_commit.services.github.api.client import GitHubAPIClient  # noqa: E402


@pytest.fixture
def fake_github():
    """In-memory GitHub API for one repository."""
    return FakeGitHub()


@pytest.fixture
def api_client(fake_github):
    """GitHubAPIClient routed to the fake GitHub."""
    return GitHubAPIClient(
        token=TEST_TOKEN,
        base_url=API_URL,
        user_agent="gitdata-commit-tests/1.0",
        transport=fake_github.transport,
    )


@pytest.fixture
def commit_config():
    return create_test_config()


@pytest.fixture
def config_file(tmp_path):
    """Path of a valid config.json in a temporary directory."""
    return write_test_config(tmp_path)
