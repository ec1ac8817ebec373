"""
GitHub API Module

Handles GitHub REST API interactions:
- Authenticated request client
- Git data operations (blobs, trees, commits, refs)
"""

from gitdata_commit.services.github.api.client import GitHubAPIClient, GitHubAPIError
from gitdata_commit.services.github.api.git_data import GitDataOperations

__all__ = [
    "GitHubAPIClient",
    "GitHubAPIError",
    "GitDataOperations",
]
