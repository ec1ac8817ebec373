"""Commit configuration record and its JSON file loader."""

import logging
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from gitdata_commit.common.exception.exceptions import ConfigError

logger = logging.getLogger(__name__)


class CommitConfig(BaseModel):
    """
    Everything one pipeline run needs to know about the target repository.

    Loaded once at startup and shared read-only by every stage.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    github_token: SecretStr = Field(..., description="Token sent as 'Authorization: token ...'")
    github_account: str = Field(..., min_length=1, description="Repository owner (user or organization)")
    github_repo_name: str = Field(..., min_length=1, description="Repository name")
    github_branch: str = Field(..., min_length=1, description="Branch to advance")
    github_file_path: str = Field(..., min_length=1, description="Path of the file inside the repository")
    github_commit_message: str = Field(..., min_length=1, description="Message of the new commit")
    localfile_path: Optional[str] = Field(
        None, description="Local file that receives the marker line and is uploaded whole"
    )

    @field_validator("github_token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("github_token must not be empty")
        return value

    @field_validator(
        "github_account", "github_repo_name", "github_branch", "github_file_path", mode="before"
    )
    @classmethod
    def _strip_identifier(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("github_file_path")
    @classmethod
    def _relative_file_path(cls, value: str) -> str:
        return value.lstrip("/")

    @field_validator("github_commit_message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        # kept verbatim, only whitespace-only messages are refused
        if not value.strip():
            raise ValueError("github_commit_message must not be blank")
        return value

    @property
    def repo_path(self) -> str:
        """API path prefix of the target repository, with escaped segments."""
        return f"repos/{quote(self.github_account, safe='')}/{quote(self.github_repo_name, safe='')}"

    @property
    def branch_path(self) -> str:
        """Branch name escaped for use in a URL path; '/' separators are kept."""
        return quote(self.github_branch, safe="/")


def load_commit_config(path: Union[str, Path]) -> CommitConfig:
    """Read and validate the commit configuration file.

    Args:
        path: Path to a JSON file holding a flat object

    Returns:
        Validated CommitConfig

    Raises:
        ConfigError: If the file cannot be read or does not validate
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read commit config {config_path}: {e}")
        raise ConfigError(f"Cannot read commit config {config_path}: {e}") from e

    try:
        config = CommitConfig.model_validate_json(raw)
    except ValidationError as e:
        logger.error(f"Invalid commit config {config_path}: {e}")
        raise ConfigError(f"Invalid commit config {config_path}: {e}") from e

    logger.info(
        f"Loaded commit config for {config.github_account}/{config.github_repo_name} "
        f"branch {config.github_branch}"
    )
    return config
