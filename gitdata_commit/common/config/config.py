"""
Process-wide settings.

Values are read from the environment once at import time, after loading a
local ``.env`` file if one exists. They are only defaults: the API client and
the pipeline accept every value as a constructor argument.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def get_bool_env(key: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# GitHub API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")
GITHUB_USER_AGENT = os.getenv("GITHUB_USER_AGENT", "gitdata-commit/0.1.0")
GITHUB_REQUEST_TIMEOUT = float(os.getenv("GITHUB_REQUEST_TIMEOUT", "30"))
GITHUB_CONNECT_TIMEOUT = float(os.getenv("GITHUB_CONNECT_TIMEOUT", "10"))

# Pipeline
PIPELINE_TIMEOUT = float(os.getenv("PIPELINE_TIMEOUT", "120"))
COMMIT_CONFIG_PATH = os.getenv("COMMIT_CONFIG_PATH", "config.json")
CONFIRM_BRANCH_PATCH = get_bool_env("CONFIRM_BRANCH_PATCH", True)
VERIFY_BRANCH_HEAD = get_bool_env("VERIFY_BRANCH_HEAD", False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
