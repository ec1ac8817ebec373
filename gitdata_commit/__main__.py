#!/usr/bin/env python3
"""
Command-line entry point.

    python -m gitdata_commit --config config.json

Reads the commit configuration, pushes one commit through the GitHub Git data
API and exits 0 on success, 2 on a configuration error and 1 on any other
failure.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from gitdata_commit.common.config.config import (
    COMMIT_CONFIG_PATH,
    CONFIRM_BRANCH_PATCH,
    GITHUB_API_URL,
    LOG_LEVEL,
    PIPELINE_TIMEOUT,
    VERIFY_BRANCH_HEAD,
)
from gitdata_commit.common.exception.exceptions import CommitPipelineError, ConfigError
from gitdata_commit.services.commit_pipeline import run_commit_pipeline

logger = logging.getLogger("gitdata_commit")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gitdata-commit",
        description="Create a commit on a GitHub branch through the Git data API",
    )
    parser.add_argument(
        "--config",
        default=COMMIT_CONFIG_PATH,
        help=f"Path to the JSON commit configuration (default: {COMMIT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--api-url",
        default=GITHUB_API_URL,
        help=f"GitHub API root URL (default: {GITHUB_API_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=PIPELINE_TIMEOUT,
        help=f"Seconds the whole run may take (default: {PIPELINE_TIMEOUT})",
    )
    parser.add_argument(
        "--no-confirm-patch",
        dest="confirm_branch_patch",
        action="store_false",
        default=CONFIRM_BRANCH_PATCH,
        help="Skip the branch-endpoint patch after the ref update",
    )
    parser.add_argument(
        "--verify-head",
        dest="verify_branch_head",
        action="store_true",
        default=VERIFY_BRANCH_HEAD,
        help="Refuse to move the branch if its tip changed during the run",
    )
    parser.add_argument(
        "--skip-connectivity-check",
        action="store_true",
        help="Do not ping the API root before the first stage",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=LOG_LEVEL.upper(),
        help=f"Logging level (default: {LOG_LEVEL})",
    )
    args = parser.parse_args(argv)
    # argparse does not check defaults against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid LOG_LEVEL {args.log_level!r}, choose from {', '.join(LOG_LEVELS)}")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        result = asyncio.run(
            run_commit_pipeline(
                config_path=args.config,
                base_url=args.api_url,
                timeout=args.timeout,
                check_connectivity=not args.skip_connectivity_check,
                confirm_branch_patch=args.confirm_branch_patch,
                verify_branch_head=args.verify_branch_head,
            )
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except CommitPipelineError as e:
        logger.error(f"Commit failed: {e}")
        return EXIT_FAILURE

    logger.info(f"Committed {result.commit_sha} on top of {result.parent_sha}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
