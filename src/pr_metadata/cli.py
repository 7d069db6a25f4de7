"""Command-line argument parsing for the PR metadata action."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for a metadata submission run.

    Every option defaults to ``None`` so that the Actions runner environment
    (``INPUT_*``, ``GITHUB_*``) is consulted when a flag is omitted.

    Returns:
        Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="pr-metadata-action",
        description=(
            "Collect metadata for a merged GitHub pull request and submit it "
            "to an analytics endpoint."
        ),
    )

    parser.add_argument(
        "--github-token",
        help="GitHub token used to read pull request data (default: INPUT_GITHUB_TOKEN).",
    )
    parser.add_argument(
        "--api-endpoint",
        help="Analytics endpoint receiving the payload (default: INPUT_API_ENDPOINT).",
    )
    parser.add_argument(
        "--teampulse-token",
        help="Bearer token for the analytics endpoint (default: INPUT_TEAMPULSE_TOKEN).",
    )
    parser.add_argument(
        "--github-api-url",
        help="GitHub REST API base URL (default: GITHUB_API_URL or https://api.github.com).",
    )
    parser.add_argument(
        "--event-path",
        help="Path to the workflow event JSON (default: GITHUB_EVENT_PATH).",
    )
    parser.add_argument(
        "--repository",
        help="Repository as owner/name (default: GITHUB_REPOSITORY).",
    )
    parser.add_argument(
        "--output-file",
        help="File receiving action outputs (default: GITHUB_OUTPUT).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug logging (default: enabled when RUNNER_DEBUG=1).",
    )

    return parser.parse_args(argv)
