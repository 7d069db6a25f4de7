"""Configuration parsing and validation for the PR metadata action."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import AuthenticationError, ConfigurationError

DEFAULT_GITHUB_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the action."""

    github_token: str
    api_endpoint: str
    teampulse_token: str
    github_api_url: str = DEFAULT_GITHUB_API_URL


def _input_env_name(name: str) -> str:
    """Return the environment variable GitHub Actions uses for an action input."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def _resolve(value: Optional[str], input_name: str) -> str:
    if value is None:
        value = os.getenv(_input_env_name(input_name), "")
    return value.strip()


def load_config(
    github_token: Optional[str] = None,
    api_endpoint: Optional[str] = None,
    teampulse_token: Optional[str] = None,
    github_api_url: Optional[str] = None,
) -> Config:
    """Build and validate application configuration.

    Explicit arguments win; any argument left as ``None`` falls back to the
    matching ``INPUT_*`` environment variable set by the Actions runner.

    Args:
        github_token: Token used to read pull request data from GitHub.
        api_endpoint: Analytics endpoint receiving the payload.
        teampulse_token: Bearer token for the analytics endpoint.
        github_api_url: Base URL of the GitHub REST API.

    Returns:
        A validated ``Config`` instance.

    Raises:
        AuthenticationError: If either token is missing.
        ConfigurationError: If ``api_endpoint`` is missing or not an HTTP(S) URL.
    """
    resolved_github_token = _resolve(github_token, "github_token")
    if not resolved_github_token:
        raise AuthenticationError(
            "Missing required input 'github_token'. "
            "Pass --github-token or set INPUT_GITHUB_TOKEN."
        )

    resolved_teampulse_token = _resolve(teampulse_token, "teampulse_token")
    if not resolved_teampulse_token:
        raise AuthenticationError(
            "Missing required input 'teampulse_token'. "
            "Pass --teampulse-token or set INPUT_TEAMPULSE_TOKEN."
        )

    resolved_endpoint = _resolve(api_endpoint, "api_endpoint")
    if not resolved_endpoint:
        raise ConfigurationError(
            "Missing required input 'api_endpoint'. "
            "Pass --api-endpoint or set INPUT_API_ENDPOINT."
        )

    parsed = urlparse(resolved_endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"Invalid value for 'api_endpoint': expected an http(s) URL, got '{resolved_endpoint}'."
        )

    if github_api_url is None:
        github_api_url = os.getenv("GITHUB_API_URL", "")
    resolved_api_url = github_api_url.strip().rstrip("/") or DEFAULT_GITHUB_API_URL

    return Config(
        github_token=resolved_github_token,
        api_endpoint=resolved_endpoint,
        teampulse_token=resolved_teampulse_token,
        github_api_url=resolved_api_url,
    )
