"""Custom exception types for the PR metadata action."""

from __future__ import annotations

from typing import Optional


class PRMetadataError(Exception):
    """Base exception for all PR metadata action errors."""


class ConfigurationError(PRMetadataError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(PRMetadataError):
    """Raised when GitHub or analytics API credentials are unavailable."""


class ContextError(PRMetadataError):
    """Raised when the workflow event does not describe a pull request."""


class UpstreamFetchError(PRMetadataError):
    """Raised when a GitHub API request fails or returns an unexpected response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataValidationError(UpstreamFetchError):
    """Raised when a GitHub payload lacks fields required to build the submission."""


class DeliveryError(PRMetadataError):
    """Raised when posting the payload to the analytics endpoint fails.

    ``status_code`` is the HTTP status of the failed response, or ``0`` when
    no response was received at all.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
