"""GitHub REST API client for pull request metadata retrieval."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional

import requests

from .config import Config
from .errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small client for the GitHub pull request and issue APIs.

    Unlike the submitter, this client never retries: any failure while reading
    pull request data aborts the run so that incomplete data is never sent.
    """

    _API_VERSION = "2022-11-28"
    _PAGE_SIZE = 100

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the GitHub token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._timeout_seconds = timeout_seconds
        self._base_url = config.github_api_url.rstrip("/")

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.github_token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute a single GET request.

        Raises:
            UpstreamFetchError: On transport failure or HTTP >= 400. Rate limit
                responses are reported with their status like any other error.
        """
        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise UpstreamFetchError(f"GitHub request failed: GET {url}: {exc}") from exc

        status_code = response.status_code
        if status_code >= 400:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                raise UpstreamFetchError(
                    f"GitHub API rate limit exceeded: GET {url} returned {status_code}",
                    status_code=status_code,
                )
            raise UpstreamFetchError(
                f"GitHub API request failed: GET {url} returned {status_code} - {response.text}",
                status_code=status_code,
            )

        return response

    def _decode(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamFetchError(f"GitHub API returned invalid JSON: GET {url}") from exc

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        """Fetch a single pull request by number."""
        url = self._build_url(f"repos/{owner}/{repo}/pulls/{number}")
        payload = self._decode(self._request(url), url)

        if not isinstance(payload, dict):
            raise UpstreamFetchError(f"GitHub API returned unexpected payload shape: GET {url}")

        return payload

    def paginate(self, path: str) -> Iterator[Dict[str, Any]]:
        """Yield every item of a list endpoint, following ``Link: rel="next"``.

        Items are yielded in the order GitHub returns them. Each call starts a
        fresh traversal from the first page.
        """
        url: Optional[str] = self._build_url(path)
        params: Optional[Dict[str, Any]] = {"per_page": self._PAGE_SIZE}
        page = 0

        while url:
            page += 1
            response = self._request(url, params=params)
            items = self._decode(response, url)

            if not isinstance(items, list):
                raise UpstreamFetchError(f"GitHub API returned unexpected payload shape: GET {url}")

            logger.debug(
                "Fetched page",
                extra={"path": path, "page": page, "items": len(items)},
            )
            yield from items

            # The next link already carries per_page and the page cursor.
            url = response.links.get("next", {}).get("url")
            params = None

    def iter_issue_comments(self, owner: str, repo: str, number: int) -> Iterator[Dict[str, Any]]:
        """Iterate over issue-level (conversation) comments of a pull request."""
        return self.paginate(f"repos/{owner}/{repo}/issues/{number}/comments")

    def iter_reviews(self, owner: str, repo: str, number: int) -> Iterator[Dict[str, Any]]:
        """Iterate over reviews submitted on a pull request."""
        return self.paginate(f"repos/{owner}/{repo}/pulls/{number}/reviews")

    def iter_review_comments(self, owner: str, repo: str, number: int) -> Iterator[Dict[str, Any]]:
        """Iterate over diff-level review comments of a pull request."""
        return self.paginate(f"repos/{owner}/{repo}/pulls/{number}/comments")

    def iter_timeline(self, owner: str, repo: str, number: int) -> Iterator[Dict[str, Any]]:
        """Iterate over timeline events of a pull request."""
        return self.paginate(f"repos/{owner}/{repo}/issues/{number}/timeline")
