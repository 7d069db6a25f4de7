"""Workflow event context for the PR metadata action."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ContextError
from .models import PullRequestRef, RepositoryRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventContext:
    """The triggering event payload and the repository it belongs to."""

    repository: Optional[RepositoryRef]
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def pull_request(self) -> Optional[Dict[str, Any]]:
        pull_request = self.payload.get("pull_request")
        return pull_request if isinstance(pull_request, dict) else None

    def require_pull_request(self) -> Dict[str, Any]:
        """Return the pull request object of the event.

        Raises:
            ContextError: If the event is not a pull request event.
        """
        pull_request = self.pull_request
        if pull_request is None:
            raise ContextError("This action must be run in the context of a Pull Request event.")
        return pull_request

    def is_merged(self) -> bool:
        return bool(self.require_pull_request().get("merged"))

    def pull_request_ref(self) -> PullRequestRef:
        """Build a reference to the event's pull request.

        Raises:
            ContextError: If the repository or pull request number is unknown.
        """
        pull_request = self.require_pull_request()
        if self.repository is None:
            raise ContextError("Unable to determine the repository. Set GITHUB_REPOSITORY to 'owner/name'.")

        number = pull_request.get("number")
        if not isinstance(number, int):
            raise ContextError(f"Pull request event payload has no valid number: {number!r}")

        return PullRequestRef(repository=self.repository, number=number)


def parse_repository(value: Optional[str]) -> Optional[RepositoryRef]:
    """Parse an ``owner/name`` string.

    Raises:
        ContextError: If ``value`` is set but not of the form ``owner/name``.
    """
    if not value:
        return None

    owner, sep, name = value.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ContextError(f"Invalid repository '{value}': expected 'owner/name'.")

    return RepositoryRef(owner=owner, name=name)


def _read_event_payload(event_path: Optional[str]) -> Dict[str, Any]:
    if not event_path:
        return {}

    try:
        with open(event_path, encoding="utf-8") as event_file:
            payload = json.load(event_file)
    except (OSError, ValueError) as exc:
        logger.warning(f"Could not read event payload from {event_path}: {exc}")
        return {}

    return payload if isinstance(payload, dict) else {}


def load_event_context(
    event_path: Optional[str] = None,
    repository: Optional[str] = None,
) -> EventContext:
    """Load the triggering event from the Actions runner environment.

    Arguments left as ``None`` fall back to ``GITHUB_EVENT_PATH`` and
    ``GITHUB_REPOSITORY``. A missing or unreadable event file yields an empty
    payload, which later fails the pull request check.
    """
    if event_path is None:
        event_path = os.getenv("GITHUB_EVENT_PATH")
    if repository is None:
        repository = os.getenv("GITHUB_REPOSITORY")

    payload = _read_event_payload(event_path)
    repository_ref = parse_repository(repository)

    if repository_ref is None:
        repository_payload = payload.get("repository") or {}
        full_name = repository_payload.get("full_name") if isinstance(repository_payload, dict) else None
        repository_ref = parse_repository(full_name)

    return EventContext(repository=repository_ref, payload=payload)
