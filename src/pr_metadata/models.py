"""Domain models for the pull request metadata payload.

These dataclasses intentionally model only the subset of GitHub API fields that
the analytics endpoint consumes. ``to_dict`` on each model yields the exact wire
shape: every key is always present and missing values serialize as ``null``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Actor:
    """Represents the user attached to a pull request, comment, or review."""

    id: Optional[int] = None
    login: Optional[str] = None
    avatar_url: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "login": self.login,
            "avatar_url": self.avatar_url,
            "type": self.type,
        }


@dataclass(frozen=True, slots=True)
class PullRequestSummary:
    """Represents the core details of a merged pull request."""

    id: int
    number: int
    title: Optional[str]
    created_at: Optional[str]
    merged_at: Optional[str]
    additions: Optional[int]
    deletions: Optional[int]
    changed_files: Optional[int]
    comments: Optional[int]
    review_comments: Optional[int]
    user: Actor = field(default_factory=Actor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "created_at": self.created_at,
            "merged_at": self.merged_at,
            "additions": self.additions,
            "deletions": self.deletions,
            "changed_files": self.changed_files,
            "comments": self.comments,
            "review_comments": self.review_comments,
            "user": self.user.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class CommentRecord:
    """Represents an issue comment or a review comment on a pull request."""

    id: Optional[int]
    user: Actor
    created_at: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user": self.user.to_dict(),
            "created_at": self.created_at,
        }


@dataclass(frozen=True, slots=True)
class ReviewRecord:
    """Represents a submitted pull request review.

    ``state`` is passed through verbatim (``APPROVED``, ``CHANGES_REQUESTED``,
    ``COMMENTED``, ``PENDING``, ``DISMISSED``).
    """

    id: Optional[int]
    state: Optional[str]
    user: Actor
    submitted_at: Optional[str]
    comments: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state,
            "user": self.user.to_dict(),
            "submitted_at": self.submitted_at,
            "comments": self.comments,
        }


@dataclass(frozen=True, slots=True)
class TimelineEvent:
    """Represents one entry of the pull request timeline."""

    event: Optional[str]
    created_at: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event, "created_at": self.created_at}


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """Identifies a repository by owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {"owner": self.owner, "name": self.name}


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    """Identifies a pull request within a repository."""

    repository: RepositoryRef
    number: int


@dataclass(frozen=True, slots=True)
class SubmissionPayload:
    """Represents the fully materialized payload sent to the analytics endpoint."""

    repository: RepositoryRef
    pull_request: PullRequestSummary
    comments: Tuple[CommentRecord, ...] = ()
    reviews: Tuple[ReviewRecord, ...] = ()
    review_comments: Tuple[CommentRecord, ...] = ()
    timeline: Tuple[TimelineEvent, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository": self.repository.to_dict(),
            "data": {
                "pull_request": self.pull_request.to_dict(),
                "comments": [comment.to_dict() for comment in self.comments],
                "reviews": [review.to_dict() for review in self.reviews],
                "review_comments": [comment.to_dict() for comment in self.review_comments],
                "timeline": [event.to_dict() for event in self.timeline],
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
