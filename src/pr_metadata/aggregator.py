"""Payload aggregation for merged pull requests.

This module drains every GitHub stream attached to a pull request and projects
each raw record down to the fields the analytics endpoint consumes:
- pull request summary (point lookup)
- issue comments, reviews, review comments, timeline events (paginated)

All other upstream fields are discarded.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Protocol

from .errors import DataValidationError
from .models import (
    Actor,
    CommentRecord,
    PullRequestRef,
    PullRequestSummary,
    ReviewRecord,
    SubmissionPayload,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

RawRecord = Dict[str, Any]


class PullRequestSource(Protocol):
    """Read access to the GitHub data behind a pull request."""

    def get_pull_request(self, owner: str, repo: str, number: int) -> RawRecord: ...

    def iter_issue_comments(self, owner: str, repo: str, number: int) -> Iterable[RawRecord]: ...

    def iter_reviews(self, owner: str, repo: str, number: int) -> Iterable[RawRecord]: ...

    def iter_review_comments(self, owner: str, repo: str, number: int) -> Iterable[RawRecord]: ...

    def iter_timeline(self, owner: str, repo: str, number: int) -> Iterable[RawRecord]: ...


def project_actor(raw_user: Optional[RawRecord]) -> Actor:
    """Project a GitHub user object; a missing user yields an all-``None`` actor."""
    user = raw_user or {}
    return Actor(
        id=user.get("id"),
        login=user.get("login"),
        avatar_url=user.get("avatar_url"),
        type=user.get("type"),
    )


def project_pull_request(item: RawRecord) -> PullRequestSummary:
    """Project the pull request details returned by ``GET /pulls/{number}``.

    Raises:
        DataValidationError: If ``id`` or ``number`` is missing.
    """
    pr_id = item.get("id")
    number = item.get("number")
    if pr_id is None or number is None:
        raise DataValidationError(
            "GitHub pull request payload is missing required fields: "
            f"id={pr_id!r}, number={number!r}"
        )

    return PullRequestSummary(
        id=pr_id,
        number=number,
        title=item.get("title"),
        created_at=item.get("created_at"),
        merged_at=item.get("merged_at"),
        additions=item.get("additions"),
        deletions=item.get("deletions"),
        changed_files=item.get("changed_files"),
        comments=item.get("comments"),
        review_comments=item.get("review_comments"),
        user=project_actor(item.get("user")),
    )


def project_comment(item: RawRecord) -> CommentRecord:
    return CommentRecord(
        id=item.get("id"),
        user=project_actor(item.get("user")),
        created_at=item.get("created_at"),
    )


def project_review(item: RawRecord) -> ReviewRecord:
    return ReviewRecord(
        id=item.get("id"),
        state=item.get("state"),
        user=project_actor(item.get("user")),
        submitted_at=item.get("submitted_at"),
        comments=item.get("comments"),
    )


def project_timeline_event(item: RawRecord) -> TimelineEvent:
    return TimelineEvent(event=item.get("event"), created_at=item.get("created_at"))


def aggregate(source: PullRequestSource, ref: PullRequestRef) -> SubmissionPayload:
    """Collect all metadata for a pull request into one immutable payload.

    Each stream is drained to exhaustion before the payload is assembled, and
    items keep the order in which GitHub returned them. Failures from the
    source propagate unchanged as ``UpstreamFetchError``; nothing is retried.
    """
    owner = ref.repository.owner
    repo = ref.repository.name
    number = ref.number

    pull_request = project_pull_request(source.get_pull_request(owner, repo, number))
    comments = tuple(project_comment(item) for item in source.iter_issue_comments(owner, repo, number))
    reviews = tuple(project_review(item) for item in source.iter_reviews(owner, repo, number))
    review_comments = tuple(
        project_comment(item) for item in source.iter_review_comments(owner, repo, number)
    )
    timeline = tuple(project_timeline_event(item) for item in source.iter_timeline(owner, repo, number))

    logger.info(
        "Collected pull request metadata",
        extra={
            "repository": ref.repository.full_name,
            "pr_number": number,
            "comment_count": len(comments),
            "review_count": len(reviews),
            "review_comment_count": len(review_comments),
            "timeline_count": len(timeline),
        },
    )

    return SubmissionPayload(
        repository=ref.repository,
        pull_request=pull_request,
        comments=comments,
        reviews=reviews,
        review_comments=review_comments,
        timeline=timeline,
    )
