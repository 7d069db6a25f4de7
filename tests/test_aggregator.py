"""Tests for pull request payload aggregation."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pr_metadata.aggregator import (
    aggregate,
    project_actor,
    project_pull_request,
    project_review,
    project_timeline_event,
)
from pr_metadata.errors import DataValidationError, UpstreamFetchError
from pr_metadata.models import Actor, PullRequestRef, RepositoryRef

REF = PullRequestRef(repository=RepositoryRef(owner="octo", name="repo"), number=7)

NULL_USER = {"id": None, "login": None, "avatar_url": None, "type": None}


def _user(user_id: int = 1, login: str = "alice") -> dict:
    return {
        "id": user_id,
        "login": login,
        "avatar_url": f"https://avatars.example.com/{login}",
        "type": "User",
        "node_id": "MDQ6VXNlcjE=",
        "site_admin": False,
    }


def _pr_details() -> dict:
    return {
        "id": 1001,
        "number": 7,
        "title": "Add feature",
        "body": "Long description that must not be forwarded",
        "state": "closed",
        "created_at": "2026-01-01T10:00:00Z",
        "merged_at": "2026-01-02T12:00:00Z",
        "additions": 42,
        "deletions": 7,
        "changed_files": 3,
        "comments": 2,
        "review_comments": 1,
        "commits": 4,
        "user": _user(),
        "head": {"sha": "abc"},
    }


def _source(
    details=None,
    issue_comments=(),
    reviews=(),
    review_comments=(),
    timeline=(),
):
    source = Mock()
    source.get_pull_request.return_value = details if details is not None else _pr_details()
    source.iter_issue_comments.return_value = iter(issue_comments)
    source.iter_reviews.return_value = iter(reviews)
    source.iter_review_comments.return_value = iter(review_comments)
    source.iter_timeline.return_value = iter(timeline)
    return source


def test_aggregate_builds_payload_with_minimized_pull_request():
    """Verify the pull request summary keeps exactly the listed fields."""
    payload = aggregate(_source(), REF).to_dict()

    assert payload["repository"] == {"owner": "octo", "name": "repo"}
    assert payload["data"]["pull_request"] == {
        "id": 1001,
        "number": 7,
        "title": "Add feature",
        "created_at": "2026-01-01T10:00:00Z",
        "merged_at": "2026-01-02T12:00:00Z",
        "additions": 42,
        "deletions": 7,
        "changed_files": 3,
        "comments": 2,
        "review_comments": 1,
        "user": {
            "id": 1,
            "login": "alice",
            "avatar_url": "https://avatars.example.com/alice",
            "type": "User",
        },
    }


def test_aggregate_queries_every_stream_for_the_pull_request():
    """Verify all five collections are fetched for the referenced pull request."""
    source = _source()

    aggregate(source, REF)

    for method in (
        source.get_pull_request,
        source.iter_issue_comments,
        source.iter_reviews,
        source.iter_review_comments,
        source.iter_timeline,
    ):
        method.assert_called_once_with("octo", "repo", 7)


def test_aggregate_preserves_source_order_across_pages():
    """Verify multi-page streams are concatenated in original order."""
    first_page = [{"id": 3, "user": _user(), "created_at": "2026-01-01T11:00:00Z"}]
    second_page = [
        {"id": 1, "user": _user(2, "bob"), "created_at": "2026-01-01T12:00:00Z"},
        {"id": 2, "user": _user(), "created_at": "2026-01-01T13:00:00Z"},
    ]

    def pages():
        yield from first_page
        yield from second_page

    source = _source()
    source.iter_issue_comments.return_value = pages()

    payload = aggregate(source, REF)

    assert [comment.id for comment in payload.comments] == [3, 1, 2]
    assert payload.comments[1].user.login == "bob"


def test_aggregate_projects_reviews_review_comments_and_timeline():
    """Verify each stream is projected to its own record shape."""
    source = _source(
        reviews=[
            {
                "id": 50,
                "state": "CHANGES_REQUESTED",
                "user": _user(2, "bob"),
                "submitted_at": "2026-01-01T12:00:00Z",
                "comments": 2,
                "body": "please fix",
            }
        ],
        review_comments=[
            {"id": 60, "user": _user(2, "bob"), "created_at": "2026-01-01T12:01:00Z", "path": "a.py"}
        ],
        timeline=[
            {"event": "labeled", "created_at": "2026-01-01T10:05:00Z", "label": {"name": "bug"}},
            {"event": "committed", "sha": "abc"},
        ],
    )

    data = aggregate(source, REF).to_dict()["data"]

    assert data["reviews"] == [
        {
            "id": 50,
            "state": "CHANGES_REQUESTED",
            "user": {
                "id": 2,
                "login": "bob",
                "avatar_url": "https://avatars.example.com/bob",
                "type": "User",
            },
            "submitted_at": "2026-01-01T12:00:00Z",
            "comments": 2,
        }
    ]
    assert data["review_comments"][0]["id"] == 60
    assert set(data["review_comments"][0]) == {"id", "user", "created_at"}
    assert data["timeline"] == [
        {"event": "labeled", "created_at": "2026-01-01T10:05:00Z"},
        {"event": "committed", "created_at": None},
    ]


def test_aggregate_maps_missing_users_to_null_fields():
    """Verify deleted or absent users serialize as null-bearing user objects."""
    source = _source(
        issue_comments=[{"id": 1, "user": None, "created_at": "2026-01-01T11:00:00Z"}],
        reviews=[{"id": 2, "state": "APPROVED", "submitted_at": "2026-01-01T12:00:00Z"}],
    )

    data = aggregate(source, REF).to_dict()["data"]

    assert data["comments"][0]["user"] == NULL_USER
    assert data["reviews"][0]["user"] == NULL_USER
    assert data["reviews"][0]["comments"] is None


def test_aggregate_propagates_upstream_errors_without_partial_payload():
    """Verify a failing stream aborts aggregation."""
    source = _source()
    source.iter_review_comments.side_effect = UpstreamFetchError("boom", status_code=500)

    with pytest.raises(UpstreamFetchError):
        aggregate(source, REF)

    source.iter_timeline.assert_not_called()


def test_project_pull_request_missing_required_fields_raises():
    """Verify pull request details without id/number are rejected."""
    with pytest.raises(DataValidationError):
        project_pull_request({"title": "no id"})


def test_project_actor_none_returns_empty_actor():
    """Verify a missing user object projects to an all-None actor."""
    assert project_actor(None) == Actor()


def test_project_review_passes_state_through_verbatim():
    """Verify review states are not normalized."""
    review = project_review({"id": 1, "state": "DISMISSED"})

    assert review.state == "DISMISSED"


def test_project_timeline_event_passes_event_type_through():
    """Verify free-form timeline event types are kept as-is."""
    event = project_timeline_event({"event": "review_requested", "created_at": "2026-01-01T00:00:00Z"})

    assert event.event == "review_requested"


def test_project_pull_request_without_author_maps_to_empty_actor():
    """Verify a pull request whose author account is gone keeps a null user."""
    summary = project_pull_request({"id": 1, "number": 2, "user": None})

    assert summary.user == Actor()
    assert summary.to_dict()["user"] == NULL_USER
