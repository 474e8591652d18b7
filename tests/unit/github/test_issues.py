"""Tests for the coordinating-issue ledger."""

import logging
from datetime import UTC, datetime

import pytest

from updatebot.core.github.fake import FakeGitHub
from updatebot.core.github.types import IssueComment, IssueInfo
from updatebot.github.issues import (
    BODY,
    CLOSE_MESSAGE,
    PENDING_CHANGE_COMMENT_PREFIX,
    ConflictLedger,
    get_open_issues,
    latest_pending_changes_comment,
    parse_change_line,
    parse_pending_changes_comment,
    pending_changes_comment,
)
from updatebot.kind.kinds import Kind
from updatebot.model.changes import DependencyVersionChange

REPO = "acme/app"
LABEL = "updatebot"
TITLE_PREFIX = "updatebot pending changes for app"


def _issue(number: int, title: str, *, is_pull_request: bool = False) -> IssueInfo:
    return IssueInfo(
        number=number,
        title=title,
        body="",
        state="OPEN",
        url=f"https://github.com/{REPO}/issues/{number}",
        labels=[LABEL],
        is_pull_request=is_pull_request,
    )


def _comment(author: str | None, body: str, minute: int) -> IssueComment:
    return IssueComment(
        author=author, body=body, created_at=datetime(2024, 5, 1, 12, minute, tzinfo=UTC)
    )


def _ledger(github: FakeGitHub, username: str | None = "updatebot") -> ConflictLedger:
    return ConflictLedger(
        github=github, repo=REPO, title_prefix=TITLE_PREFIX, label=LABEL, username=username
    )


def test_pending_changes_comment_encoding() -> None:
    """Test the comment grammar, including the empty trailing scope token."""
    changes = [
        DependencyVersionChange(Kind.MAVEN, "com.foo:bar", "1.2.3"),
        DependencyVersionChange(Kind.NPM, "left-pad", "2.0.0", "dev"),
    ]

    body = pending_changes_comment(changes, "pushing maven com.foo:bar 1.2.3")

    assert body.startswith(PENDING_CHANGE_COMMENT_PREFIX + "pushing maven com.foo:bar 1.2.3\n")
    assert "\n    maven com.foo:bar 1.2.3 \n" in body
    assert body.endswith("\n    npm left-pad 2.0.0 dev")
    assert parse_pending_changes_comment(body) == changes


def test_malformed_lines_are_skipped_with_warnings(caplog: pytest.LogCaptureFixture) -> None:
    body = "\n".join(
        [
            PENDING_CHANGE_COMMENT_PREFIX + "pushing things",
            "    npm",
            "    docker nginx",
            "    bogus-kind dep 1.0",
            "    maven a 1.0 test",
        ]
    )

    with caplog.at_level(logging.WARNING, logger="updatebot.github.issues"):
        changes = parse_pending_changes_comment(body)

    assert changes == [DependencyVersionChange(Kind.MAVEN, "a", "1.0", "test")]
    messages = [record.getMessage() for record in caplog.records]
    assert "Ignoring command: Not enough arguments: npm" in messages
    assert "Ignoring command: Not enough arguments: docker nginx" in messages
    assert "Ignoring command: no such kind `bogus-kind` in: bogus-kind dep 1.0" in messages
    assert len(messages) == 3


def test_parse_change_line_kind_is_case_insensitive() -> None:
    assert parse_change_line("NPM left-pad 1.0") == DependencyVersionChange(
        Kind.NPM, "left-pad", "1.0"
    )


def test_latest_authoritative_comment_wins() -> None:
    """Test that only the bot's most recent pending-changes comment counts."""
    comments = [
        _comment("updatebot", PENDING_CHANGE_COMMENT_PREFIX + "a\n    npm a 1.0 ", 0),
        _comment("someone", PENDING_CHANGE_COMMENT_PREFIX + "b\n    npm b 1.0 ", 1),
        _comment("updatebot", PENDING_CHANGE_COMMENT_PREFIX + "c\n    npm c 1.0 ", 2),
        _comment("updatebot", "thanks for the report!", 3),
    ]

    latest = latest_pending_changes_comment(comments, "updatebot")

    assert latest is not None
    assert parse_pending_changes_comment(latest) == [
        DependencyVersionChange(Kind.NPM, "c", "1.0")
    ]


def test_comments_from_other_authors_are_ignored() -> None:
    comments = [_comment("someone", PENDING_CHANGE_COMMENT_PREFIX + "x\n    npm x 1.0 ", 0)]

    assert latest_pending_changes_comment(comments, "updatebot") is None
    assert latest_pending_changes_comment(comments, None) is None


def test_get_open_issues_excludes_pull_requests() -> None:
    github = FakeGitHub(
        issues={REPO: [_issue(1, TITLE_PREFIX, is_pull_request=True), _issue(2, "Other")]}
    )

    assert [issue.number for issue in get_open_issues(github, REPO, LABEL)] == [2]


def test_find_matches_title_prefix_only() -> None:
    """Test that among labelled issues only the one with the computed title is used."""
    github = FakeGitHub(
        issues={
            REPO: [
                _issue(1, TITLE_PREFIX, is_pull_request=True),
                _issue(2, "Dependency dashboard"),
                _issue(3, TITLE_PREFIX),
            ]
        },
        comments={
            (REPO, 2): [_comment("updatebot", PENDING_CHANGE_COMMENT_PREFIX + "x\n  npm x 9", 0)],
            (REPO, 3): [_comment("updatebot", PENDING_CHANGE_COMMENT_PREFIX + "y\n  npm y 1", 0)],
        },
    )
    ledger = _ledger(github)

    issue = ledger.find()

    assert issue is not None
    assert issue.number == 3
    assert ledger.pending_changes() == [DependencyVersionChange(Kind.NPM, "y", "1")]


def test_pending_changes_without_issue_is_empty() -> None:
    github = FakeGitHub()

    assert _ledger(github).pending_changes() == []
    assert "get_issue_comments" not in github.calls


def test_pending_changes_without_bot_comment_logs_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    github = FakeGitHub(issues={REPO: [_issue(5, TITLE_PREFIX)]})

    with caplog.at_level(logging.WARNING, logger="updatebot.github.issues"):
        assert _ledger(github).pending_changes() == []

    assert "No updatebot comment found" in caplog.text


def test_record_creates_issue_and_round_trips() -> None:
    github = FakeGitHub()
    ledger = _ledger(github)
    changes = [DependencyVersionChange(Kind.NPM, "left-pad", "2.0.0", "dev")]

    issue = ledger.record(changes, "pushing npm left-pad 2.0.0 (dev)")

    assert github.created_issues == [(REPO, TITLE_PREFIX, BODY, [LABEL])]
    assert github.added_comments == [
        (REPO, issue.number, pending_changes_comment(changes, "pushing npm left-pad 2.0.0 (dev)"))
    ]
    assert ledger.pending_changes() == changes


def test_record_reuses_existing_issue() -> None:
    github = FakeGitHub(issues={REPO: [_issue(8, TITLE_PREFIX)]})

    _ledger(github).record([DependencyVersionChange(Kind.HELM, "redis", "18")], "pushing")

    assert github.created_issues == []
    assert github.added_comments[0][1] == 8


def test_resolve_comments_and_closes() -> None:
    github = FakeGitHub(issues={REPO: [_issue(8, TITLE_PREFIX)]})
    ledger = _ledger(github)

    closed = ledger.resolve("pulling pending changes")

    assert closed is not None
    assert github.added_comments == [(REPO, 8, CLOSE_MESSAGE + "pulling pending changes")]
    assert github.closed_issues == [(REPO, 8)]
    assert ledger.find() is None


def test_resolve_without_issue_does_nothing() -> None:
    github = FakeGitHub()

    assert _ledger(github).resolve("pulling") is None
    assert github.added_comments == []
    assert github.closed_issues == []
