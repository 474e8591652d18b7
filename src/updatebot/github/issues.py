"""Coordinating issues used as a durable ledger of pending version changes.

Each repository gets at most one live coordinating issue, found by title
prefix and created lazily. Version changes that could not be applied are
stored in comments written by the bot:

    :robot: detected conflicts while pushing npm left-pad 2.0.0

        npm left-pad 2.0.0 dev
        maven com.foo:bar 1.2.3

Only the latest such comment from the configured bot identity counts; it
fully supersedes every earlier one.
"""

import logging
from dataclasses import dataclass

from updatebot.core.github.abc import GitHub
from updatebot.core.github.types import IssueComment, IssueInfo
from updatebot.kind.kinds import Kind
from updatebot.model.changes import DependencyVersionChange
from updatebot.model.repositories import LocalRepository

logger = logging.getLogger(__name__)

UPDATEBOT_ICON = ":robot:"

BODY = (
    f"{UPDATEBOT_ICON} cannot update some dependency versions until other projects "
    "are released to fix dependency conflicts.\n\n"
    "This issue is used to coordinate version changes on this repository coming from "
    "other repositories and will be closed once all the version conflicts are resolved."
)
CLOSE_MESSAGE = f"{UPDATEBOT_ICON} closing as no more dependency conflicts while "
PENDING_CHANGE_COMMENT_PREFIX = f"{UPDATEBOT_ICON} detected conflicts while "


def create_pending_changes_comment_command(changes: list[DependencyVersionChange]) -> str:
    """Render changes as indented `kind dependency version scope` lines.

    An absent scope is rendered as an empty trailing token.
    """
    lines = []
    for change in changes:
        words = [str(change.kind), change.dependency, change.version, change.scope or ""]
        lines.append("\n    " + " ".join(words))
    return "".join(lines)


def pending_changes_comment(changes: list[DependencyVersionChange], description: str) -> str:
    """Full comment body recording changes as the pending set."""
    return (
        PENDING_CHANGE_COMMENT_PREFIX
        + description
        + "\n"
        + create_pending_changes_comment_command(changes)
    )


def close_comment(description: str) -> str:
    return CLOSE_MESSAGE + description


def parse_change_line(text: str) -> DependencyVersionChange | None:
    """Decode one `kind dependency version [scope]` line.

    Returns None (after logging a warning) for lines with too few words or an
    unknown kind.
    """
    words = text.split()
    if len(words) < 3:
        logger.warning("Ignoring command: Not enough arguments: %s", text)
        return None

    kind = Kind.from_name(words[0])
    if kind is None:
        logger.warning("Ignoring command: no such kind `%s` in: %s", words[0], text)
        return None

    scope = words[3] if len(words) > 3 else None
    return DependencyVersionChange(kind=kind, dependency=words[1], version=words[2], scope=scope)


def parse_pending_changes_comment(command: str) -> list[DependencyVersionChange]:
    """Decode every well-formed change line of a comment body.

    The leading prefix line carries the description, not a change, and is
    skipped without a warning.
    """
    answer: list[DependencyVersionChange] = []
    for line in command.split("\n"):
        text = line.strip()
        if not text:
            continue
        if text.startswith(PENDING_CHANGE_COMMENT_PREFIX.strip()):
            continue
        change = parse_change_line(text)
        if change is not None:
            answer.append(change)
    return answer


def is_authoritative_comment(comment: IssueComment, username: str | None) -> bool:
    """True for a pending-changes comment written by the bot identity."""
    if username is None or comment.author != username:
        return False
    return comment.body.strip().startswith(PENDING_CHANGE_COMMENT_PREFIX)


def latest_pending_changes_comment(
    comments: list[IssueComment], username: str | None
) -> str | None:
    """Body of the chronologically last authoritative comment, or None."""
    last_command: str | None = None
    for comment in comments:
        if is_authoritative_comment(comment, username):
            last_command = comment.body.strip()
    return last_command


def load_pending_changes(
    github: GitHub, repo: str, issue: IssueInfo, username: str | None
) -> list[DependencyVersionChange]:
    """Read the current pending set recorded on a coordinating issue."""
    comments = github.get_issue_comments(repo, issue.number)
    command = latest_pending_changes_comment(comments, username)
    if command is None:
        logger.warning("No updatebot comment found on issue %s", issue.url)
        return []
    return parse_pending_changes_comment(command)


def get_open_issues(github: GitHub, repo: str, label: str) -> list[IssueInfo]:
    """Open issues carrying label, excluding pull requests."""
    return [
        issue for issue in github.list_open_issues(repo, label) if not issue.is_pull_request
    ]


def issue_title_prefix(prefix: str, repository: LocalRepository) -> str:
    """Deterministic title prefix of a repository's coordinating issue."""
    return f"{prefix} {repository.name}"


def find_issue(issues: list[IssueInfo], prefix: str) -> IssueInfo | None:
    """First issue whose title starts with prefix."""
    for issue in issues:
        if issue.title.startswith(prefix):
            return issue
    return None


def create_issue(github: GitHub, repo: str, title: str, label: str) -> IssueInfo:
    result = github.create_issue(repo, title, BODY, [label])
    logger.info("Created coordinating issue %s", result.url)
    return IssueInfo(
        number=result.number,
        title=title,
        body=BODY,
        state="OPEN",
        url=result.url,
        labels=[label],
    )


@dataclass(frozen=True)
class ConflictLedger:
    """The coordinating issue of one GitHub repository.

    Fields:
        github: API access (the retrying wrapper in production)
        repo: Repository full name ("owner/name")
        title_prefix: Deterministic title prefix locating the issue
        label: Label carried by coordinating issues
        username: Bot identity whose comments are authoritative
    """

    github: GitHub
    repo: str
    title_prefix: str
    label: str
    username: str | None

    def find(self) -> IssueInfo | None:
        issues = get_open_issues(self.github, self.repo, self.label)
        return find_issue(issues, self.title_prefix)

    def find_or_create(self) -> IssueInfo:
        issue = self.find()
        if issue is not None:
            return issue
        return create_issue(self.github, self.repo, self.title_prefix, self.label)

    def pending_changes(self) -> list[DependencyVersionChange]:
        """Current pending set; empty when no coordinating issue is open."""
        issue = self.find()
        if issue is None:
            return []
        return load_pending_changes(self.github, self.repo, issue, self.username)

    def record(self, changes: list[DependencyVersionChange], description: str) -> IssueInfo:
        """Store changes as the new authoritative pending set."""
        issue = self.find_or_create()
        body = pending_changes_comment(changes, description)
        self.github.add_comment(self.repo, issue.number, body)
        return issue

    def resolve(self, description: str) -> IssueInfo | None:
        """Close the coordinating issue, if open, with a closing comment."""
        issue = self.find()
        if issue is None:
            return None
        self.github.add_comment(self.repo, issue.number, close_comment(description))
        self.github.close_issue(self.repo, issue.number)
        logger.info("Closed coordinating issue %s", issue.url)
        return issue
