"""In-memory fake implementation of GitHub operations for testing."""

from datetime import UTC, datetime, timedelta

from updatebot.core.github.abc import GitHub
from updatebot.core.github.types import CreateIssueResult, IssueComment, IssueInfo
from updatebot.model.repositories import GithubRepository


class FakeGitHub(GitHub):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments. Mutations
    are applied to the in-memory state and also recorded for assertions.
    """

    def __init__(
        self,
        *,
        repositories: dict[str, list[GithubRepository]] | None = None,
        failing_owners: set[str] | None = None,
        issues: dict[str, list[IssueInfo]] | None = None,
        comments: dict[tuple[str, int], list[IssueComment]] | None = None,
        username: str | None = "updatebot",
        transient_failures: dict[str, int] | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            repositories: Mapping of owner -> repositories it owns
            failing_owners: Owners whose repository listing raises RuntimeError
            issues: Mapping of repository full name -> issues (and PRs) in it
            comments: Mapping of (repository full name, issue number) -> comments
            username: Authenticated login (None means not authenticated)
            transient_failures: Mapping of method name -> number of times it
                raises RuntimeError before behaving normally
        """
        self._repositories = repositories or {}
        self._failing_owners = failing_owners or set()
        self._issues = {repo: list(items) for repo, items in (issues or {}).items()}
        self._comments = {key: list(items) for key, items in (comments or {}).items()}
        self._username = username
        self._transient_failures = dict(transient_failures or {})
        self._calls: list[str] = []
        self._created_issues: list[tuple[str, str, str, list[str]]] = []
        self._added_comments: list[tuple[str, int, str]] = []
        self._closed_issues: list[tuple[str, int]] = []

    @property
    def calls(self) -> list[str]:
        """Method names in call order, for test assertions."""
        return self._calls

    @property
    def created_issues(self) -> list[tuple[str, str, str, list[str]]]:
        """(repo, title, body, labels) tuples of created issues."""
        return self._created_issues

    @property
    def added_comments(self) -> list[tuple[str, int, str]]:
        """(repo, issue number, body) tuples of added comments."""
        return self._added_comments

    @property
    def closed_issues(self) -> list[tuple[str, int]]:
        return self._closed_issues

    def _record(self, method: str) -> None:
        self._calls.append(method)
        remaining = self._transient_failures.get(method, 0)
        if remaining > 0:
            self._transient_failures[method] = remaining - 1
            msg = f"Transient failure in {method}"
            raise RuntimeError(msg)

    def list_repositories(self, owner: str) -> list[GithubRepository]:
        self._record("list_repositories")
        if owner in self._failing_owners:
            msg = f"Failed to list repositories of {owner}"
            raise RuntimeError(msg)
        return list(self._repositories.get(owner, []))

    def get_repository(self, owner: str, name: str) -> GithubRepository:
        self._record("get_repository")
        for repo in self._repositories.get(owner, []):
            if repo.name == name:
                return repo
        msg = f"Repository {owner}/{name} not found"
        raise RuntimeError(msg)

    def list_open_issues(self, repo: str, label: str) -> list[IssueInfo]:
        self._record("list_open_issues")
        return [
            issue
            for issue in self._issues.get(repo, [])
            if issue.state == "OPEN" and label in issue.labels
        ]

    def create_issue(
        self, repo: str, title: str, body: str, labels: list[str]
    ) -> CreateIssueResult:
        self._record("create_issue")
        existing = self._issues.setdefault(repo, [])
        number = max((issue.number for issue in existing), default=0) + 1
        url = f"https://github.com/{repo}/issues/{number}"
        existing.append(
            IssueInfo(number=number, title=title, body=body, state="OPEN", url=url, labels=labels)
        )
        self._created_issues.append((repo, title, body, labels))
        return CreateIssueResult(number=number, url=url)

    def _require_issue(self, repo: str, number: int) -> IssueInfo:
        for issue in self._issues.get(repo, []):
            if issue.number == number:
                return issue
        msg = f"Issue #{number} not found in {repo}"
        raise RuntimeError(msg)

    def add_comment(self, repo: str, number: int, body: str) -> None:
        self._record("add_comment")
        self._require_issue(repo, number)
        existing = self._comments.setdefault((repo, number), [])
        latest = max((c.created_at for c in existing), default=datetime(2024, 1, 1, tzinfo=UTC))
        existing.append(
            IssueComment(author=self._username, body=body, created_at=latest + timedelta(minutes=1))
        )
        self._added_comments.append((repo, number, body))

    def get_issue_comments(self, repo: str, number: int) -> list[IssueComment]:
        self._record("get_issue_comments")
        return list(self._comments.get((repo, number), []))

    def close_issue(self, repo: str, number: int) -> None:
        self._record("close_issue")
        issue = self._require_issue(repo, number)
        issues = self._issues[repo]
        issues[issues.index(issue)] = IssueInfo(
            number=issue.number,
            title=issue.title,
            body=issue.body,
            state="CLOSED",
            url=issue.url,
            labels=issue.labels,
            is_pull_request=issue.is_pull_request,
        )
        self._closed_issues.append((repo, number))

    def get_current_username(self) -> str | None:
        return self._username
