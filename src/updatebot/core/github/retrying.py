"""GitHub wrapper that routes every call through the retry policy.

Business logic talks to this wrapper, so transient failures (rate limits,
network blips) are retried before they reach it. Once attempts run out the
last error propagates unchanged.
"""

from updatebot.core.github.abc import GitHub
from updatebot.core.github.types import CreateIssueResult, IssueComment, IssueInfo
from updatebot.core.retry import RetryPolicy, call_with_retry
from updatebot.core.time.abc import Time
from updatebot.model.repositories import GithubRepository


class RetryingGitHub(GitHub):
    """Wrapper that retries each operation of the wrapped implementation.

    Usage:
        github = RetryingGitHub(RealGitHub(), RealTime(), config.retry)
    """

    def __init__(self, wrapped: GitHub, time: Time, policy: RetryPolicy) -> None:
        self._wrapped = wrapped
        self._time = time
        self._policy = policy

    @property
    def wrapped(self) -> GitHub:
        return self._wrapped

    def list_repositories(self, owner: str) -> list[GithubRepository]:
        return call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.list_repositories(owner),
            f"list repositories of {owner}",
        )

    def get_repository(self, owner: str, name: str) -> GithubRepository:
        return call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.get_repository(owner, name),
            f"get repository {owner}/{name}",
        )

    def list_open_issues(self, repo: str, label: str) -> list[IssueInfo]:
        return call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.list_open_issues(repo, label),
            f"list open issues of {repo}",
        )

    def create_issue(
        self, repo: str, title: str, body: str, labels: list[str]
    ) -> CreateIssueResult:
        return call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.create_issue(repo, title, body, labels),
            f"create issue in {repo}",
        )

    def add_comment(self, repo: str, number: int, body: str) -> None:
        call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.add_comment(repo, number, body),
            f"comment on {repo}#{number}",
        )

    def get_issue_comments(self, repo: str, number: int) -> list[IssueComment]:
        return call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.get_issue_comments(repo, number),
            f"list comments of {repo}#{number}",
        )

    def close_issue(self, repo: str, number: int) -> None:
        call_with_retry(
            self._time,
            self._policy,
            lambda: self._wrapped.close_issue(repo, number),
            f"close {repo}#{number}",
        )

    def get_current_username(self) -> str | None:
        return call_with_retry(
            self._time,
            self._policy,
            self._wrapped.get_current_username,
            "get current username",
        )
