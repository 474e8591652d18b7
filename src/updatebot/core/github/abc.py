"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod

from updatebot.core.github.types import CreateIssueResult, IssueComment, IssueInfo
from updatebot.model.repositories import GithubRepository


class GitHub(ABC):
    """Abstract interface for the GitHub operations updatebot needs.

    Repositories are addressed by their full name ("owner/name").
    All implementations (real, fake and wrappers) must implement this interface.
    """

    @abstractmethod
    def list_repositories(self, owner: str) -> list[GithubRepository]:
        """List every repository of an organisation or user.

        Raises:
            RuntimeError: If the listing cannot be fetched
        """
        ...

    @abstractmethod
    def get_repository(self, owner: str, name: str) -> GithubRepository:
        """Fetch a single repository by name.

        Raises:
            RuntimeError: If the repository does not exist or cannot be fetched
        """
        ...

    @abstractmethod
    def list_open_issues(self, repo: str, label: str) -> list[IssueInfo]:
        """List open issues (and pull requests) carrying a label.

        Pull requests are included and flagged with is_pull_request=True,
        because GitHub's issues endpoint returns both.
        """
        ...

    @abstractmethod
    def create_issue(
        self, repo: str, title: str, body: str, labels: list[str]
    ) -> CreateIssueResult:
        """Create a new issue."""
        ...

    @abstractmethod
    def add_comment(self, repo: str, number: int, body: str) -> None:
        """Add a comment to an existing issue."""
        ...

    @abstractmethod
    def get_issue_comments(self, repo: str, number: int) -> list[IssueComment]:
        """Fetch all comments of an issue in chronological order."""
        ...

    @abstractmethod
    def close_issue(self, repo: str, number: int) -> None:
        """Close an issue."""
        ...

    @abstractmethod
    def get_current_username(self) -> str | None:
        """Login of the authenticated user, or None if not authenticated."""
        ...
