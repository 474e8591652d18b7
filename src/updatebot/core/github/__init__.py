"""GitHub integration: repository discovery and issue operations."""

from updatebot.core.github.abc import GitHub
from updatebot.core.github.fake import FakeGitHub
from updatebot.core.github.real import RealGitHub
from updatebot.core.github.retrying import RetryingGitHub
from updatebot.core.github.types import CreateIssueResult, IssueComment, IssueInfo

__all__ = [
    "CreateIssueResult",
    "FakeGitHub",
    "GitHub",
    "IssueComment",
    "IssueInfo",
    "RealGitHub",
    "RetryingGitHub",
]
