"""High-level git operations interface.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    Every operation reports success as a bool instead of raising, so that a
    failing repository can be skipped without aborting the rest of the fleet.
    """

    @abstractmethod
    def stash(self, repo_root: Path) -> bool:
        """Stash local modifications (output suppressed)."""
        ...

    @abstractmethod
    def checkout_branch(self, repo_root: Path, branch: str) -> bool:
        """Check out an existing branch (output suppressed)."""
        ...

    @abstractmethod
    def pull(self, repo_root: Path) -> bool:
        """Pull the current branch from its upstream (output suppressed)."""
        ...

    @abstractmethod
    def clone(self, clone_url: str, target: Path) -> bool:
        """Clone clone_url into target, running from target's parent.

        The parent directory must already exist. Output is surfaced to the
        terminal so long clones show progress.
        """
        ...
