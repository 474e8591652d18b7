"""In-memory fake implementation of Git for testing."""

from pathlib import Path

from updatebot.core.git.abc import Git


class FakeGit(Git):
    """Fake Git that records calls and fails on request.

    All state is provided via constructor using keyword arguments.
    """

    def __init__(
        self,
        *,
        failing_operations: dict[Path, set[str]] | None = None,
        create_on_clone: bool = True,
    ) -> None:
        """Create FakeGit.

        Args:
            failing_operations: Mapping of repository directory -> names of
                operations ("stash", "checkout", "pull", "clone") that fail there
            create_on_clone: Whether clone() creates target/.git on disk
        """
        self._failing = failing_operations or {}
        self._create_on_clone = create_on_clone
        self._calls: list[tuple[str, Path]] = []
        self._checked_out: list[tuple[Path, str]] = []
        self._cloned: list[tuple[str, Path]] = []

    @property
    def calls(self) -> list[tuple[str, Path]]:
        """(operation, directory) tuples in call order, for test assertions."""
        return self._calls

    @property
    def checked_out(self) -> list[tuple[Path, str]]:
        return self._checked_out

    @property
    def cloned(self) -> list[tuple[str, Path]]:
        return self._cloned

    def _run(self, operation: str, directory: Path) -> bool:
        self._calls.append((operation, directory))
        return operation not in self._failing.get(directory, set())

    def stash(self, repo_root: Path) -> bool:
        return self._run("stash", repo_root)

    def checkout_branch(self, repo_root: Path, branch: str) -> bool:
        ok = self._run("checkout", repo_root)
        if ok:
            self._checked_out.append((repo_root, branch))
        return ok

    def pull(self, repo_root: Path) -> bool:
        return self._run("pull", repo_root)

    def clone(self, clone_url: str, target: Path) -> bool:
        ok = self._run("clone", target)
        if ok:
            self._cloned.append((clone_url, target))
            if self._create_on_clone:
                (target / ".git").mkdir(parents=True, exist_ok=True)
        return ok
