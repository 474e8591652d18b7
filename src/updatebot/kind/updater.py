"""The Updater capability contract."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from updatebot.model.changes import DependencyVersionChange

# Directories never searched for manifests
IGNORED_DIRECTORIES = frozenset({".git", "node_modules", "target", "vendor", ".venv"})


class UpdaterError(Exception):
    """A manifest could not be read or rewritten.

    Fatal for the (repository, kind) pair being updated; never retried.
    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class Updater(ABC):
    """Applies one version change to the files of a single ecosystem.

    Implementations are stateless singletons shared by the whole run.
    """

    @abstractmethod
    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        """Rewrite declarations of change.dependency under directory.

        Args:
            directory: Root of a local checkout
            change: The version change to apply

        Returns:
            True if at least one file was modified, False if the dependency is
            not declared or already at change.version

        Raises:
            UpdaterError: If a manifest is malformed
        """
        ...


def find_files(directory: Path, names: tuple[str, ...]) -> Iterator[Path]:
    """Yield files under directory whose name matches one of the glob patterns.

    Results are sorted so updates are deterministic.
    """
    matches: set[Path] = set()
    for pattern in names:
        for path in directory.rglob(pattern):
            relative = path.relative_to(directory)
            if path.is_file() and not IGNORED_DIRECTORIES.intersection(relative.parts):
                matches.add(path)
    yield from sorted(matches)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise UpdaterError(path, f"not valid UTF-8: {e}") from e


def write_if_changed(path: Path, original: str, updated: str) -> bool:
    if updated == original:
        return False
    path.write_text(updated, encoding="utf-8")
    return True
