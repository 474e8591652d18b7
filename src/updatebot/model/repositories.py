"""Repository descriptors and the declarative project catalog."""

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path


@dataclass(frozen=True)
class GitRepository:
    """A git remote the fleet operates on."""

    name: str
    clone_url: str

    @property
    def default_branch(self) -> str | None:
        """Default branch if the hosting platform told us, else None."""
        return None


@dataclass(frozen=True)
class GithubRepository(GitRepository):
    """A repository discovered on GitHub, with its platform metadata."""

    owner: str = ""
    visibility: str | None = None
    html_url: str | None = None
    github_default_branch: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def default_branch(self) -> str | None:
        return self.github_default_branch


@dataclass
class LocalRepository:
    """A fleet repository bound to its checkout directory.

    The directory persists across runs and is reused; sync and updaters
    mutate its contents in place.
    """

    repo: GitRepository
    directory: Path

    @property
    def name(self) -> str:
        return self.repo.name

    @property
    def clone_url(self) -> str:
        return self.repo.clone_url

    @property
    def github(self) -> GithubRepository | None:
        """The GitHub descriptor, or None for a plain git remote."""
        if isinstance(self.repo, GithubRepository):
            return self.repo
        return None


@dataclass(frozen=True)
class GithubOrganisation:
    """An organisation (or user) whose repositories join the fleet.

    Fields:
        name: Organisation or user login
        includes: Glob patterns a repository name must match (empty = all)
        excludes: Glob patterns that remove a repository from the fleet
        repositories: Repositories to fetch individually by name
    """

    name: str
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    repositories: tuple[str, ...] = ()

    def matches(self, repository_name: str) -> bool:
        """Organisation filter: included and not excluded."""
        if self.includes and not any(fnmatch(repository_name, p) for p in self.includes):
            return False
        return not any(fnmatch(repository_name, p) for p in self.excludes)


@dataclass(frozen=True)
class ProjectCatalog:
    """Declarative description of the fleet."""

    git: list[GitRepository] = field(default_factory=list)
    organisations: list[GithubOrganisation] = field(default_factory=list)
