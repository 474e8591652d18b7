"""Resolve the fleet of repositories and keep their checkouts fresh.

Work directory layout:

    <work_dir>/github/<organisation>/<repository>
    <work_dir>/git/<repository>

Failures are isolated per repository (and per organisation when listing):
they are logged and the rest of the fleet carries on.
"""

import logging
from pathlib import Path

from updatebot.core.context import UpdateBotContext
from updatebot.model.repositories import (
    GithubOrganisation,
    GitRepository,
    LocalRepository,
    ProjectCatalog,
)

logger = logging.getLogger(__name__)


def add_repository(
    repositories: dict[str, LocalRepository], parent_dir: Path, repo: GitRepository
) -> None:
    """Insert repo under parent_dir unless its clone URL is already present."""
    local = LocalRepository(repo=repo, directory=parent_dir / repo.name)
    repositories.setdefault(local.clone_url, local)


def add_github_repositories(
    ctx: UpdateBotContext,
    repositories: dict[str, LocalRepository],
    organisation: GithubOrganisation,
    org_dir: Path,
) -> None:
    """Add an organisation's named repositories, then its filtered listing."""
    org_name = organisation.name
    found_names: set[str] = set()

    for name in organisation.repositories:
        if not name or name in found_names:
            continue
        found_names.add(name)
        try:
            repo = ctx.github.get_repository(org_name, name)
        except (RuntimeError, OSError) as e:
            logger.warning("Github repository %s/%s not found: %s", org_name, name, e)
            continue
        add_repository(repositories, org_dir, repo)

    try:
        listing = ctx.github.list_repositories(org_name)
    except (RuntimeError, OSError) as e:
        logger.warning("Failed to load organisation: %s. %s", org_name, e)
        return

    for repo in listing:
        if organisation.matches(repo.name) and repo.name not in found_names:
            found_names.add(repo.name)
            add_repository(repositories, org_dir, repo)


def find_repositories(ctx: UpdateBotContext, catalog: ProjectCatalog) -> list[LocalRepository]:
    """Resolve the catalog into an ordered, clone-URL-deduplicated fleet.

    Order: per organisation (catalog order) named then filtered repositories,
    followed by the explicit git remotes.
    """
    work_dir = ctx.config.work_dir
    work_dir.mkdir(parents=True, exist_ok=True)

    repositories: dict[str, LocalRepository] = {}
    github_dir = work_dir / "github"
    git_dir = work_dir / "git"

    for organisation in catalog.organisations:
        add_github_repositories(ctx, repositories, organisation, github_dir / organisation.name)

    for repo in catalog.git:
        add_repository(repositories, git_dir, repo)

    return list(repositories.values())


def find_repository(repositories: list[LocalRepository], name: str) -> LocalRepository | None:
    """Return the repository with the given name, or None if it is not in the fleet."""
    for repository in repositories:
        if repository.name == name:
            return repository
    return None


def clone_or_pull(ctx: UpdateBotContext, repository: LocalRepository) -> bool:
    """Bring one checkout up to date.

    An existing checkout is stashed, switched to the default branch and
    (unless pulling is disabled) pulled; each step only runs if the previous
    one succeeded. A missing checkout is cloned.

    Returns:
        True if the checkout is ready for updating, False if a step failed
    """
    directory = repository.directory
    if (directory / ".git").exists():
        branch = repository.repo.default_branch or ctx.config.default_branch
        if not ctx.git.stash(directory):
            logger.warning("Failed to stash local changes in %s", directory)
            return False
        if not ctx.git.checkout_branch(directory, branch):
            logger.warning("Failed to checkout %s in %s", branch, directory)
            return False
        if ctx.config.pull_disabled:
            return True
        logger.info("Pulling: %s repo: %s", directory, repository.clone_url)
        if not ctx.git.pull(directory):
            logger.warning("Failed to pull %s in %s", repository.clone_url, directory)
            return False
        return True

    try:
        directory.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Failed to create %s: %s", directory.parent, e)
        return False

    logger.info("Cloning: %s repo: %s", directory, repository.clone_url)
    if not ctx.git.clone(repository.clone_url, directory):
        logger.warning("Failed to clone %s into %s", repository.clone_url, directory)
        return False
    return True


def clone_or_pull_repositories(
    ctx: UpdateBotContext, catalog: ProjectCatalog, name: str | None = None
) -> list[LocalRepository]:
    """Resolve the fleet and sync every checkout.

    Args:
        ctx: Application context
        catalog: Declarative fleet description
        name: Restrict the run to the repository with this name

    Returns:
        The repositories whose checkout is ready, in fleet order

    Raises:
        ValueError: If name is given but not part of the fleet
    """
    repositories = find_repositories(ctx, catalog)
    if name is not None:
        repository = find_repository(repositories, name)
        if repository is None:
            msg = f"Repository {name} is not part of the fleet"
            raise ValueError(msg)
        repositories = [repository]

    return [repository for repository in repositories if clone_or_pull(ctx, repository)]
