"""Helpers shared by the push and pull commands."""

import logging

from updatebot.cli.output import print_summary, user_output
from updatebot.core.context import UpdateBotContext
from updatebot.core.propagation import RepositoryUpdate, propagate_to_fleet
from updatebot.model.catalog import load_catalog
from updatebot.model.changes import DependencyVersionChange
from updatebot.repository.repositories import clone_or_pull_repositories

logger = logging.getLogger(__name__)


def run_fleet(
    ctx: UpdateBotContext,
    changes: list[DependencyVersionChange],
    description: str,
    repo_name: str | None,
) -> list[RepositoryUpdate]:
    """Resolve and sync the fleet, then propagate changes into it.

    Exits with status 1 if any repository reported an error.
    """
    catalog = load_catalog(ctx.catalog_path)
    repositories = clone_or_pull_repositories(ctx, catalog, repo_name)
    user_output(f"Updating {len(repositories)} repositor{'y' if len(repositories) == 1 else 'ies'}")
    logger.debug("Fleet: %s", [r.name for r in repositories])

    results = propagate_to_fleet(ctx, repositories, changes, description)
    print_summary(results)

    if any(not result.ok for result in results):
        raise SystemExit(1)
    return results
