"""Apply version changes to fleet checkouts, deferring failures to the ledger.

For every repository the pending set stored in its coordinating issue is
merged with the incoming changes and applied. Changes that could not be
applied become the new pending set; once nothing is pending the issue is
closed.

A change whose manifest is malformed (UpdaterError) or cannot be written
(OSError) is reported as an error for this run and is not retried within
it. It is still recorded as pending, so the next push or pull replays it
once the manifest has been fixed; it stays on the issue until then.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from updatebot.core.context import UpdateBotContext
from updatebot.github.issues import ConflictLedger, issue_title_prefix
from updatebot.kind.registry import updater_for
from updatebot.kind.updater import UpdaterError
from updatebot.model.changes import DependencyVersionChange, merge_changes
from updatebot.model.repositories import LocalRepository

logger = logging.getLogger(__name__)


@dataclass
class RepositoryUpdate:
    """Outcome of propagating changes into one repository."""

    repository: LocalRepository
    modified: list[DependencyVersionChange] = field(default_factory=list)
    unchanged: list[DependencyVersionChange] = field(default_factory=list)
    pending: list[DependencyVersionChange] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def apply_changes(
    directory: Path, changes: list[DependencyVersionChange], result: RepositoryUpdate
) -> None:
    """Apply changes in order, filling result.

    An UpdaterError or OSError is fatal for its (repository, kind) pair:
    the failing change and every later change of the same kind become pending.
    """
    failed_kinds = set()
    for change in changes:
        if change.kind in failed_kinds:
            result.pending.append(change)
            continue
        try:
            modified = updater_for(change.kind).apply(directory, change)
        except (UpdaterError, OSError) as e:
            logger.error("Failed to apply %s in %s: %s", change, directory, e)
            failed_kinds.add(change.kind)
            result.pending.append(change)
            result.errors.append(str(e))
            continue
        if modified:
            result.modified.append(change)
        else:
            result.unchanged.append(change)


def ledger_for(
    ctx: UpdateBotContext, repository: LocalRepository, username: str | None
) -> ConflictLedger | None:
    """The coordinating issue ledger of a GitHub repository; None for plain git remotes."""
    github_repo = repository.github
    if github_repo is None:
        return None
    return ConflictLedger(
        github=ctx.github,
        repo=github_repo.full_name,
        title_prefix=issue_title_prefix(ctx.config.issue_title_prefix, repository),
        label=ctx.config.github_label,
        username=username,
    )


def propagate(
    ctx: UpdateBotContext,
    repository: LocalRepository,
    changes: list[DependencyVersionChange],
    description: str,
    username: str | None,
) -> RepositoryUpdate:
    """Apply pending and new changes to one repository and update its ledger.

    API failures (after retries) are recorded on the result instead of
    raised, so the caller can carry on with the rest of the fleet.
    """
    result = RepositoryUpdate(repository=repository)
    ledger = ledger_for(ctx, repository, username)

    previous: list[DependencyVersionChange] = []
    if ledger is not None:
        try:
            previous = ledger.pending_changes()
        except (RuntimeError, OSError) as e:
            logger.warning("Failed to read pending changes of %s: %s", repository.name, e)
            result.errors.append(str(e))
            return result

    apply_changes(repository.directory, merge_changes(previous, changes), result)

    if ledger is None:
        if result.pending:
            logger.warning(
                "Cannot record %d pending change(s) for %s: not a GitHub repository",
                len(result.pending),
                repository.name,
            )
        return result

    try:
        if result.pending:
            if set(result.pending) != set(previous):
                ledger.record(result.pending, description)
        elif previous:
            ledger.resolve(description)
    except (RuntimeError, OSError) as e:
        logger.warning("Failed to update coordinating issue of %s: %s", repository.name, e)
        result.errors.append(str(e))

    return result


def propagate_to_fleet(
    ctx: UpdateBotContext,
    repositories: list[LocalRepository],
    changes: list[DependencyVersionChange],
    description: str,
) -> list[RepositoryUpdate]:
    """Propagate changes into every repository sequentially."""
    username = ctx.bot_username()
    if username is None:
        logger.warning("No GitHub username configured or authenticated; ignoring ledger comments")
    return [
        propagate(ctx, repository, changes, description, username) for repository in repositories
    ]
