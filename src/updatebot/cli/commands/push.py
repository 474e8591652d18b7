"""The push command: push new dependency versions into the fleet."""

import click

from updatebot.cli.commands.shared import run_fleet
from updatebot.cli.error_boundary import cli_error_boundary
from updatebot.core.context import UpdateBotContext
from updatebot.kind.kinds import Kind
from updatebot.model.changes import DependencyVersionChange

KIND_CHOICE = click.Choice([kind.value for kind in Kind], case_sensitive=False)


def parse_change_option(value: str) -> DependencyVersionChange:
    """Parse a `--change "KIND DEPENDENCY VERSION [SCOPE]"` value.

    Raises:
        click.BadParameter: If the value is incomplete or names an unknown kind
    """
    words = value.split()
    if len(words) < 3:
        msg = f"expected 'KIND DEPENDENCY VERSION [SCOPE]', got {value!r}"
        raise click.BadParameter(msg, param_hint="--change")
    kind = Kind.from_name(words[0])
    if kind is None:
        choices = ", ".join(k.value for k in Kind)
        msg = f"unknown kind {words[0]!r} (expected one of: {choices})"
        raise click.BadParameter(msg, param_hint="--change")
    scope = words[3] if len(words) > 3 else None
    return DependencyVersionChange(kind=kind, dependency=words[1], version=words[2], scope=scope)


def describe_push(changes: list[DependencyVersionChange]) -> str:
    return "pushing " + ", ".join(str(change) for change in changes)


@click.command("push")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("dependency")
@click.argument("version")
@click.option("--scope", help="Ecosystem specific scope, e.g. dev or test.")
@click.option(
    "--change",
    "extra_changes",
    multiple=True,
    metavar="'KIND DEPENDENCY VERSION [SCOPE]'",
    help="Additional change to push; may be repeated.",
)
@click.option("--repo", "repo_name", help="Only update the repository with this name.")
@click.pass_obj
@cli_error_boundary
def push_cmd(
    ctx: UpdateBotContext,
    kind: str,
    dependency: str,
    version: str,
    scope: str | None,
    extra_changes: tuple[str, ...],
    repo_name: str | None,
) -> None:
    """Push a new dependency VERSION into every repository of the fleet.

    Pending changes recorded in each repository's coordinating issue are
    retried alongside the pushed ones. Anything that cannot be applied is
    recorded back on the issue.
    """
    resolved_kind = Kind.from_name(kind)
    assert resolved_kind is not None  # guaranteed by KIND_CHOICE
    changes = [
        DependencyVersionChange(
            kind=resolved_kind, dependency=dependency, version=version, scope=scope
        )
    ]
    changes.extend(parse_change_option(value) for value in extra_changes)

    run_fleet(ctx, changes, describe_push(changes), repo_name)
