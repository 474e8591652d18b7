"""The pull command: retry pending changes recorded in coordinating issues."""

import click

from updatebot.cli.commands.shared import run_fleet
from updatebot.cli.error_boundary import cli_error_boundary
from updatebot.core.context import UpdateBotContext


@click.command("pull")
@click.option("--repo", "repo_name", help="Only update the repository with this name.")
@click.pass_obj
@cli_error_boundary
def pull_cmd(ctx: UpdateBotContext, repo_name: str | None) -> None:
    """Re-apply the pending changes of every repository in the fleet.

    Coordinating issues whose changes all apply cleanly are closed.
    """
    run_fleet(ctx, [], "pulling pending changes", repo_name)
