import logging
import os
from dataclasses import replace
from pathlib import Path

import click

from updatebot.cli.commands.pull import pull_cmd
from updatebot.cli.commands.push import push_cmd
from updatebot.cli.error_boundary import cli_error_boundary
from updatebot.core.config import FilesystemConfigOps
from updatebot.core.context import UpdateBotContext, create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "UPDATEBOT_DEBUG"


def configure_logging(verbose: bool) -> None:
    """Warnings always reach the terminal; -v or UPDATEBOT_DEBUG shows everything."""
    level = logging.DEBUG if verbose or os.getenv(DEBUG_ENV_VAR) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(package_name="updatebot")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: ~/.updatebot/config.toml).",
)
@click.option(
    "--projects",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Project catalog YAML (default: ./.updatebot.yml).",
)
@click.option(
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding repository checkouts.",
)
@click.option("--no-pull", is_flag=True, help="Do not git pull existing checkouts.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
@cli_error_boundary
def cli(
    ctx: click.Context,
    config_path: Path | None,
    catalog_path: Path | None,
    work_dir: Path | None,
    no_pull: bool,
    verbose: bool,
) -> None:
    """Propagate dependency version changes across a fleet of repositories."""
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return
    if ctx.invoked_subcommand == "help":
        return

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(
            config_ops=FilesystemConfigOps(config_path) if config_path else None,
            catalog_path=catalog_path,
        )
    elif catalog_path is not None:
        ctx.obj = replace(ctx.obj, catalog_path=catalog_path)

    app: UpdateBotContext = ctx.obj
    config = app.config.with_overrides(work_dir=work_dir, pull_disabled=True if no_pull else None)
    if config != app.config:
        ctx.obj = replace(app, config=config)


@click.command("help")
@click.argument("command_name", required=False)
@click.pass_context
def help_cmd(ctx: click.Context, command_name: str | None) -> None:
    """Show help for updatebot or one of its commands."""
    group_ctx = ctx.parent
    assert group_ctx is not None
    if command_name is None:
        click.echo(group_ctx.get_help())
        return

    command = cli.get_command(group_ctx, command_name)
    if command is None:
        raise click.UsageError(f"No such command '{command_name}'.", ctx=group_ctx)
    with click.Context(command, info_name=command_name, parent=group_ctx) as sub_ctx:
        click.echo(command.get_help(sub_ctx))


cli.add_command(push_cmd)
cli.add_command(pull_cmd)
cli.add_command(help_cmd)


def main() -> None:
    """CLI entry point used by the `updatebot` console script."""
    cli()
