"""Tests for the top-level command group."""

from pathlib import Path

from click.testing import CliRunner

from updatebot.cli.cli import cli
from updatebot.cli.error_boundary import format_error_chain
from updatebot.core.context import UpdateBotContext
from updatebot.core.git.fake import FakeGit


def test_no_subcommand_prints_help() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, [])

    assert result.exit_code == 0
    assert "push" in result.output
    assert "pull" in result.output


def test_help_command_shows_subcommand_help() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["help", "push"])

    assert result.exit_code == 0
    assert "Push a new dependency VERSION" in result.output


def test_help_command_unknown_name() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["help", "nope"])

    assert result.exit_code == 2
    assert "No such command 'nope'" in result.output


def test_missing_catalog_is_reported() -> None:
    runner = CliRunner()
    ctx = UpdateBotContext.for_test()

    result = runner.invoke(cli, ["pull"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Project catalog not found at /test/default/cwd/.updatebot.yml" in result.output


def test_malformed_config_shows_cause(tmp_path: Path) -> None:
    """Test that the error boundary prints the chained cause of a failure."""
    config_path = tmp_path / "config.toml"
    config_path.write_text("work_dir = [unterminated", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["--config", str(config_path), "pull"])

    assert result.exit_code == 1
    assert "Error: Malformed config file" in result.output
    assert "Caused by:" in result.output


def test_work_dir_override(fleet, tmp_path: Path) -> None:
    runner = CliRunner()
    git = FakeGit()
    ctx = fleet.context(git=git, github=fleet.github())
    elsewhere = tmp_path / "elsewhere"

    result = runner.invoke(
        cli,
        ["--projects", str(fleet.catalog_path), "--work-dir", str(elsewhere), "pull"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert git.cloned == [
        ("https://github.com/acme/app.git", elsewhere.resolve() / "github" / "acme" / "app")
    ]


def test_format_error_chain() -> None:
    try:
        try:
            raise KeyError("inner")
        except KeyError as e:
            raise RuntimeError("outer") from e
    except RuntimeError as error:
        lines = format_error_chain(error)

    assert lines == ["Error: outer", "Caused by: 'inner'"]
