"""Tests for fleet resolution and checkout sync."""

import logging
from dataclasses import replace
from pathlib import Path

import pytest

from updatebot.core.config import Configuration
from updatebot.core.context import UpdateBotContext
from updatebot.core.git.fake import FakeGit
from updatebot.core.github.fake import FakeGitHub
from updatebot.model.repositories import (
    GithubOrganisation,
    GithubRepository,
    GitRepository,
    LocalRepository,
    ProjectCatalog,
)
from updatebot.repository.repositories import (
    clone_or_pull,
    clone_or_pull_repositories,
    find_repositories,
    find_repository,
)


def _github_repo(name: str, default_branch: str | None = "main") -> GithubRepository:
    return GithubRepository(
        name=name,
        clone_url=f"https://github.com/acme/{name}.git",
        owner="acme",
        html_url=f"https://github.com/acme/{name}",
        github_default_branch=default_branch,
    )


ACME = [_github_repo("svc-core"), _github_repo("svc-api"), _github_repo("website")]


def _context(tmp_path: Path, **kwargs) -> UpdateBotContext:
    config = Configuration(work_dir=tmp_path / "work", github_username="updatebot")
    return UpdateBotContext.for_test(config=config, **kwargs)


def test_named_repository_is_not_duplicated_by_filter(tmp_path: Path) -> None:
    """Test that a named repository also matching the filter is added once, first."""
    github = FakeGitHub(repositories={"acme": ACME})
    ctx = _context(tmp_path, github=github)
    catalog = ProjectCatalog(
        organisations=[
            GithubOrganisation(name="acme", includes=("svc-*",), repositories=("svc-core",))
        ]
    )

    repositories = find_repositories(ctx, catalog)

    assert [r.name for r in repositories] == ["svc-core", "svc-api"]
    assert repositories[0].directory == tmp_path / "work" / "github" / "acme" / "svc-core"
    assert github.calls == ["get_repository", "list_repositories"]


def test_same_clone_url_from_git_and_organisation_is_deduplicated(tmp_path: Path) -> None:
    ctx = _context(tmp_path, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(
        organisations=[GithubOrganisation(name="acme", includes=("svc-api",))],
        git=[
            GitRepository(name="api-mirror", clone_url="https://github.com/acme/svc-api.git"),
            GitRepository(name="tooling", clone_url="https://example.com/tooling.git"),
        ],
    )

    repositories = find_repositories(ctx, catalog)

    assert [r.name for r in repositories] == ["svc-api", "tooling"]
    assert repositories[0].github is not None
    assert repositories[1].github is None
    assert repositories[1].directory == tmp_path / "work" / "git" / "tooling"


def test_missing_named_repository_is_skipped(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    ctx = _context(tmp_path, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(
        organisations=[
            GithubOrganisation(name="acme", includes=("website",), repositories=("ghost",))
        ]
    )

    with caplog.at_level(logging.WARNING):
        repositories = find_repositories(ctx, catalog)

    assert [r.name for r in repositories] == ["website"]
    assert "Github repository acme/ghost not found" in caplog.text


def test_failed_organisation_listing_keeps_named_repositories(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    github = FakeGitHub(repositories={"acme": ACME}, failing_owners={"acme"})
    ctx = _context(tmp_path, github=github)
    catalog = ProjectCatalog(
        organisations=[
            GithubOrganisation(name="acme", repositories=("svc-core",)),
            GithubOrganisation(name="other"),
        ],
        git=[GitRepository(name="tooling", clone_url="https://example.com/tooling.git")],
    )

    with caplog.at_level(logging.WARNING):
        repositories = find_repositories(ctx, catalog)

    assert [r.name for r in repositories] == ["svc-core", "tooling"]
    assert "Failed to load organisation: acme" in caplog.text


def test_find_repository_by_name(tmp_path: Path) -> None:
    repositories = [LocalRepository(repo=_github_repo("svc-api"), directory=tmp_path)]

    assert find_repository(repositories, "svc-api") is repositories[0]
    assert find_repository(repositories, "nope") is None


def test_clone_when_checkout_is_missing(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = _context(tmp_path, git=git)
    directory = tmp_path / "work" / "github" / "acme" / "svc-api"
    repository = LocalRepository(repo=_github_repo("svc-api"), directory=directory)

    assert clone_or_pull(ctx, repository)

    assert git.cloned == [("https://github.com/acme/svc-api.git", directory)]
    assert (directory / ".git").is_dir()


def test_existing_checkout_is_stashed_checked_out_and_pulled(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = _context(tmp_path, git=git)
    directory = tmp_path / "svc-api"
    (directory / ".git").mkdir(parents=True)
    repository = LocalRepository(repo=_github_repo("svc-api", "develop"), directory=directory)

    assert clone_or_pull(ctx, repository)

    assert git.calls == [("stash", directory), ("checkout", directory), ("pull", directory)]
    assert git.checked_out == [(directory, "develop")]


def test_plain_git_remote_uses_configured_default_branch(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = _context(tmp_path, git=git)
    ctx = replace(ctx, config=replace(ctx.config, default_branch="trunk"))
    directory = tmp_path / "tooling"
    (directory / ".git").mkdir(parents=True)
    repository = LocalRepository(
        repo=GitRepository(name="tooling", clone_url="https://example.com/tooling.git"),
        directory=directory,
    )

    clone_or_pull(ctx, repository)

    assert git.checked_out == [(directory, "trunk")]


def test_pull_disabled_skips_pull(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = _context(tmp_path, git=git)
    ctx = replace(ctx, config=ctx.config.with_overrides(pull_disabled=True))
    directory = tmp_path / "svc-api"
    (directory / ".git").mkdir(parents=True)

    assert clone_or_pull(ctx, LocalRepository(repo=_github_repo("svc-api"), directory=directory))

    assert [op for op, _ in git.calls] == ["stash", "checkout"]


def test_failed_stash_stops_sync(tmp_path: Path) -> None:
    directory = tmp_path / "svc-api"
    (directory / ".git").mkdir(parents=True)
    git = FakeGit(failing_operations={directory: {"stash"}})
    ctx = _context(tmp_path, git=git)

    repository = LocalRepository(repo=_github_repo("svc-api"), directory=directory)

    assert not clone_or_pull(ctx, repository)

    assert git.calls == [("stash", directory)]


def test_failed_checkout_skips_pull(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    directory = tmp_path / "svc-api"
    (directory / ".git").mkdir(parents=True)
    git = FakeGit(failing_operations={directory: {"checkout"}})
    ctx = _context(tmp_path, git=git)
    repository = LocalRepository(repo=_github_repo("svc-api"), directory=directory)

    with caplog.at_level(logging.WARNING):
        assert not clone_or_pull(ctx, repository)

    assert git.calls == [("stash", directory), ("checkout", directory)]
    assert git.checked_out == []
    assert f"Failed to checkout main in {directory}" in caplog.text


def test_failed_pull_reports_not_ready(tmp_path: Path) -> None:
    directory = tmp_path / "svc-api"
    (directory / ".git").mkdir(parents=True)
    git = FakeGit(failing_operations={directory: {"pull"}})
    ctx = _context(tmp_path, git=git)
    repository = LocalRepository(repo=_github_repo("svc-api"), directory=directory)

    assert not clone_or_pull(ctx, repository)

    assert [op for op, _ in git.calls] == ["stash", "checkout", "pull"]


def test_unwritable_work_directory_fails_clone(tmp_path: Path) -> None:
    (tmp_path / "blocked").write_text("not a directory", encoding="utf-8")
    git = FakeGit()
    ctx = _context(tmp_path, git=git)
    directory = tmp_path / "blocked" / "svc-api"
    repository = LocalRepository(repo=_github_repo("svc-api"), directory=directory)

    assert not clone_or_pull(ctx, repository)

    assert git.calls == []


def test_clone_or_pull_repositories_drops_failed_checkouts(tmp_path: Path) -> None:
    failing_dir = tmp_path / "work" / "github" / "acme" / "svc-core"
    git = FakeGit(failing_operations={failing_dir: {"clone"}})
    ctx = _context(tmp_path, git=git, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(organisations=[GithubOrganisation(name="acme", includes=("svc-*",))])

    ready = clone_or_pull_repositories(ctx, catalog)

    assert [r.name for r in ready] == ["svc-api"]
    assert len(git.calls) == 2


def test_failed_pull_does_not_stop_the_fleet(tmp_path: Path) -> None:
    """Test that a sync failure in one checkout still syncs the rest of the fleet."""
    acme = tmp_path / "work" / "github" / "acme"
    for name in ("svc-core", "svc-api"):
        (acme / name / ".git").mkdir(parents=True)
    git = FakeGit(failing_operations={acme / "svc-core": {"pull"}})
    ctx = _context(tmp_path, git=git, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(organisations=[GithubOrganisation(name="acme", includes=("svc-*",))])

    ready = clone_or_pull_repositories(ctx, catalog)

    assert [r.name for r in ready] == ["svc-api"]
    assert git.calls[3:] == [
        ("stash", acme / "svc-api"),
        ("checkout", acme / "svc-api"),
        ("pull", acme / "svc-api"),
    ]


def test_clone_or_pull_repositories_filters_by_name(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = _context(tmp_path, git=git, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(organisations=[GithubOrganisation(name="acme")])

    ready = clone_or_pull_repositories(ctx, catalog, "website")

    assert [r.name for r in ready] == ["website"]
    assert [target.name for _, target in git.cloned] == ["website"]


def test_clone_or_pull_repositories_unknown_name(tmp_path: Path) -> None:
    ctx = _context(tmp_path, github=FakeGitHub(repositories={"acme": ACME}))
    catalog = ProjectCatalog(organisations=[GithubOrganisation(name="acme")])

    with pytest.raises(ValueError, match="Repository nope is not part of the fleet"):
        clone_or_pull_repositories(ctx, catalog, "nope")
