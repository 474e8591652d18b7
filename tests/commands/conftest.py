"""Shared fixtures for CLI command tests."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from updatebot.core.config import Configuration
from updatebot.core.context import UpdateBotContext
from updatebot.core.git.fake import FakeGit
from updatebot.core.github.fake import FakeGitHub
from updatebot.model.repositories import GithubRepository

CATALOG = """\
github:
  organisations:
    - name: acme
      includes: ["app"]
"""

APP = GithubRepository(
    name="app",
    clone_url="https://github.com/acme/app.git",
    owner="acme",
    github_default_branch="main",
)


@dataclass
class FleetEnv:
    """A one-repository fleet with an existing checkout of acme/app."""

    catalog_path: Path
    work_dir: Path
    checkout: Path

    def package_json(self) -> dict:
        return json.loads((self.checkout / "package.json").read_text(encoding="utf-8"))

    def write_package_json(self, text: str) -> None:
        (self.checkout / "package.json").write_text(text, encoding="utf-8")

    def github(self, **kwargs: Any) -> FakeGitHub:
        """FakeGitHub knowing acme/app; kwargs are passed through."""
        return FakeGitHub(repositories={"acme": [APP]}, **kwargs)

    def context(self, *, git: FakeGit, github: FakeGitHub) -> UpdateBotContext:
        config = Configuration(work_dir=self.work_dir, github_username="updatebot")
        return UpdateBotContext.for_test(git=git, github=github, config=config)


@pytest.fixture
def fleet(tmp_path: Path) -> FleetEnv:
    catalog_path = tmp_path / ".updatebot.yml"
    catalog_path.write_text(CATALOG, encoding="utf-8")
    work_dir = tmp_path / "work"
    checkout = work_dir / "github" / "acme" / "app"
    (checkout / ".git").mkdir(parents=True)
    env = FleetEnv(catalog_path=catalog_path, work_dir=work_dir, checkout=checkout)
    env.write_package_json(json.dumps({"dependencies": {"left-pad": "^1.0.0"}}, indent=2) + "\n")
    return env
