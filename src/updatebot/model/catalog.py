"""Load the project catalog from a YAML file.

Example `.updatebot.yml`:

    github:
      organisations:
        - name: acme
          includes: ["svc-*"]
          repositories:
            - name: svc-core
    git:
      - name: tooling
        cloneUrl: https://example.com/tooling.git
"""

from pathlib import Path
from typing import Any

import yaml

from updatebot.model.repositories import GithubOrganisation, GitRepository, ProjectCatalog

DEFAULT_CATALOG_FILE = ".updatebot.yml"


def _as_list(value: Any, where: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"Expected a list for '{where}', got {type(value).__name__}"
        raise ValueError(msg)
    return value


def _patterns(value: Any, where: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in _as_list(value, where))


def _parse_organisation(data: Any) -> GithubOrganisation:
    if not isinstance(data, dict) or not data.get("name"):
        msg = f"Organisation entry must be a mapping with a 'name': {data!r}"
        raise ValueError(msg)

    name = str(data["name"])
    named: list[str] = []
    for entry in _as_list(data.get("repositories"), f"{name}.repositories"):
        # Entries may be bare names or mappings with a name
        repo_name = entry.get("name") if isinstance(entry, dict) else entry
        if repo_name:
            named.append(str(repo_name))

    return GithubOrganisation(
        name=name,
        includes=_patterns(data.get("includes"), f"{name}.includes"),
        excludes=_patterns(data.get("excludes"), f"{name}.excludes"),
        repositories=tuple(named),
    )


def _parse_git_repository(data: Any) -> GitRepository:
    if not isinstance(data, dict):
        msg = f"Git entry must be a mapping: {data!r}"
        raise ValueError(msg)
    clone_url = data.get("cloneUrl") or data.get("clone_url")
    if not clone_url:
        msg = f"Git entry is missing 'cloneUrl': {data!r}"
        raise ValueError(msg)
    name = data.get("name") or _name_from_url(str(clone_url))
    return GitRepository(name=str(name), clone_url=str(clone_url))


def _name_from_url(clone_url: str) -> str:
    """Derive a repository name from its clone URL ("a/b/repo.git" -> "repo")."""
    last = clone_url.rstrip("/").rsplit("/", 1)[-1]
    last = last.rsplit(":", 1)[-1]
    return last.removesuffix(".git")


def parse_catalog(data: Any) -> ProjectCatalog:
    """Build a ProjectCatalog from already-deserialized YAML data."""
    if data is None:
        return ProjectCatalog()
    if not isinstance(data, dict):
        msg = f"Project catalog must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)

    github = data.get("github") or {}
    if not isinstance(github, dict):
        raise ValueError("'github' must be a mapping")

    organisations = [
        _parse_organisation(org)
        for org in _as_list(github.get("organisations"), "github.organisations")
    ]
    git = [_parse_git_repository(repo) for repo in _as_list(data.get("git"), "git")]
    return ProjectCatalog(git=git, organisations=organisations)


def load_catalog(path: Path) -> ProjectCatalog:
    """Load a ProjectCatalog from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML is malformed or has the wrong shape
    """
    if not path.exists():
        msg = f"Project catalog not found at {path}"
        raise FileNotFoundError(msg)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        msg = f"Failed to parse project catalog {path}: {e}"
        raise ValueError(msg) from e
    return parse_catalog(data)
