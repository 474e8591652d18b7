"""Configuration data structures and loading.

Provides immutable configuration loaded from ~/.updatebot/config.toml
(or the file named by UPDATEBOT_CONFIG / --config) once at the CLI entry point.

Example config.toml:

    work_dir = "~/.updatebot/repositories"
    github_username = "my-bot"
    github_label = "updatebot"
    pull_disabled = false

    [retry]
    max_attempts = 5
    base_delay = 2.0
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from updatebot.core.retry import RetryPolicy

CONFIG_ENV_VAR = "UPDATEBOT_CONFIG"
DEFAULT_LABEL = "updatebot"
DEFAULT_ISSUE_TITLE_PREFIX = "updatebot pending changes for"
DEFAULT_BRANCH = "master"


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".updatebot" / "config.toml"


def default_work_dir() -> Path:
    return Path.home() / ".updatebot" / "repositories"


@dataclass(frozen=True)
class Configuration:
    """Immutable configuration data.

    Loaded once at CLI entry point and stored in UpdateBotContext.

    Fields:
        work_dir: Root of the persistent checkout directories
        github_username: Bot identity whose ledger comments are authoritative
            (None means "whoever gh is authenticated as")
        github_label: Label carried by coordinating issues
        issue_title_prefix: Leading words of every coordinating issue title
        pull_disabled: Skip `git pull` when refreshing existing checkouts
        default_branch: Branch to check out when GitHub does not report one
        retry: Retry policy applied to every GitHub call
    """

    work_dir: Path = field(default_factory=default_work_dir)
    github_username: str | None = None
    github_label: str = DEFAULT_LABEL
    issue_title_prefix: str = DEFAULT_ISSUE_TITLE_PREFIX
    pull_disabled: bool = False
    default_branch: str = DEFAULT_BRANCH
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def with_overrides(
        self,
        *,
        work_dir: Path | None = None,
        pull_disabled: bool | None = None,
    ) -> "Configuration":
        """Return a copy with command-line overrides applied."""
        updated = self
        if work_dir is not None:
            updated = replace(updated, work_dir=work_dir.expanduser().resolve())
        if pull_disabled is not None:
            updated = replace(updated, pull_disabled=pull_disabled)
        return updated


def _expect(data: dict[str, Any], key: str, kind: type, path: Path) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        msg = f"'{key}' in {path} must be a {kind.__name__}, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def _parse_retry(data: Any, path: Path) -> RetryPolicy:
    if data is None:
        return RetryPolicy()
    if not isinstance(data, dict):
        msg = f"[retry] in {path} must be a table"
        raise ValueError(msg)
    defaults = RetryPolicy()
    return RetryPolicy(
        max_attempts=int(data.get("max_attempts", defaults.max_attempts)),
        base_delay=float(data.get("base_delay", defaults.base_delay)),
        backoff_factor=float(data.get("backoff_factor", defaults.backoff_factor)),
    )


def parse_config(data: dict[str, Any], path: Path) -> Configuration:
    """Build a Configuration from a parsed TOML document.

    Raises:
        ValueError: If a field has the wrong type
    """
    work_dir = _expect(data, "work_dir", str, path)
    return Configuration(
        work_dir=Path(work_dir).expanduser().resolve() if work_dir else default_work_dir(),
        github_username=_expect(data, "github_username", str, path) or None,
        github_label=_expect(data, "github_label", str, path) or DEFAULT_LABEL,
        issue_title_prefix=(
            _expect(data, "issue_title_prefix", str, path) or DEFAULT_ISSUE_TITLE_PREFIX
        ),
        pull_disabled=bool(_expect(data, "pull_disabled", bool, path)),
        default_branch=_expect(data, "default_branch", str, path) or DEFAULT_BRANCH,
        retry=_parse_retry(data.get("retry"), path),
    )


class ConfigOps(ABC):
    """Abstract interface for configuration access.

    Enables in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if the config exists."""
        ...

    @abstractmethod
    def load(self) -> Configuration:
        """Load the config, falling back to defaults when it does not exist.

        Raises:
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Path of the config file (for error messages and debugging)."""
        ...


class FilesystemConfigOps(ConfigOps):
    """Production implementation that reads a TOML file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> Configuration:
        config_path = self.path()
        if not config_path.exists():
            return Configuration()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            msg = f"Malformed config file {config_path}: {e}"
            raise ValueError(msg) from e
        return parse_config(data, config_path)

    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return default_config_path()


class InMemoryConfigOps(ConfigOps):
    """Test implementation that stores config in memory."""

    def __init__(self, config: Configuration | None = None) -> None:
        """Initialize in-memory config ops.

        Args:
            config: Config to return (None = config doesn't exist, defaults apply)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> Configuration:
        if self._config is None:
            return Configuration()
        return self._config

    def path(self) -> Path:
        return Path("/fake/updatebot/config.toml")
