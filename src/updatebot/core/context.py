"""Application context with dependency injection."""

import logging
from dataclasses import dataclass
from pathlib import Path

from updatebot.core.config import Configuration, ConfigOps, FilesystemConfigOps
from updatebot.core.git.abc import Git
from updatebot.core.git.real import RealGit
from updatebot.core.github.abc import GitHub
from updatebot.core.github.real import RealGitHub
from updatebot.core.github.retrying import RetryingGitHub
from updatebot.core.time.abc import Time
from updatebot.core.time.real import RealTime
from updatebot.model.catalog import DEFAULT_CATALOG_FILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateBotContext:
    """Immutable context holding all dependencies for updatebot operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    github is always the retrying wrapper in production, so every API call
    made through the context is shielded from transient failures.
    """

    git: Git
    github: GitHub
    time: Time
    config: Configuration
    cwd: Path
    catalog_path: Path

    def bot_username(self) -> str | None:
        """Identity whose ledger comments are authoritative.

        The configured username wins; otherwise the login gh is authenticated as.
        """
        if self.config.github_username:
            return self.config.github_username
        return self.github.get_current_username()

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        time: Time | None = None,
        config: Configuration | None = None,
        cwd: Path | None = None,
        catalog_path: Path | None = None,
    ) -> "UpdateBotContext":
        """Create test context with optional pre-configured integration classes.

        Any unspecified dependency is replaced by its fake. The github fake is
        wrapped in RetryingGitHub (with FakeTime) exactly as in production.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            github: Optional GitHub implementation. If None, creates empty FakeGitHub.
            time: Optional Time implementation. If None, creates FakeTime.
            config: Optional Configuration. If None, uses defaults with
                github_username "updatebot" and work_dir /test/work.
            cwd: Optional current working directory.
            catalog_path: Optional project catalog path.
        """
        from updatebot.core.git.fake import FakeGit
        from updatebot.core.github.fake import FakeGitHub
        from updatebot.core.time.fake import FakeTime

        resolved_time = time if time is not None else FakeTime()
        resolved_config = (
            config
            if config is not None
            else Configuration(work_dir=Path("/test/work"), github_username="updatebot")
        )
        resolved_github = github if github is not None else FakeGitHub()
        resolved_cwd = cwd if cwd is not None else Path("/test/default/cwd")

        return UpdateBotContext(
            git=git if git is not None else FakeGit(),
            github=RetryingGitHub(resolved_github, resolved_time, resolved_config.retry),
            time=resolved_time,
            config=resolved_config,
            cwd=resolved_cwd,
            catalog_path=(
                catalog_path if catalog_path is not None else resolved_cwd / DEFAULT_CATALOG_FILE
            ),
        )


def create_context(
    *,
    config_ops: ConfigOps | None = None,
    catalog_path: Path | None = None,
) -> UpdateBotContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ValueError: If the configuration file is malformed
    """
    ops = config_ops if config_ops is not None else FilesystemConfigOps()
    if ops.exists():
        config = ops.load()
    else:
        logger.debug("No config file at %s, using defaults", ops.path())
        config = Configuration()
    time = RealTime()
    cwd = Path.cwd()

    return UpdateBotContext(
        git=RealGit(),
        github=RetryingGitHub(RealGitHub(), time, config.retry),
        time=time,
        config=config,
        cwd=cwd,
        catalog_path=catalog_path if catalog_path is not None else cwd / DEFAULT_CATALOG_FILE,
    )
