"""Production Git implementation using subprocess."""

import logging
import subprocess
from pathlib import Path

from updatebot.core.git.abc import Git
from updatebot.core.subprocess import run_command_ignore_output

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def stash(self, repo_root: Path) -> bool:
        return run_command_ignore_output(["git", "stash"], repo_root) == 0

    def checkout_branch(self, repo_root: Path, branch: str) -> bool:
        return run_command_ignore_output(["git", "checkout", branch], repo_root) == 0

    def pull(self, repo_root: Path) -> bool:
        return run_command_ignore_output(["git", "pull"], repo_root) == 0

    def clone(self, clone_url: str, target: Path) -> bool:
        cmd = ["git", "clone", clone_url, target.name]
        try:
            # No capture: clone progress goes straight to the terminal
            result = subprocess.run(cmd, cwd=target.parent, check=False)
        except FileNotFoundError:
            logger.warning("git executable not found while cloning %s", clone_url)
            return False
        return result.returncode == 0
