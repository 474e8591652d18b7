"""Git operations subpackage.

Abstractions over the git subprocess calls used to keep fleet checkouts fresh,
with a fake for tests.
"""

from updatebot.core.git.abc import Git
from updatebot.core.git.fake import FakeGit
from updatebot.core.git.real import RealGit

__all__ = ["FakeGit", "Git", "RealGit"]
