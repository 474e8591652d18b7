"""Updater for Dockerfile base images."""

import re
from pathlib import Path

from updatebot.kind.updater import Updater, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange

# FROM [--platform=...] image[:tag][@digest] [AS name]
_FROM_LINE = re.compile(
    r"^(?P<lead>\s*FROM\s+(?:--\S+\s+)*)(?P<image>[^\s:@]+(?::\d+/[^\s:@]+)?)"
    r"(?::(?P<tag>[^\s@]+))?(?:@\S+)?(?P<rest>.*)$",
    re.IGNORECASE,
)


class DockerUpdater(Updater):
    """Updates the tag of `FROM <dependency>` lines in Dockerfiles."""

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        modified = False
        for path in find_files(directory, ("Dockerfile", "Dockerfile.*", "*.Dockerfile")):
            original = read_text(path)
            lines = [self._update_line(line, change) for line in original.splitlines(True)]
            modified |= write_if_changed(path, original, "".join(lines))
        return modified

    def _update_line(self, line: str, change: DependencyVersionChange) -> str:
        newline = "\n" if line.endswith("\n") else ""
        match = _FROM_LINE.match(line.rstrip("\n"))
        if not match or match.group("image") != change.dependency:
            return line
        if match.group("tag") == change.version:
            return line
        image = match.group("image")
        return f"{match.group('lead')}{image}:{change.version}{match.group('rest')}{newline}"
