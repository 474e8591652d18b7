"""Updater for Jenkins plugins.txt files."""

from pathlib import Path

from updatebot.kind.updater import Updater, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange


class PluginsUpdater(Updater):
    """Updates `plugin-id:version` lines in plugins.txt."""

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        modified = False
        for path in find_files(directory, ("plugins.txt",)):
            original = read_text(path)
            lines = [self._update_line(line, change) for line in original.splitlines(True)]
            modified |= write_if_changed(path, original, "".join(lines))
        return modified

    def _update_line(self, line: str, change: DependencyVersionChange) -> str:
        text = line.strip()
        if not text or text.startswith("#"):
            return line
        name, sep, _ = text.partition(":")
        if not sep or name.strip() != change.dependency:
            return line
        newline = "\n" if line.endswith("\n") else ""
        return f"{change.dependency}:{change.version}{newline}"
