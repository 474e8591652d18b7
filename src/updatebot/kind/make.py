"""Updater for version variables in Makefiles."""

import re
from pathlib import Path

from updatebot.kind.updater import Updater, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange


class MakeUpdater(Updater):
    """Updates `NAME := version` style assignments (also `?=`, `=`, `::=`)."""

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        pattern = re.compile(
            rf"^(?P<lead>[ \t]*{re.escape(change.dependency)}[ \t]*(?::=|::=|\?=|=)[ \t]*)"
            r"(?P<value>\S*)(?P<trail>[ \t]*(?:#.*)?)$",
            re.MULTILINE,
        )

        def replace(match: re.Match[str]) -> str:
            return f"{match.group('lead')}{change.version}{match.group('trail')}"

        modified = False
        for path in find_files(directory, ("Makefile", "*.mk")):
            original = read_text(path)
            modified |= write_if_changed(path, original, pattern.sub(replace, original))
        return modified
