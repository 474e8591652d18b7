"""Updater for npm package.json manifests."""

import json
import re
from pathlib import Path

from updatebot.kind.updater import Updater, UpdaterError, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange

DEPENDENCY_SECTIONS = {
    None: ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies"),
    "dev": ("devDependencies",),
    "peer": ("peerDependencies",),
    "optional": ("optionalDependencies",),
    "prod": ("dependencies",),
}

# Range operators kept in front of the new version ("^1.0.0" -> "^2.0.0")
_RANGE_PREFIX = re.compile(r"^(\^|~|>=|<=|>|<|=)?")
_INDENT = re.compile(r'^([ \t]+)"', re.MULTILINE)


def _detect_indent(text: str) -> int | str:
    """Return the indent of the first indented key in text, two spaces if none."""
    match = _INDENT.search(text)
    if match is None:
        return 2
    indent = match.group(1)
    return "\t" if indent.startswith("\t") else len(indent)


def _rewrite_version(current: str, version: str) -> str:
    prefix = _RANGE_PREFIX.match(current)
    return (prefix.group(0) if prefix else "") + version


class PackageJsonUpdater(Updater):
    """Updates dependency ranges in every package.json of a checkout."""

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        sections = DEPENDENCY_SECTIONS.get(change.scope)
        if sections is None:
            sections = (change.scope,) if change.scope else DEPENDENCY_SECTIONS[None]

        modified = False
        for path in find_files(directory, ("package.json",)):
            modified |= self._update_file(path, sections, change)
        return modified

    def _update_file(
        self, path: Path, sections: tuple[str, ...], change: DependencyVersionChange
    ) -> bool:
        original = read_text(path)
        try:
            manifest = json.loads(original)
        except json.JSONDecodeError as e:
            raise UpdaterError(path, f"invalid JSON: {e}") from e
        if not isinstance(manifest, dict):
            raise UpdaterError(path, "top level is not an object")

        for section in sections:
            dependencies = manifest.get(section)
            if not isinstance(dependencies, dict) or change.dependency not in dependencies:
                continue
            current = str(dependencies[change.dependency])
            dependencies[change.dependency] = _rewrite_version(current, change.version)

        updated = json.dumps(manifest, indent=_detect_indent(original), ensure_ascii=False)
        if original.endswith("\n"):
            updated += "\n"
        if json.loads(updated) == json.loads(original):
            return False
        return write_if_changed(path, original, updated)
