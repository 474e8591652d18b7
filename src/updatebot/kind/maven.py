"""Updater for Maven pom.xml files.

Edits are made on the raw text so formatting and comments survive; the file
is parsed first only to reject malformed XML.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from updatebot.kind.updater import Updater, UpdaterError, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange

_BLOCK = re.compile(r"<(dependency|plugin)>(.*?)</\1>", re.DOTALL)
_PROPERTY_REFERENCE = re.compile(r"^\$\{([^}]+)\}$")


def _element_text(block: str, tag: str) -> str | None:
    match = re.search(rf"<{tag}>\s*(.*?)\s*</{tag}>", block, re.DOTALL)
    return match.group(1) if match else None


def _split_coordinates(directory: Path, dependency: str) -> tuple[str, str]:
    group_id, sep, artifact_id = dependency.partition(":")
    if not sep or not group_id or not artifact_id:
        raise UpdaterError(directory, f"not a groupId:artifactId dependency: {dependency!r}")
    return group_id, artifact_id


class MavenUpdater(Updater):
    """Updates <version> of matching dependencies and plugins in pom.xml files.

    When the version is a ${property} reference the property is updated instead.
    """

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        group_id, artifact_id = _split_coordinates(directory, change.dependency)
        modified = False
        for path in find_files(directory, ("pom.xml",)):
            modified |= self._update_file(path, group_id, artifact_id, change)
        return modified

    def _update_file(
        self, path: Path, group_id: str, artifact_id: str, change: DependencyVersionChange
    ) -> bool:
        original = read_text(path)
        try:
            ET.fromstring(original)
        except ET.ParseError as e:
            raise UpdaterError(path, f"invalid XML: {e}") from e

        properties: list[str] = []

        def rewrite(block: str) -> str:
            if _element_text(block, "groupId") != group_id:
                return block
            if _element_text(block, "artifactId") != artifact_id:
                return block
            if change.scope and (_element_text(block, "scope") or "compile") != change.scope:
                return block
            current = _element_text(block, "version")
            if current is None:
                return block
            reference = _PROPERTY_REFERENCE.match(current)
            if reference:
                properties.append(reference.group(1))
                return block
            return re.sub(
                r"(<version>\s*).*?(\s*</version>)",
                lambda m: f"{m.group(1)}{change.version}{m.group(2)}",
                block,
                count=1,
                flags=re.DOTALL,
            )

        def replace_block(match: re.Match[str]) -> str:
            if match.group(1) == "dependency":
                return rewrite(match.group(0))
            head, sep, nested = match.group(0).partition("<dependencies>")
            return rewrite(head) + sep + _BLOCK.sub(replace_block, nested)

        updated = _BLOCK.sub(replace_block, original)
        for name in properties:
            updated = re.sub(
                rf"(<{re.escape(name)}>\s*).*?(\s*</{re.escape(name)}>)",
                lambda m: f"{m.group(1)}{change.version}{m.group(2)}",
                updated,
                count=1,
                flags=re.DOTALL,
            )
        return write_if_changed(path, original, updated)
