"""Updater for Helm chart dependencies.

The chart is parsed with PyYAML only to validate it and to decide whether a
dependency needs bumping. The rewrite itself edits the version scalar in the
original text, so comments and quoting survive.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from updatebot.kind.updater import Updater, UpdaterError, find_files, read_text, write_if_changed
from updatebot.model.changes import DependencyVersionChange

_DEPENDENCIES_KEY = re.compile(r"^dependencies:\s*(#.*)?$")
_ITEM_START = re.compile(r"^(\s*)-\s+")
_KEY_VALUE = re.compile(
    r"^(?P<key>[\w.-]+):(?P<space>[ \t]+)"
    r"(?P<value>'[^']*'|\"[^\"]*\"|[^\s#'\"][^\s#]*)(?P<rest>.*)$"
)


@dataclass
class _Item:
    """One `- name: ...` entry of the dependencies sequence, by line index."""

    column: int
    name: str | None = None
    version_line: int | None = None
    lines: list[int] = field(default_factory=list)


def _split_line(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body) :]


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def _dependency_items(lines: list[str]) -> list[_Item]:
    start = next(
        (i for i, line in enumerate(lines) if _DEPENDENCIES_KEY.match(_split_line(line)[0])),
        None,
    )
    if start is None:
        return []

    items: list[_Item] = []
    dash_indent: int | None = None
    for index in range(start + 1, len(lines)):
        body, _ = _split_line(lines[index])
        stripped = body.lstrip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(body) - len(stripped)
        if indent == 0 and not stripped.startswith("-"):
            break
        item_start = _ITEM_START.match(body)
        if item_start and dash_indent in (None, len(item_start.group(1))):
            dash_indent = len(item_start.group(1))
            items.append(_Item(column=item_start.end()))
        elif not items or indent < items[-1].column:
            break
        item = items[-1]
        item.lines.append(index)
        if index != item.lines[0] and indent != item.column:
            continue
        pair = _KEY_VALUE.match(body[item.column :])
        if pair is None:
            continue
        if pair["key"] == "name":
            item.name = _unquote(pair["value"])
        elif pair["key"] == "version":
            item.version_line = index
    return items


def _replace_version(line: str, column: int, version: str) -> str | None:
    """Return line with its version scalar set to version, or None if already there."""
    body, ending = _split_line(line)
    pair = _KEY_VALUE.match(body[column:])
    if pair is None or _unquote(pair["value"]) == version:
        return None
    value = pair["value"]
    quote = value[0] if value[0] in "'\"" else ""
    return (
        f"{body[:column]}{pair['key']}:{pair['space']}"
        f"{quote}{version}{quote}{pair['rest']}{ending}"
    )


class HelmUpdater(Updater):
    """Updates `dependencies[].version` in requirements.yaml and Chart.yaml."""

    def apply(self, directory: Path, change: DependencyVersionChange) -> bool:
        modified = False
        for path in find_files(directory, ("requirements.yaml", "Chart.yaml")):
            modified |= self._update_file(path, change)
        return modified

    def _update_file(self, path: Path, change: DependencyVersionChange) -> bool:
        original = read_text(path)
        try:
            chart = yaml.safe_load(original)
        except yaml.YAMLError as e:
            raise UpdaterError(path, f"invalid YAML: {e}") from e
        if chart is None:
            return False
        if not isinstance(chart, dict):
            raise UpdaterError(path, "top level is not a mapping")

        dependencies = chart.get("dependencies") or []
        if not isinstance(dependencies, list):
            raise UpdaterError(path, "'dependencies' is not a list")

        stale = sum(
            1
            for dependency in dependencies
            if isinstance(dependency, dict)
            and dependency.get("name") == change.dependency
            and "version" in dependency
            and str(dependency["version"]) != change.version
        )
        if stale == 0:
            return False

        lines = original.splitlines(keepends=True)
        located = 0
        for item in _dependency_items(lines):
            if item.name != change.dependency or item.version_line is None:
                continue
            located += 1
            line = _replace_version(lines[item.version_line], item.column, change.version)
            if line is not None:
                lines[item.version_line] = line

        if located < stale:
            raise UpdaterError(
                path, f"cannot rewrite the version of {change.dependency!r} in place"
            )
        return write_if_changed(path, original, "".join(lines))
