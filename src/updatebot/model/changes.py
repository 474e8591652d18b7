"""Dependency version change value type."""

from dataclasses import dataclass

from updatebot.kind.kinds import Kind


@dataclass(frozen=True)
class DependencyVersionChange:
    """A request to move one dependency of one ecosystem to a version.

    Fields:
        kind: Ecosystem the dependency belongs to
        dependency: Ecosystem-specific identifier (e.g. "com.foo:bar", "left-pad")
        version: Target version
        scope: Optional ecosystem-specific scope (e.g. "dev", "test")

    An empty scope is stored as None so that a change survives a round trip
    through the ledger comment grammar, which renders None as "".
    """

    kind: Kind
    dependency: str
    version: str
    scope: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, Kind):
            msg = f"kind must be a Kind, got {self.kind!r}"
            raise ValueError(msg)
        if not self.dependency:
            raise ValueError("dependency must not be empty")
        if not self.version:
            raise ValueError("version must not be empty")
        if self.scope == "":
            object.__setattr__(self, "scope", None)

    def matches(self, other: "DependencyVersionChange") -> bool:
        """True if both changes target the same dependency declaration."""
        return (
            self.kind == other.kind
            and self.dependency == other.dependency
            and self.scope == other.scope
        )

    def __str__(self) -> str:
        text = f"{self.kind} {self.dependency} {self.version}"
        if self.scope:
            text += f" ({self.scope})"
        return text


def merge_changes(
    pending: list[DependencyVersionChange], changes: list[DependencyVersionChange]
) -> list[DependencyVersionChange]:
    """Combine pending changes with newer ones.

    A newer change replaces any pending change for the same declaration;
    order is pending first, then the new changes.
    """
    answer = [p for p in pending if not any(p.matches(c) for c in changes)]
    for change in changes:
        if not any(change.matches(a) for a in answer):
            answer.append(change)
    return answer
