"""The closed set of dependency ecosystems updatebot understands."""

from enum import Enum


class Kind(Enum):
    """Ecosystem identifier.

    The value is the token used on the command line and in ledger comments.
    """

    NPM = "npm"
    MAVEN = "maven"
    DOCKER = "docker"
    HELM = "helm"
    MAKE = "make"
    PLUGINS = "plugins"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Kind | None":
        """Return the kind for a case-insensitive name, or None if unknown."""
        wanted = name.strip().lower()
        for kind in cls:
            if kind.value == wanted:
                return kind
        return None
