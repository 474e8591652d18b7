"""Kind -> Updater table, built once at import and never mutated."""

from types import MappingProxyType

from updatebot.kind.docker import DockerUpdater
from updatebot.kind.helm import HelmUpdater
from updatebot.kind.kinds import Kind
from updatebot.kind.make import MakeUpdater
from updatebot.kind.maven import MavenUpdater
from updatebot.kind.npm import PackageJsonUpdater
from updatebot.kind.plugins import PluginsUpdater
from updatebot.kind.updater import Updater

KIND_UPDATERS: MappingProxyType[Kind, Updater] = MappingProxyType(
    {
        Kind.NPM: PackageJsonUpdater(),
        Kind.MAVEN: MavenUpdater(),
        Kind.DOCKER: DockerUpdater(),
        Kind.HELM: HelmUpdater(),
        Kind.MAKE: MakeUpdater(),
        Kind.PLUGINS: PluginsUpdater(),
    }
)


def updater_for(kind: Kind) -> Updater:
    return KIND_UPDATERS[kind]


def lookup(name: str) -> Updater | None:
    """Case-insensitive updater lookup; None for unknown kinds, never an error."""
    kind = Kind.from_name(name)
    if kind is None:
        return None
    return KIND_UPDATERS[kind]
