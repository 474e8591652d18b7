"""Dependency ecosystems (kinds) and the updaters that rewrite their manifests.

Import from the submodules directly: kinds for the Kind enum, updater for the
capability contract and registry for the kind -> updater table.
"""
