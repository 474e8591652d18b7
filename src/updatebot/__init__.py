"""Propagate dependency version changes across a fleet of repositories."""
