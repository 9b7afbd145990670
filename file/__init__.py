"""Filesystem tooling: whitespace-to-underscore renaming of matching files."""

from .walker import DirectoryWalker, RenamePlan, TraversalRequest, WalkSummary, walk  # noqa: F401

__all__ = ["DirectoryWalker", "RenamePlan", "TraversalRequest", "WalkSummary", "walk"]
