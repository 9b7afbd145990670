"""
common.base.errors

Error taxonomy for despace. Every traversal failure is its own type so callers
can tell which path and which operation failed; the originating OSError or
UnicodeError is chained as ``__cause__``.
"""

from __future__ import annotations

from pathlib import Path

from .fs import display_path


class DespaceError(Exception):
    """Base error for the project."""


class ConfigError(DespaceError):
    """Invalid or unreadable YAML configuration."""


class TraversalError(DespaceError):
    """A directory walk failed at ``path``."""

    message = "Traversal failed for {path}"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(self.message.format(path=display_path(self.path)))


class ReadDirError(TraversalError):
    message = "Cannot read directory {path}"


class MetadataError(TraversalError):
    message = "Cannot get metadata for {path}"


class ExtensionDecodeError(TraversalError):
    message = "Cannot get extension for file {path}"


class NameDecodeError(TraversalError):
    message = "Cannot get file name for {path}"


class UnknownEntryTypeError(TraversalError):
    message = "Unknown entry type for {path}"


class RenameError(TraversalError):
    """Renaming ``source`` to ``target`` failed."""

    def __init__(self, source: Path | str, target: Path | str) -> None:
        self.source = Path(source)
        self.target = Path(target)
        self.path = self.source
        DespaceError.__init__(
            self,
            f"Cannot rename file from {display_path(self.source)} to {display_path(self.target)}",
        )


__all__ = [
    "DespaceError",
    "ConfigError",
    "TraversalError",
    "ReadDirError",
    "MetadataError",
    "ExtensionDecodeError",
    "NameDecodeError",
    "UnknownEntryTypeError",
    "RenameError",
]
