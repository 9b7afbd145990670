"""
file.walker

Recursively replace whitespace in the names of files with a given extension.

The walk is depth-first and pre-order. Entries are inspected with ``lstat``
so symbolic links are reported but never followed or renamed. Any failure
aborts the whole walk with a ``TraversalError`` subclass naming the path.
"""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Type

from common.base.errors import (
    ExtensionDecodeError,
    MetadataError,
    NameDecodeError,
    ReadDirError,
    RenameError,
    TraversalError,
    UnknownEntryTypeError,
)
from common.base.fs import display_path
from common.base.logging import get_logger
from common.base.ops import Filesystem, LocalFilesystem
from common.shared.report import Reporter, StreamReporter

log = get_logger(__name__)

DEFAULT_EXTENSION = "mkv"
REPLACEMENT = "_"
# str.isspace() also accepts the ASCII information separators; they are not Unicode White_Space.
INFORMATION_SEPARATORS = "\x1c\x1d\x1e\x1f"


@dataclass(frozen=True)
class TraversalRequest:
    root: Path
    extension: str = DEFAULT_EXTENSION
    dry_run: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class RenamePlan:
    source: Path
    target: Path


@dataclass
class WalkSummary:
    directories: int = 0
    files: int = 0
    matched: int = 0
    renamed: int = 0
    symlinks: int = 0
    plans: List[RenamePlan] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "Directories": self.directories,
            "Files": self.files,
            "Matched": self.matched,
            "Planned": len(self.plans),
            "Renamed": self.renamed,
            "Symlinks": self.symlinks,
        }


# ----------------------------------------------------------------------
# NAME HELPERS
# ----------------------------------------------------------------------

def file_extension(name: str) -> Optional[str]:
    """
    Return the text after the last dot of ``name``.

    ``None`` when there is no dot or the only dot leads the name
    (``.hidden``); an empty string for a trailing dot (``movie.``).
    """
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return None
    return ext


def is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in INFORMATION_SEPARATORS


def has_whitespace(name: str) -> bool:
    return any(is_whitespace(ch) for ch in name)


def replace_whitespace(name: str) -> str:
    return "".join(REPLACEMENT if is_whitespace(ch) else ch for ch in name)


def _ensure_text(value: str, error: Type[TraversalError], path: Path) -> None:
    # Undecodable bytes surface as lone surrogates (surrogateescape).
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise error(path) from exc


# ----------------------------------------------------------------------
# WALKER
# ----------------------------------------------------------------------

class DirectoryWalker:
    """Walk a tree and rename matching files, reporting through ``reporter``."""

    def __init__(self, reporter: Reporter, filesystem: Optional[Filesystem] = None) -> None:
        self.reporter = reporter
        self.fs: Filesystem = filesystem or LocalFilesystem()

    def walk(self, request: TraversalRequest) -> WalkSummary:
        """
        Walk ``request.root`` and return what was seen and renamed.

        An explicit stack of directory iterators replaces recursion so tree
        depth is not bounded by the interpreter's recursion limit. Visiting
        order matches a recursive pre-order walk.

        Raises:
            TraversalError: the first failure encountered; nothing after it is
                visited.
        """
        log.debug(
            f"Walking {request.root} (extension={request.extension!r}, "
            f"dry_run={request.dry_run}, verbose={request.verbose})"
        )
        summary = WalkSummary()
        stack: List[Iterator[Path]] = [iter(self._list_dir(request.root))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            subdir = self._visit(entry, request, summary)
            if subdir is not None:
                stack.append(iter(self._list_dir(subdir)))
        return summary

    def _list_dir(self, path: Path) -> List[Path]:
        try:
            return self.fs.list_dir(path)
        except OSError as exc:
            raise ReadDirError(path) from exc

    def _visit(self, entry: Path, request: TraversalRequest, summary: WalkSummary) -> Optional[Path]:
        """Handle one entry; return it when it is a directory to descend into."""
        try:
            info = self.fs.lstat(entry)
        except OSError as exc:
            raise MetadataError(entry) from exc

        mode = info.st_mode
        if stat.S_ISREG(mode):
            self._handle_file(entry, info.st_size, request, summary)
            return None
        if stat.S_ISDIR(mode):
            summary.directories += 1
            if request.verbose:
                self.reporter.line(f"Directory: {display_path(entry)}")
            return entry
        if stat.S_ISLNK(mode):
            summary.symlinks += 1
            if request.verbose:
                self.reporter.line(f"Symlink: {display_path(entry)} - not following")
            return None
        raise UnknownEntryTypeError(entry)

    def _handle_file(self, path: Path, size: int, request: TraversalRequest, summary: WalkSummary) -> None:
        summary.files += 1
        name = path.name
        extension = file_extension(name)
        if extension is not None:
            _ensure_text(extension, ExtensionDecodeError, path)

        if extension != request.extension:
            if request.verbose:
                self.reporter.line(f"File: {display_path(path)} length {size}")
            return

        summary.matched += 1
        _ensure_text(name, NameDecodeError, path)
        if not has_whitespace(name):
            if request.verbose:
                self.reporter.line(f"{extension} file: {display_path(path)} length {size}")
            return

        plan = RenamePlan(source=path, target=path.with_name(replace_whitespace(name)))
        operation = "would rename" if request.dry_run else "rename"
        self.reporter.line(
            f"File: matches {extension} {operation} from '{display_path(plan.source)}' "
            f"to '{display_path(plan.target)}'"
        )
        if not request.dry_run:
            try:
                self.fs.rename(plan.source, plan.target)
            except OSError as exc:
                raise RenameError(plan.source, plan.target) from exc
            summary.renamed += 1
        summary.plans.append(plan)


def walk(
    path: Path | str,
    extension: str = DEFAULT_EXTENSION,
    dry_run: bool = False,
    verbose: bool = False,
    reporter: Optional[Reporter] = None,
) -> WalkSummary:
    """Walk ``path`` with a fresh ``DirectoryWalker`` reporting to stdout by default."""
    request = TraversalRequest(root=Path(path), extension=extension, dry_run=dry_run, verbose=verbose)
    return DirectoryWalker(reporter or StreamReporter()).walk(request)
