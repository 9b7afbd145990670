"""
common.base.ops

Filesystem operations used by the directory walker.

``Filesystem`` is the seam the walker talks to; ``LocalFilesystem`` is the
real implementation. Operations raise ``OSError`` unchanged and leave it to
the caller to attach traversal context.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Protocol

from .logging import get_logger

log = get_logger(__name__)


class Filesystem(Protocol):
    """Directory listing, metadata and rename primitives."""

    def list_dir(self, path: Path) -> List[Path]:
        ...

    def lstat(self, path: Path) -> os.stat_result:
        ...

    def rename(self, src: Path, dst: Path) -> None:
        ...


class LocalFilesystem:
    """Filesystem backed by the ``os`` module. Never follows symlinks."""

    def list_dir(self, path: Path) -> List[Path]:
        """Return the entries of ``path`` sorted by name."""
        with os.scandir(path) as entries:
            names = sorted(entry.name for entry in entries)
        return [path / name for name in names]

    def lstat(self, path: Path) -> os.stat_result:
        return os.lstat(path)

    def rename(self, src: Path, dst: Path) -> None:
        try:
            os.rename(src, dst)
        except OSError as e:
            log.debug(f"Rename failed {src} → {dst}: {e}")
            raise
        log.debug(f"Renamed {src} → {dst}")
