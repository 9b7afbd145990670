"""Repository-level pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Tuple

import pytest

from common.base.logging import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_despace_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger._initialized = False  # type: ignore[attr-defined]


@pytest.fixture
def media_tree(tmp_path: Path) -> Path:
    """
    root/
      a b.mkv
      c.mkv          (3 bytes)
      notes.txt      (5 bytes)
      link -> sub
      sub/
        d e.mkv
    """
    root = tmp_path / "media"
    sub = root / "sub"
    sub.mkdir(parents=True)
    (root / "a b.mkv").write_bytes(b"")
    (root / "c.mkv").write_bytes(b"abc")
    (root / "notes.txt").write_bytes(b"hello")
    (sub / "d e.mkv").write_bytes(b"")
    os.symlink("sub", root / "link")
    return root


def snapshot(root: Path) -> Dict[str, Tuple[str, bytes]]:
    """Map every path under ``root`` to its kind and content (or link target)."""
    state: Dict[str, Tuple[str, bytes]] = {}
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        base = Path(dirpath)
        for name in dirnames + filenames:
            path = base / name
            rel = str(path.relative_to(root))
            if path.is_symlink():
                state[rel] = ("link", os.fsencode(os.readlink(path)))
            elif path.is_dir():
                state[rel] = ("dir", b"")
            else:
                state[rel] = ("file", path.read_bytes())
    return state


@pytest.fixture
def take_snapshot():
    return snapshot
