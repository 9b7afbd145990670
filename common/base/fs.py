"""Filesystem helper utilities shared across common modules."""

from __future__ import annotations

from pathlib import Path


def ensure_dir(path: Path | str) -> Path:
    p = Path(path).expanduser()
    p.mkdir(parents=True, exist_ok=True)
    return p


def display_path(path: Path | str) -> str:
    """Render a path for report lines, escaping bytes that are not valid text."""
    return str(path).encode("utf-8", "backslashreplace").decode("utf-8")
