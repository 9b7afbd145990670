"""Low-level shared utilities for despace."""

from .logging import get_logger, setup_logging, DespaceLogger
from .ops import Filesystem, LocalFilesystem

__all__ = [
    "get_logger",
    "setup_logging",
    "DespaceLogger",
    "Filesystem",
    "LocalFilesystem",
]
