"""
common.shared.report

Reporting utilities for despace.

 - Line reporters: the walker's output channel (stdout or in-memory)
 - CSV export of rename plans, timestamped per run
 - Human-readable summary blocks for the log
"""

from __future__ import annotations

import csv
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Protocol, Sequence, TextIO

from common.base.file_io import open_file
from common.base.fs import display_path, ensure_dir
from common.base.logging import get_logger

if TYPE_CHECKING:
    from file.walker import RenamePlan

log = get_logger(__name__)

REPORT_BASE_NAME = "despace"
REPORT_FIELDS = ("source", "target", "status")


# ----------------------------------------------------------------------
# LINE REPORTERS
# ----------------------------------------------------------------------

class Reporter(Protocol):
    """Receives one report line at a time."""

    def line(self, text: str) -> None:
        ...


class StreamReporter:
    """Write report lines verbatim to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def line(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"{text}\n")
        stream.flush()


class ListReporter:
    """Collect report lines in memory."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def line(self, text: str) -> None:
        self.lines.append(text)


# ----------------------------------------------------------------------
# TIMESTAMPED FILENAMES
# ----------------------------------------------------------------------

def timestamped_filename(base_name: str, ext: str = "csv", output_dir: Optional[Path] = None) -> Path:
    """
    Generate a timestamped output filename (e.g., despace_2025-10-06_103000.csv)
    """
    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    output_dir = ensure_dir(output_dir or Path.cwd())
    candidate = output_dir / f"{base_name}_{ts}.{ext}"
    counter = 1
    while candidate.exists():
        candidate = output_dir / f"{base_name}_{ts}_{counter:02d}.{ext}"
        counter += 1
    return candidate


# ----------------------------------------------------------------------
# CSV WRITERS
# ----------------------------------------------------------------------

def write_csv(
    data: List[Dict[str, Any]],
    output_path: Path,
    fieldnames: Optional[Sequence[str]] = None,
) -> Path:
    """Write structured data to a CSV file."""
    ensure_dir(output_path.parent)
    with open_file(output_path, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(fieldnames or data[0].keys()))
        writer.writeheader()
        writer.writerows(data)
    log.debug(f"📊 CSV report saved → {output_path}")
    return output_path


def export_plans(
    plans: Iterable["RenamePlan"],
    output_dir: Path,
    *,
    dry_run: bool,
    base_name: str = REPORT_BASE_NAME,
) -> Optional[Path]:
    """
    Export rename plans as ``<base_name>_<timestamp>.csv`` under ``output_dir``.

    Rows are marked ``planned`` in dry-run mode and ``renamed`` otherwise.
    Returns None without touching the disk when there is nothing to export.
    """
    status = "planned" if dry_run else "renamed"
    rows = [
        {
            "source": display_path(plan.source),
            "target": display_path(plan.target),
            "status": status,
        }
        for plan in plans
    ]
    if not rows:
        log.info("No rename plans to export.")
        return None

    path = write_csv(rows, timestamped_filename(base_name, "csv", output_dir), REPORT_FIELDS)
    log.info(f"📂 Rename report written to: {path}")
    return path


# ----------------------------------------------------------------------
# HUMAN-READABLE SUMMARY
# ----------------------------------------------------------------------

def summarize_counts(title: str, summary: Dict[str, int]) -> str:
    """
    Return a formatted, human-readable summary string.
    Example:
        summarize_counts("Walk Summary", {"Files": 12, "Renamed": 3})
    """
    lines = [f"===== {title.upper()} ====="]
    for key, val in summary.items():
        lines.append(f"{key}: {val}")
    lines.append("=====================")
    return "\n".join(lines)
