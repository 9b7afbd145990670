"""Command-line entry points for despace.

Installed as ``console_scripts`` and completion-aware via ``argcomplete``.
Settings resolve as: explicit flag, then YAML task config, then built-in
default.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import argcomplete

from common.base.errors import DespaceError
from common.base.logging import get_logger, normalize_use_rich, setup_logging
from common.shared.loader import load_task_config
from common.shared.report import StreamReporter, export_plans, summarize_counts
from file.walker import DEFAULT_EXTENSION, DirectoryWalker, TraversalRequest

TASK_NAME = "despace"

log = get_logger(__name__)


def _configure_logging(logging_cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    setup_logging(
        level=args.log_level or logging_cfg.get("level"),
        use_rich=normalize_use_rich(logging_cfg.get("use_rich")),
        log_dir=args.log_dir or logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def _pick(cli_value: Any, cfg: Dict[str, Any], key: str, default: Any) -> Any:
    if cli_value is not None:
        return cli_value
    return cfg.get(key, default)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="despace",
        description=(
            "Recursively replace whitespace in filenames matching the extension by underscores."
        ),
    )
    parser.add_argument("path", help="Path to recursively search for files.")
    parser.add_argument(
        "-e",
        "--extension",
        help=f"Extension to search for, without the leading dot (default: {DEFAULT_EXTENSION}).",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        default=None,
        help="Do not rename, only print what would be done.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Report every visited file, directory and symlink.",
    )
    parser.add_argument("--config", "-c", help="Path to configuration YAML.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging verbosity (default: INFO).",
    )
    parser.add_argument("--log-dir", type=Path, help="Write a per-run log file to this directory.")
    parser.add_argument(
        "--report-dir",
        type=Path,
        help="Export the rename plans as a timestamped CSV into this directory.",
    )
    return parser


def cli_despace(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    # Console logging is needed before the config is known so config errors are reported.
    setup_logging(level=args.log_level)
    try:
        cfg = load_task_config(TASK_NAME, args.config)
        try:
            _configure_logging(cfg.pop("__logging__", {}) or {}, args)
        except OSError as exc:
            log.error(f"❌ Cannot set up the log file: {exc}", exc_info=True)
            return 1

        request = TraversalRequest(
            root=Path(args.path).expanduser(),
            extension=_pick(args.extension, cfg, "extension", DEFAULT_EXTENSION),
            dry_run=_pick(args.dry_run, cfg, "dry_run", False),
            verbose=_pick(args.verbose, cfg, "verbose", False),
        )
        report_dir = args.report_dir or (Path(cfg["output_dir"]) if cfg.get("output_dir") else None)
        if request.extension.startswith("."):
            log.warning(
                f"Extension {request.extension!r} starts with a dot and will never match; "
                f"pass it without the dot."
            )
        log.debug(f"Request: {request}")

        reporter = StreamReporter()
        summary = DirectoryWalker(reporter).walk(request)
        log.debug(summarize_counts("Walk Summary", summary.counts()))
        if report_dir is not None:
            try:
                export_plans(summary.plans, report_dir, dry_run=request.dry_run)
            except OSError as exc:
                log.error(f"❌ Failed to write report: {exc}", exc_info=True)
                return 1
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return 130
    except DespaceError as exc:
        log.error(f"❌ {exc}", exc_info=True)
        return 1

    if request.dry_run:
        log.info(f"[DRY-RUN] {len(summary.plans)} file(s) would be renamed.")
    else:
        log.info(f"✅ Renamed {summary.renamed} file(s).")
    reporter.line("Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_despace())
