"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_task_config`: validated configuration for a given task
 - `cli_main`: command-line entry point exposed as the `despace-config` script
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import yaml

from common.base.errors import ConfigError
from common.base.file_io import read_yaml


ConfigDict = Dict[str, Any]

LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"

TASK_SCHEMAS: Dict[str, Dict[str, Iterable[str]]] = {
    "despace": {
        "required": [],
        "optional": ["extension", "dry_run", "verbose", "output_dir"],
    },
}

FIELD_ALIASES = {
    "output": "output_dir",
    "ext": "extension",
}

PATH_FIELDS = {"output_dir"}
BOOLEAN_FIELDS = {"dry_run", "verbose"}
STRING_FIELDS = {"extension"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise ConfigError(f"Configuration file not found: {cfg_path}")

    try:
        data = read_yaml(cfg_path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file is not valid YAML: {cfg_path}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration root must be a mapping in {cfg_path}")

    return data


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """
    Load and validate the settings of ``task``.

    Without a config path the result only carries the task marker, so callers
    fall back to their built-in defaults. Relative paths are anchored at the
    directory holding the config file.

    Raises:
        ConfigError: unknown task, unsupported keys or malformed values.
    """
    if task not in TASK_SCHEMAS:
        raise ConfigError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_SCHEMAS))}")

    normalized: ConfigDict = {"__task__": task}
    if not config_path:
        return normalized

    resolved_path = Path(config_path).expanduser().resolve()
    root_config = load_config(resolved_path)
    config = _apply_aliases(_extract_task_config(root_config, task, resolved_path))

    schema = TASK_SCHEMAS[task]
    required = set(schema.get("required", []))
    allowed_keys = required | set(schema.get("optional", []))

    missing = [key for key in sorted(required) if config.get(key) in (None, "")]
    if missing:
        raise ConfigError(
            f"Configuration '{resolved_path}' missing required fields for task '{task}': {', '.join(missing)}"
        )

    unexpected = [key for key in config if key not in allowed_keys]
    if unexpected:
        raise ConfigError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': {', '.join(sorted(unexpected))}"
        )

    for key, value in config.items():
        if value is None:
            continue
        if key in PATH_FIELDS:
            normalized[key] = _anchor_path(value, resolved_path)
        elif key in BOOLEAN_FIELDS:
            normalized[key] = _coerce_bool(value, key, resolved_path)
        elif key in STRING_FIELDS:
            normalized[key] = _coerce_str(value, key, resolved_path)
        else:
            normalized[key] = value

    normalized["__config_path__"] = str(resolved_path)
    logging_settings = _extract_logging_settings(root_config, resolved_path)
    if logging_settings:
        normalized["__logging__"] = logging_settings
    return normalized


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _anchor_path(value: Any, config_path: Path) -> str:
    candidate = Path(str(value)).expanduser()
    if not candidate.is_absolute():
        candidate = config_path.parent / candidate
    return str(candidate.resolve())


def _coerce_bool(value: Any, field: str, config_path: Path) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ConfigError(
        f"Configuration '{config_path}' field '{field}' must be a boolean (true/false, yes/no, on/off)."
    )


def _coerce_str(value: Any, field: str, config_path: Path) -> str:
    if isinstance(value, (Mapping, list, tuple, set, bool)):
        raise ConfigError(f"Configuration '{config_path}' field '{field}' must be a string.")
    text = str(value).strip()
    if not text:
        raise ConfigError(f"Configuration '{config_path}' field '{field}' cannot be empty.")
    return text


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Path) -> ConfigDict:
    if TASKS_SECTION_KEY in root:
        tasks_section = root.get(TASKS_SECTION_KEY) or {}
        if not isinstance(tasks_section, Mapping):
            raise ConfigError(f"'tasks' section must be a mapping in {config_path}")
        if task not in tasks_section:
            raise ConfigError(
                f"Configuration '{config_path}' missing task '{task}' under 'tasks' section"
            )
        task_payload = tasks_section[task] or {}
        if not isinstance(task_payload, Mapping):
            raise ConfigError(f"Task '{task}' entry must be a mapping in {config_path}")
        return dict(task_payload)

    # Single-task files carry the settings at the root.
    return {key: value for key, value in root.items() if key != LOGGING_SECTION_KEY}


def _extract_logging_settings(root: Mapping[str, Any], config_path: Path) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{LOGGING_SECTION_KEY}' section must be a mapping in {config_path}")

    invalid = [key for key in section if key not in LOGGING_ALLOWED_KEYS]
    if invalid:
        raise ConfigError(
            f"'{LOGGING_SECTION_KEY}' section contains unsupported keys in {config_path}: {', '.join(sorted(invalid))}"
        )

    settings = dict(section)
    if settings.get("log_dir"):
        settings["log_dir"] = _anchor_path(settings["log_dir"], config_path)
    return settings


def cli_main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load and validate despace YAML configs.")
    parser.add_argument("config_path", help="Path to YAML file")
    parser.add_argument(
        "--task",
        default="despace",
        choices=sorted(TASK_SCHEMAS),
        help="Task identifier (default: despace).",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = load_task_config(args.task, args.config_path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    print(json.dumps(config, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_main())
