from __future__ import annotations

import json
from pathlib import Path
import textwrap

import pytest

from common.base.errors import ConfigError
from common.shared.loader import cli_main, load_task_config


def _write_config(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    return path


def _wrap_task_config(body: str, logging_body: str | None = None, task: str = "despace") -> str:
    parts: list[str] = []
    if logging_body:
        parts.append("logging:\n")
        parts.append(textwrap.indent(logging_body.strip(), "  "))
        parts.append("\n")
    parts.append("tasks:\n")
    parts.append(f"  {task}:\n")
    parts.append(textwrap.indent(body.strip(), "    "))
    parts.append("\n")
    return "".join(parts)


def test_load_task_config_without_path_is_empty() -> None:
    assert load_task_config("despace") == {"__task__": "despace"}


def test_load_task_config_despace(tmp_path: Path) -> None:
    cfg_path = _write_config(
        tmp_path,
        "config.yaml",
        _wrap_task_config(
            (
                "extension: mp4\n"
                "dry_run: 'yes'\n"
                "verbose: false\n"
                "output_dir: './reports'\n"
            ),
            logging_body="level: DEBUG\nlog_dir: ./logs\nfile_prefix: run\n",
        ),
    )

    config = load_task_config("despace", cfg_path)
    assert config["extension"] == "mp4"
    assert config["dry_run"] is True
    assert config["verbose"] is False
    assert config["output_dir"] == str((tmp_path / "reports").resolve())
    assert config["__config_path__"] == str(cfg_path.resolve())
    logging_cfg = config["__logging__"]
    assert logging_cfg["level"] == "DEBUG"
    assert logging_cfg["file_prefix"] == "run"
    assert logging_cfg["log_dir"] == str((tmp_path / "logs").resolve())


def test_single_task_file_and_aliases(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path, "flat.yaml", "ext: avi\noutput: /tmp/despace-reports\n")

    config = load_task_config("despace", cfg_path)
    assert config["extension"] == "avi"
    assert config["output_dir"] == str(Path("/tmp/despace-reports").resolve())
    assert "__logging__" not in config


def test_null_values_fall_back_to_defaults(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path, "nulls.yaml", _wrap_task_config("dry_run:\nextension:\n"))

    config = load_task_config("despace", cfg_path)
    assert "dry_run" not in config
    assert "extension" not in config


@pytest.mark.parametrize(
    "body, message",
    [
        ("batch_size: 3\n", "unsupported keys"),
        ("dry_run: maybe\n", "must be a boolean"),
        ("extension: [mkv, mp4]\n", "must be a string"),
        ("extension: '  '\n", "cannot be empty"),
    ],
)
def test_invalid_task_values(tmp_path: Path, body: str, message: str) -> None:
    cfg_path = _write_config(tmp_path, "bad.yaml", _wrap_task_config(body))

    with pytest.raises(ConfigError, match=message):
        load_task_config("despace", cfg_path)


def test_missing_task_section(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path, "other.yaml", _wrap_task_config("verbose: true\n", task="other"))

    with pytest.raises(ConfigError, match="missing task 'despace'"):
        load_task_config("despace", cfg_path)


def test_unknown_task_and_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unknown task"):
        load_task_config("vid_rename", None)
    with pytest.raises(ConfigError, match="not found"):
        load_task_config("despace", tmp_path / "absent.yaml")


def test_invalid_yaml_and_non_mapping_root(tmp_path: Path) -> None:
    broken = _write_config(tmp_path, "broken.yaml", "tasks: [unclosed\n")
    listing = _write_config(tmp_path, "list.yaml", "- one\n- two\n")

    with pytest.raises(ConfigError, match="not valid YAML"):
        load_task_config("despace", broken)
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_task_config("despace", listing)


def test_logging_section_rejects_unknown_keys(tmp_path: Path) -> None:
    cfg_path = _write_config(
        tmp_path,
        "logging.yaml",
        _wrap_task_config("verbose: true\n", logging_body="level: INFO\ncolour: always\n"),
    )

    with pytest.raises(ConfigError, match="colour"):
        load_task_config("despace", cfg_path)


def test_cli_main_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg_path = _write_config(tmp_path, "config.yaml", _wrap_task_config("extension: mkv\nverbose: on\n"))

    assert cli_main([str(cfg_path)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["extension"] == "mkv"
    assert payload["verbose"] is True


def test_cli_main_reports_errors(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path, "bad.yaml", _wrap_task_config("nope: 1\n"))

    with pytest.raises(SystemExit) as excinfo:
        cli_main([str(cfg_path)])
    assert excinfo.value.code == 1
