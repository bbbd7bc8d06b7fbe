# tests/test_config.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskman.config import ConfigError, Settings, find_config_file, load_config_file

_ENV_KEYS = (
    "TASKMAN_APP_NAME",
    "TASKMAN_LOG_LEVEL",
    "TASKMAN_LOG_FILE_ENABLED",
    "TASKMAN_DATA_DIR",
    "TASKMAN_TASKS_PATH",
    "TASKMAN_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path: Path) -> None:
    s = Settings.from_env(config_file=tmp_path / "missing.json", use_dotenv=False)
    assert s.app_name == "taskman"
    assert s.log_level == "INFO"
    assert s.log_file_enabled is True
    assert s.data_dir == Path(".local/taskman")
    assert s.tasks_path == Path(".local/taskman/todo-tasks.json")
    assert s.config_file is None


def test_file_values_then_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "config.json"
    cfg.write_text(
        json.dumps({"app_name": "planner", "data_dir": str(tmp_path / "d"), "log_file_enabled": False}),
        "utf-8",
    )

    s = Settings.from_env(config_file=cfg, use_dotenv=False)
    assert s.app_name == "planner"
    assert s.tasks_path == tmp_path / "d" / "todo-tasks.json"
    assert s.log_file_enabled is False
    assert s.config_file == cfg

    monkeypatch.setenv("TASKMAN_APP_NAME", "from-env")
    monkeypatch.setenv("TASKMAN_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKMAN_TASKS_PATH", str(tmp_path / "elsewhere.json"))
    s2 = Settings.from_env(config_file=cfg, use_dotenv=False)
    assert s2.app_name == "from-env"
    assert s2.log_level == "DEBUG"
    assert s2.tasks_path == tmp_path / "elsewhere.json"


def test_malformed_config_file_is_fatal(tmp_path: Path) -> None:
    cfg = tmp_path / "config.json"
    cfg.write_text("{not json", "utf-8")
    with pytest.raises(ConfigError):
        load_config_file(cfg)

    cfg.write_text("[1, 2]", "utf-8")
    with pytest.raises(ConfigError):
        load_config_file(cfg)


def test_unknown_config_keys_are_dropped(tmp_path: Path) -> None:
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"app_name": "x", "theme": "dark"}), "utf-8")
    assert load_config_file(cfg) == {"app_name": "x"}


def test_find_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first, second = tmp_path / "etc", tmp_path / "home"
    first.mkdir()
    second.mkdir()
    (second / "config.json").write_text("{}", "utf-8")

    assert find_config_file((first, second)) == second / "config.json"

    (first / "config.json").write_text("{}", "utf-8")
    assert find_config_file((first, second)) == first / "config.json"

    monkeypatch.setenv("TASKMAN_CONFIG_FILE", str(tmp_path / "explicit.json"))
    assert find_config_file((first, second)) == tmp_path / "explicit.json"
    assert find_config_file(()) == tmp_path / "explicit.json"
