# tests/test_main.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskman.cli import main as main_module
from taskman.config import ConfigError
from taskman.logging_setup import LOG_FILE_NAME, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    logging.getLogger("taskman.tasks.task_store").debug("mutation detail")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "mutation detail" in log_file.read_text("utf-8")


def test_setup_logging_without_file(tmp_path: Path) -> None:
    assert setup_logging(log_dir=tmp_path / "logs", file_enabled=False) is None
    assert not (tmp_path / "logs").exists()


def test_main_exits_on_config_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def broken() -> None:
        raise ConfigError("fatal error in config file /etc/taskman/config.json")

    monkeypatch.setattr(main_module, "get_settings", broken)

    with pytest.raises(SystemExit) as exc:
        main_module.main([])
    assert exc.value.code == 1
    assert "fatal error in config file" in capsys.readouterr().err


def test_main_exits_when_store_cannot_load(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    tasks_path = tmp_path / "todo-tasks.json"
    tasks_path.write_text('{"tasks": [{"id": "one"}]}', "utf-8")
    settings = SimpleNamespace(
        app_name="taskman",
        log_level="INFO",
        log_file_enabled=False,
        data_dir=tmp_path,
        tasks_path=tasks_path,
    )
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(
        main_module, "run_console_loop", lambda state: pytest.fail("console must not start")
    )

    with pytest.raises(SystemExit) as exc:
        main_module.main([])
    assert exc.value.code == 1


def test_main_runs_console_loop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    settings = SimpleNamespace(
        app_name="taskman",
        log_level="DEBUG",
        log_file_enabled=False,
        data_dir=tmp_path,
        tasks_path=tmp_path / "todo-tasks.json",
    )
    seen = []
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "run_console_loop", seen.append)

    main_module.main([])

    (state,) = seen
    assert state.store.path == settings.tasks_path
    assert state.store.count_tasks() == 0
