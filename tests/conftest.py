# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskman.core.board import TaskBoard
from taskman.core.state import AppState
from taskman.tasks.task_store import TaskStore

from .fakes import FakeClock

TODAY = date(2025, 3, 10)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "todo-tasks.json"


@pytest.fixture()
def store(tasks_path: Path, clock: FakeClock) -> TaskStore:
    return TaskStore(tasks_path, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path, tasks_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskman",
        log_level="INFO",
        log_file_enabled=False,
        data_dir=tmp_path / "data",
        tasks_path=tasks_path,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """
    AppState wired with a real file-backed store and a fixed "today".

    NOTE: the store is real (tmp_path) because its durability is part of what we test.
    """
    return AppState(
        settings=settings,
        store=store,
        board=TaskBoard(store, today=lambda: TODAY),
    )
