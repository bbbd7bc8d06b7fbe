# src/taskman/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- loads the task store and wires it into the board and AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.board import TaskBoard
from ..core.state import AppState
from ..tasks.task_store import load

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    Store load errors (StoreDecodeError/StoreIOError) propagate: without a
    readable store there is nothing to show.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = load(settings.tasks_path)
    board = TaskBoard(store)
    logger.debug("State ready tasks_path=%s day=%s", settings.tasks_path, board.day)
    return AppState(settings=settings, store=store, board=board)
