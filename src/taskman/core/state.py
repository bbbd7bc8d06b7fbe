# src/taskman/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskStore
from .board import TaskBoard


@dataclass
class AppState:
    # Settings kept on the state for easy access from commands/connectors.
    settings: object

    store: TaskStore
    board: TaskBoard
