# src/taskman/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the presentation side.

Adapters depend on this Protocol instead of the concrete TaskStore,
which keeps them testable against in-memory fakes.
"""

from datetime import date, datetime
from typing import Protocol

from ..tasks.task_models import Task, UpdateOptions


class TaskRepo(Protocol):
    # Reads (shared)
    def get(self, task_id: int) -> Task: ...
    def list_tasks(self) -> list[Task]: ...
    def list_by_date(self, day: date | datetime) -> list[Task]: ...

    # Mutations (exclusive + durable before returning)
    def add(
            self,
            title: str,
            notes: str = "",
            due: datetime | None = None,
            date: date | datetime | None = None,
    ) -> Task: ...

    def update(self, task_id: int, options: UpdateOptions) -> Task: ...
    def mark_completed(self, task_id: int, completed: bool) -> Task: ...
    def toggle_completed(self, task_id: int) -> Task: ...
    def delete(self, task_id: int) -> None: ...
