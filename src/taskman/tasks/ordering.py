# src/taskman/tasks/ordering.py

"""
Display ordering shared by the store listings and the agenda.

Open tasks come first, by due time ascending with undated ones last, ties by id.
Completed tasks follow, most recently completed first, ties by id.
All sorts are stable.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date as date_type
from datetime import datetime

from .task_models import Task, calendar_day


def _due_key(task: Task) -> tuple[bool, datetime | int, int]:
    # (has no due, due, id): the middle slot is only compared when both sides agree on the first
    if task.due is None:
        return (True, 0, task.id)
    return (False, task.due, task.id)


def sort_open(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=_due_key)


def sort_completed(tasks: Iterable[Task]) -> list[Task]:
    out = sorted(tasks, key=lambda t: t.id)
    # reverse=True keeps equal completion times in ascending-id order
    out.sort(key=lambda t: t.completed_at, reverse=True)  # type: ignore[arg-type,return-value]
    return out


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    open_tasks: list[Task] = []
    done: list[Task] = []
    for t in tasks:
        (done if t.completed else open_tasks).append(t)
    return sort_open(open_tasks) + sort_completed(done)


def filter_by_day(tasks: Iterable[Task], day: date_type | datetime) -> list[Task]:
    target = calendar_day(day)
    return [t for t in tasks if calendar_day(t.date) == target]
