# src/taskman/core/agenda.py

"""
Day agenda derived from store snapshots.

For the selected day the view has three sections:
- OVERDUE: only when the selected day is today; open tasks from anywhere in the
  store whose effective date (due day if set, else task day) is before today
- TODO: open tasks of the selected day
- Completed: completed tasks of the selected day, plus (when viewing today)
  tasks from earlier days that were completed today
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from ..tasks.ordering import sort_completed, sort_open
from ..tasks.task_models import Task, calendar_day, local_now
from .ports import TaskRepo


def effective_date(task: Task) -> date:
    if task.due is not None:
        return task.due.date()
    return task.date.date()


def is_overdue(task: Task, today: date | datetime) -> bool:
    return not task.completed and effective_date(task) < calendar_day(today)


def is_recently_completed(task: Task, today: date | datetime) -> bool:
    if task.completed_at is None:
        return False
    day = calendar_day(today)
    return task.completed_at.date() == day and task.date.date() < day


def overdue_label(task: Task, now: date | datetime | None = None) -> str:
    """Human label for an overdue row, counted in calendar days."""
    now = now or local_now()
    ref = task.due if task.due is not None else task.date
    days = (calendar_day(now) - ref.date()).days
    stamp = ref.strftime("%Y-%m-%d")
    if days <= 0:
        return f"Due today ({stamp})"
    if days == 1:
        return f"1 day overdue ({stamp})"
    return f"{days} days overdue ({stamp})"


@dataclass(slots=True)
class DayView:
    day: date
    is_today: bool
    overdue: list[Task] = field(default_factory=list)
    todo: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)

    def sections(self) -> list[tuple[str, list[Task]]]:
        out: list[tuple[str, list[Task]]] = []
        if self.is_today and self.overdue:
            out.append((f"OVERDUE ({len(self.overdue)})", self.overdue))
        out.append((f"TODO ({len(self.todo)})", self.todo))
        out.append((f"Completed ({len(self.completed)})", self.completed))
        return out

    def task_ids(self) -> list[int]:
        return [t.id for _, tasks in self.sections() for t in tasks]

    def find(self, task_id: int) -> Task | None:
        for _, tasks in self.sections():
            for t in tasks:
                if t.id == task_id:
                    return t
        return None


def build_day_view(store: TaskRepo, day: date | datetime, *, today: date | datetime | None = None) -> DayView:
    selected = calendar_day(day)
    current = calendar_day(today) if today is not None else local_now().date()
    view = DayView(day=selected, is_today=selected == current)

    done: list[Task] = []
    if view.is_today:
        overdue: list[Task] = []
        for t in store.list_tasks():
            if is_overdue(t, current):
                overdue.append(t)
            elif is_recently_completed(t, current):
                done.append(t)
        view.overdue = sort_open(overdue)

    for t in store.list_by_date(selected):
        if t.completed:
            done.append(t)
        elif not (view.is_today and t in view.overdue):
            view.todo.append(t)

    view.completed = sort_completed(done)
    return view
