# src/taskman/core/board.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from ..tasks.task_errors import TaskStoreError
from ..tasks.task_models import Task, local_now
from .agenda import DayView, build_day_view
from .events import DELETE_CHOICE, ChoiceResult, DaySelected, Event, TaskFormResult
from .ports import TaskRepo

logger = logging.getLogger(__name__)

TodayFn = Callable[[], date]


def _local_today() -> date:
    return local_now().date()


class TaskBoard:
    """
    Presentation adapter between the views and the task store.

    Owns the "selected day" and the derived DayView. Store failures never
    propagate out of here: they are logged, kept in `error`, and the previous
    view stays as it was so the user can retry.
    """

    def __init__(self, store: TaskRepo, *, day: date | None = None, today: TodayFn | None = None) -> None:
        self.store = store
        self._today: TodayFn = today or _local_today
        self.day: date = day or self._today()
        self.view: DayView = DayView(day=self.day, is_today=True)
        self.error: str | None = None
        self.pending_delete: int | None = None
        self.refresh()

    # ---- helpers ----

    def _fail(self, action: str, err: TaskStoreError) -> None:
        logger.warning("%s failed: %s", action, err)
        self.error = str(err)

    def today(self) -> date:
        return self._today()

    def refresh(self) -> DayView:
        self.view = build_day_view(self.store, self.day, today=self._today())
        return self.view

    # ---- events ----

    def handle(self, event: Event) -> None:
        if isinstance(event, DaySelected):
            self.select_day(event.day)
        elif isinstance(event, TaskFormResult):
            self.submit_form(event)
        elif isinstance(event, ChoiceResult):
            self.confirm(event)
        else:
            raise TypeError(f"unsupported event: {event!r}")

    def select_day(self, day: date | datetime) -> None:
        self.day = day.date() if isinstance(day, datetime) else day
        self.refresh()

    def submit_form(self, result: TaskFormResult) -> Task | None:
        if not result.accepted or not result.title.strip():
            return None
        try:
            task = self.store.add(result.title, result.notes, None, self.day)
        except TaskStoreError as e:
            self._fail("add", e)
            return None
        self.error = None
        self.refresh()
        return task

    def request_delete(self, task_id: int) -> str:
        """Remember which task to delete and return the confirmation question."""
        self.pending_delete = task_id
        label = "this task"
        try:
            label = f'"{self.store.get(task_id).title}"'
        except TaskStoreError:
            logger.debug("request_delete: title lookup failed id=%s", task_id, exc_info=True)
        return f"Are you sure you want to delete {label}?"

    def confirm(self, result: ChoiceResult) -> bool:
        """Apply a confirmation answer. Returns True if something was deleted."""
        if result.choice_id != DELETE_CHOICE or self.pending_delete is None:
            return False
        task_id, self.pending_delete = self.pending_delete, None
        if not result.confirmed:
            return False
        try:
            self.store.delete(task_id)
        except TaskStoreError as e:
            self._fail("delete", e)
            return False
        self.error = None
        self.refresh()
        return True

    def toggle(self, task_id: int) -> Task | None:
        try:
            task = self.store.toggle_completed(task_id)
        except TaskStoreError as e:
            self._fail("toggle", e)
            return None
        self.error = None
        self.refresh()
        return task
