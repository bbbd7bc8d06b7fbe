# src/taskman/tasks/task_errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for everything the task store raises."""


class TaskNotFoundError(TaskStoreError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"task not found: id={task_id}")
        self.task_id = task_id


class TaskValidationError(TaskStoreError, ValueError):
    pass


class StoreIOError(TaskStoreError):
    """
    Reading or writing the store file failed at `step`.

    On a failed write the live file is untouched. The original OSError is chained as __cause__.
    """

    def __init__(self, step: str, path: object, detail: str = "") -> None:
        msg = f"{step} failed for {path}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.step = step
        self.path = path


class StoreDecodeError(TaskStoreError, ValueError):
    def __init__(self, path: object, detail: str) -> None:
        super().__init__(f"decode store {path}: {detail}")
        self.path = path
        self.detail = detail
