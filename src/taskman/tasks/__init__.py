"""
Task subsystem.

Components:
- task_models.py: Task value type, tri-state edit types, UpdateOptions
- task_errors.py: typed errors raised by the store
- task_codec.py: strict JSON document encode/decode
- rwlock.py: shared/exclusive lock
- ordering.py: display ordering and calendar-day filtering
- task_store.py: file-backed store with atomic replace
"""

from .task_errors import (
    StoreDecodeError,
    StoreIOError,
    TaskNotFoundError,
    TaskStoreError,
    TaskValidationError,
)
from .task_models import CLEAR, UNCHANGED, FieldEdit, SetTo, Task, UpdateOptions
from .task_store import TaskStore, load

__all__ = [
    "CLEAR",
    "UNCHANGED",
    "FieldEdit",
    "SetTo",
    "StoreDecodeError",
    "StoreIOError",
    "Task",
    "TaskNotFoundError",
    "TaskStore",
    "TaskStoreError",
    "TaskValidationError",
    "UpdateOptions",
    "load",
]
