# src/taskman/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type
from datetime import datetime
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def as_aware(dt: datetime) -> datetime:
    """Attach the local zone to naive datetimes; aware values pass through unchanged."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.astimezone()
    return dt


def calendar_day(value: date_type | datetime) -> date_type:
    """Year/month/day of a value, ignoring time-of-day (in the value's own zone)."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Instances are immutable: the store hands out values, never references into
    its own collection. `completed_at` is None while the task is open.
    """

    id: int
    date: datetime
    title: str
    created_at: datetime
    updated_at: datetime
    notes: str = ""
    due: datetime | None = None
    completed_at: datetime | None = None

    @property
    def completed(self) -> bool:
        return self.completed_at is not None

    @property
    def day(self) -> date_type:
        return self.date.date()


class FieldEdit(StrEnum):
    """Non-value edit intents for optional fields."""

    UNCHANGED = "unchanged"
    CLEAR = "clear"


UNCHANGED = FieldEdit.UNCHANGED
CLEAR = FieldEdit.CLEAR


@dataclass(frozen=True, slots=True)
class SetTo(Generic[T]):
    value: T


DueEdit = FieldEdit | SetTo[datetime]


@dataclass(frozen=True, slots=True)
class UpdateOptions:
    """
    Field edits for TaskStore.update().

    title/notes: None leaves the field as is, a string replaces it
    (an empty title is rejected, not ignored).
    due: UNCHANGED, CLEAR or SetTo(datetime).
    """

    title: str | None = None
    notes: str | None = None
    due: DueEdit = UNCHANGED
