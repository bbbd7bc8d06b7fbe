# src/taskman/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import replace
from datetime import date as date_type
from datetime import datetime
from pathlib import Path

from .ordering import filter_by_day, sort_for_display
from .rwlock import ReadWriteLock
from .task_codec import decode_document, encode_document
from .task_errors import StoreDecodeError, StoreIOError, TaskNotFoundError, TaskValidationError
from .task_models import CLEAR, UNCHANGED, SetTo, Task, UpdateOptions, as_aware, local_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_TASKS_FILE = "todo-tasks.json"
_TEMP_PREFIX = ".tasks-"
_TEMP_SUFFIX = ".tmp"


def _require_title(title: str) -> None:
    if not isinstance(title, str) or title == "":
        raise TaskValidationError("title is required")


def _sync_directory(directory: Path) -> None:
    # Best-effort: some platforms/filesystems refuse to open or fsync a directory.
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        logger.debug("Directory sync skipped (open failed) dir=%s", directory, exc_info=True)
        return
    try:
        os.fsync(fd)
    except OSError:
        logger.debug("Directory sync failed dir=%s", directory, exc_info=True)
    finally:
        os.close(fd)


class TaskStore:
    """
    JSON-file task store.

    Persistence:
    - the whole collection is rewritten on every mutation
    - write temp file in the same directory -> fsync -> close -> os.replace()
    - the live file is always either the previous or the new complete document

    Thread-safety:
    - one shared/exclusive lock guards the collection
    - reads (get/list_tasks/list_by_date) share it
    - mutations hold it exclusively across the in-memory edit AND the file write,
      so nothing a reader sees is ahead of what is on disk
    - a failed write leaves the in-memory collection as it was before the call

    Records are immutable Task values; nothing handed out aliases store state.
    """

    def __init__(self, path: str | Path = DEFAULT_TASKS_FILE, *, clock: Clock | None = None) -> None:
        self._path = Path(path)
        self._clock: Clock = clock or local_now
        self._lock = ReadWriteLock()
        self._tasks: list[Task] = []
        self._next_id = 1
        self._load()
        logger.info(
            "TaskStore ready path=%s total=%s next_id=%s",
            self._path,
            len(self._tasks),
            self._next_id,
        )

    # ---- low-level helpers ----

    def _load(self) -> None:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("TaskStore file %s not found; starting empty.", self._path)
            return
        except UnicodeDecodeError as e:
            raise StoreDecodeError(self._path, str(e)) from e
        except OSError as e:
            raise StoreIOError("open", self._path, str(e)) from e

        tasks = decode_document(text, path=self._path)
        self._tasks = tasks
        # max+1 rather than len+1: gaps left by deletes are never refilled
        self._next_id = max((t.id for t in tasks), default=0) + 1

    def _now(self) -> datetime:
        return as_aware(self._clock())

    def _index_locked(self, task_id: int) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _write_file_locked(self, tasks: list[Task]) -> None:
        """
        Atomically replace the store file with `tasks`.

        Caller must hold the write lock. On failure the temp file is removed,
        the live file is left alone and StoreIOError is raised.
        """
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("TaskStore persist failed step=mkdir path=%s: %s", self._path, e)
            raise StoreIOError("mkdir", directory, str(e)) from e

        try:
            fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, suffix=_TEMP_SUFFIX, dir=directory)
        except OSError as e:
            logger.warning("TaskStore persist failed step=create temp path=%s: %s", self._path, e)
            raise StoreIOError("create temp", directory, str(e)) from e

        tmp_path = Path(tmp_name)
        step = "write temp"
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(encode_document(tasks))
                fh.flush()
                step = "sync temp"
                os.fsync(fh.fileno())
                step = "close temp"
            step = "rename"
            os.replace(tmp_path, self._path)
        except (OSError, ValueError) as e:
            # ValueError: text the codec cannot encode, e.g. lone surrogates
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            logger.warning("TaskStore persist failed step=%s path=%s: %s", step, self._path, e)
            raise StoreIOError(step, self._path, str(e)) from e
        except BaseException:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise

        _sync_directory(directory)

    def _commit_locked(self, tasks: list[Task], next_id: int) -> None:
        # Disk first: in-memory state only moves once the new document is durable.
        self._write_file_locked(tasks)
        self._tasks = tasks
        self._next_id = next_id

    def _replace_locked(self, index: int, task: Task) -> None:
        tasks = list(self._tasks)
        tasks[index] = task
        self._commit_locked(tasks, self._next_id)

    # ---- public API ----

    @property
    def path(self) -> Path:
        return self._path

    @property
    def next_id(self) -> int:
        with self._lock.read():
            return self._next_id

    def count_tasks(self) -> int:
        with self._lock.read():
            return len(self._tasks)

    def save(self) -> None:
        """Rewrite the file from the current collection (normally done by every mutation)."""
        with self._lock.write():
            self._write_file_locked(self._tasks)

    def add(
        self,
        title: str,
        notes: str = "",
        due: datetime | None = None,
        date: date_type | datetime | None = None,
    ) -> Task:
        _require_title(title)

        with self._lock.write():
            now = self._now()
            if date is None:
                task_date = now
            elif isinstance(date, datetime):
                task_date = as_aware(date)
            else:
                task_date = as_aware(datetime(date.year, date.month, date.day))

            task = Task(
                id=self._next_id,
                date=task_date,
                title=title,
                notes=notes or "",
                due=as_aware(due) if due is not None else None,
                created_at=now,
                updated_at=now,
            )
            self._commit_locked([*self._tasks, task], self._next_id + 1)

        logger.debug("Task added id=%s date=%s due=%s", task.id, task.date, task.due)
        return task

    def get(self, task_id: int) -> Task:
        with self._lock.read():
            return self._tasks[self._index_locked(task_id)]

    def update(self, task_id: int, options: UpdateOptions) -> Task:
        with self._lock.write():
            index = self._index_locked(task_id)
            current = self._tasks[index]

            title = current.title
            if options.title is not None:
                _require_title(options.title)
                title = options.title

            notes = current.notes if options.notes is None else options.notes

            due = current.due
            if options.due is CLEAR:
                due = None
            elif isinstance(options.due, SetTo):
                if not isinstance(options.due.value, datetime):
                    raise TypeError("SetTo(...) for due must wrap a datetime")
                due = as_aware(options.due.value)
            elif options.due is not UNCHANGED:
                raise TypeError(f"unsupported due edit: {options.due!r}")

            updated = replace(current, title=title, notes=notes, due=due, updated_at=self._now())
            self._replace_locked(index, updated)

        logger.debug("Task updated id=%s fields=%s", task_id, options)
        return updated

    def mark_completed(self, task_id: int, completed: bool) -> Task:
        with self._lock.write():
            index = self._index_locked(task_id)
            current = self._tasks[index]
            now = self._now()
            if completed:
                # already-completed tasks keep their original completion time
                completed_at = current.completed_at or now
            else:
                completed_at = None
            updated = replace(current, completed_at=completed_at, updated_at=now)
            self._replace_locked(index, updated)

        logger.debug("Task id=%s completed=%s", task_id, updated.completed)
        return updated

    def toggle_completed(self, task_id: int) -> Task:
        with self._lock.write():
            index = self._index_locked(task_id)
            current = self._tasks[index]
            now = self._now()
            completed_at = None if current.completed else now
            updated = replace(current, completed_at=completed_at, updated_at=now)
            self._replace_locked(index, updated)

        logger.debug("Task id=%s toggled completed=%s", task_id, updated.completed)
        return updated

    def delete(self, task_id: int) -> None:
        with self._lock.write():
            index = self._index_locked(task_id)
            tasks = self._tasks[:index] + self._tasks[index + 1 :]
            self._commit_locked(tasks, self._next_id)

        logger.debug("Task deleted id=%s", task_id)

    def list_tasks(self) -> list[Task]:
        """
        All tasks in display order:
        open first (due ascending, no due last, then id),
        then completed (most recent completion first, then id).
        """
        with self._lock.read():
            snapshot = list(self._tasks)
        return sort_for_display(snapshot)

    def list_by_date(self, day: date_type | datetime) -> list[Task]:
        """Tasks whose date falls on `day` (calendar day, time ignored), in display order."""
        with self._lock.read():
            snapshot = filter_by_day(self._tasks, day)
        return sort_for_display(snapshot)


def load(path: str | Path, *, clock: Clock | None = None) -> TaskStore:
    """
    Open (or initialize) a store backed by `path`.

    A missing file is a fresh, empty store; the file appears on the first mutation.
    Raises StoreDecodeError for malformed documents and StoreIOError if the file
    exists but cannot be read.
    """
    return TaskStore(path, clock=clock)
