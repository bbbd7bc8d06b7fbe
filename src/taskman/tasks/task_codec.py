# src/taskman/tasks/task_codec.py

"""
JSON document codec for the task file.

On-disk shape:

    {"tasks": [{"id": 1, "date": "...", "title": "...", "notes": "...",
                "due": "...", "created_at": "...", "updated_at": "...",
                "completed_at": "..."}]}

Timestamps are RFC 3339 with a UTC offset. Empty notes and null due/completed_at
are omitted on write. Decoding is strict: unknown keys anywhere are an error.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from .task_errors import StoreDecodeError
from .task_models import Task

_TOP_LEVEL_KEYS = frozenset({"tasks"})
_REQUIRED_KEYS = frozenset({"id", "date", "title", "created_at", "updated_at"})
_OPTIONAL_KEYS = frozenset({"notes", "due", "completed_at"})
_TASK_KEYS = _REQUIRED_KEYS | _OPTIONAL_KEYS


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat()


def task_to_dict(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": task.id,
        "date": format_timestamp(task.date),
        "title": task.title,
    }
    if task.notes:
        out["notes"] = task.notes
    if task.due is not None:
        out["due"] = format_timestamp(task.due)
    out["created_at"] = format_timestamp(task.created_at)
    out["updated_at"] = format_timestamp(task.updated_at)
    if task.completed_at is not None:
        out["completed_at"] = format_timestamp(task.completed_at)
    return out


def encode_document(tasks: Iterable[Task]) -> str:
    payload = {"tasks": [task_to_dict(t) for t in tasks]}
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def _parse_timestamp(raw: Any, *, field: str, index: int, path: Path) -> datetime:
    if not isinstance(raw, str):
        raise StoreDecodeError(path, f"tasks[{index}].{field}: expected RFC 3339 string")
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError as e:
        raise StoreDecodeError(path, f"tasks[{index}].{field}: {e}") from e
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise StoreDecodeError(path, f"tasks[{index}].{field}: missing UTC offset in {raw!r}")
    return dt


def _optional_timestamp(raw: dict[str, Any], field: str, index: int, path: Path) -> datetime | None:
    value = raw.get(field)
    if value is None:
        return None
    return _parse_timestamp(value, field=field, index=index, path=path)


def task_from_dict(raw: Any, *, index: int, path: Path) -> Task:
    if not isinstance(raw, dict):
        raise StoreDecodeError(path, f"tasks[{index}]: expected an object")

    unknown = sorted(set(raw) - _TASK_KEYS)
    if unknown:
        raise StoreDecodeError(path, f"tasks[{index}]: unknown field(s) {', '.join(unknown)}")
    missing = sorted(_REQUIRED_KEYS - set(raw))
    if missing:
        raise StoreDecodeError(path, f"tasks[{index}]: missing field(s) {', '.join(missing)}")

    task_id = raw["id"]
    # bool is an int subclass; reject it explicitly
    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 1:
        raise StoreDecodeError(path, f"tasks[{index}].id: expected a positive integer")

    title = raw["title"]
    if not isinstance(title, str) or title == "":
        raise StoreDecodeError(path, f"tasks[{index}].title: expected a non-empty string")

    notes = raw.get("notes")
    if notes is None:
        notes = ""
    elif not isinstance(notes, str):
        raise StoreDecodeError(path, f"tasks[{index}].notes: expected a string")

    return Task(
        id=task_id,
        date=_parse_timestamp(raw["date"], field="date", index=index, path=path),
        title=title,
        notes=notes,
        due=_optional_timestamp(raw, "due", index, path),
        created_at=_parse_timestamp(raw["created_at"], field="created_at", index=index, path=path),
        updated_at=_parse_timestamp(raw["updated_at"], field="updated_at", index=index, path=path),
        completed_at=_optional_timestamp(raw, "completed_at", index, path),
    )


def decode_document(text: str, *, path: Path) -> list[Task]:
    """
    Parse a whole store document.

    An empty (or whitespace-only) file and `"tasks": null` both mean "no tasks".
    """
    if not text.strip():
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StoreDecodeError(path, str(e)) from e

    if not isinstance(data, dict):
        raise StoreDecodeError(path, "top level must be an object")

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise StoreDecodeError(path, f"unknown top-level field(s) {', '.join(unknown)}")

    raw_tasks = data.get("tasks")
    if raw_tasks is None:
        return []
    if not isinstance(raw_tasks, list):
        raise StoreDecodeError(path, "tasks must be an array")

    tasks = [task_from_dict(raw, index=i, path=path) for i, raw in enumerate(raw_tasks)]

    seen: set[int] = set()
    for t in tasks:
        if t.id in seen:
            raise StoreDecodeError(path, f"duplicate task id {t.id}")
        seen.add(t.id)
    return tasks
