# tests/test_board.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from taskman.core.board import TaskBoard
from taskman.core.events import (
    DELETE_CHOICE,
    ChoiceResult,
    DaySelected,
    TaskFormResult,
    next_day,
    prev_day,
    today,
)
from taskman.tasks import task_store as task_store_module
from taskman.tasks.task_store import TaskStore

from .conftest import TODAY


@pytest.fixture()
def board(store: TaskStore) -> TaskBoard:
    return TaskBoard(store, today=lambda: TODAY)


def test_day_navigation_events() -> None:
    assert next_day(date(2025, 2, 28)) == DaySelected(day=date(2025, 3, 1))
    assert prev_day(datetime(2025, 3, 1, 23, 0)) == DaySelected(day=date(2025, 2, 28))
    assert isinstance(today().day, date)


def test_board_starts_on_today(board: TaskBoard) -> None:
    assert board.day == TODAY
    assert board.view.is_today
    assert board.error is None


def test_day_selected_rebuilds_view(board: TaskBoard, store: TaskStore) -> None:
    other = TODAY + timedelta(days=3)
    task = store.add("later", date=other)

    board.handle(DaySelected(day=other))
    assert board.day == other
    assert not board.view.is_today
    assert [t.id for t in board.view.todo] == [task.id]


def test_form_result_adds_to_selected_day(board: TaskBoard, store: TaskStore) -> None:
    board.handle(DaySelected(day=TODAY + timedelta(days=1)))
    board.handle(TaskFormResult(accepted=True, title="Call mom", notes="after 6pm"))

    (task,) = store.list_tasks()
    assert task.title == "Call mom"
    assert task.notes == "after 6pm"
    assert task.day == TODAY + timedelta(days=1)
    assert [t.id for t in board.view.todo] == [task.id]


@pytest.mark.parametrize(
    "result",
    [
        TaskFormResult(accepted=False, title="Cancelled"),
        TaskFormResult(accepted=True, title="   "),
    ],
)
def test_form_result_noop_cases(board: TaskBoard, store: TaskStore, result: TaskFormResult) -> None:
    board.handle(result)
    assert store.list_tasks() == []
    assert board.error is None


def test_delete_requires_confirmation(board: TaskBoard, store: TaskStore) -> None:
    task = store.add("Disposable", date=TODAY)
    board.refresh()

    question = board.request_delete(task.id)
    assert question == 'Are you sure you want to delete "Disposable"?'

    board.handle(ChoiceResult(choice_id=DELETE_CHOICE, confirmed=False))
    assert board.pending_delete is None
    assert store.get(task.id) == task

    board.request_delete(task.id)
    board.handle(ChoiceResult(choice_id=DELETE_CHOICE, confirmed=True))
    assert store.list_tasks() == []
    assert board.view.todo == []


def test_unrelated_choice_is_ignored(board: TaskBoard, store: TaskStore) -> None:
    task = store.add("Keep")
    board.request_delete(task.id)
    assert not board.confirm(ChoiceResult(choice_id="quit", confirmed=True))
    assert board.pending_delete == task.id
    assert store.count_tasks() == 1


def test_request_delete_for_unknown_id_still_asks(board: TaskBoard) -> None:
    assert board.request_delete(404) == "Are you sure you want to delete this task?"
    board.handle(ChoiceResult(choice_id=DELETE_CHOICE, confirmed=True))
    assert board.error is not None
    assert "404" in board.error


def test_toggle_moves_task_between_sections(board: TaskBoard, store: TaskStore) -> None:
    task = store.add("Flip", date=TODAY)
    board.refresh()

    board.toggle(task.id)
    assert [t.id for t in board.view.completed] == [task.id]
    board.toggle(task.id)
    assert [t.id for t in board.view.todo] == [task.id]


def test_store_failure_keeps_previous_view(
    board: TaskBoard, store: TaskStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    task = store.add("Sticky", date=TODAY)
    board.refresh()
    view_before = board.view

    def boom(src, dst):
        raise OSError("read-only filesystem")

    monkeypatch.setattr(task_store_module.os, "replace", boom)

    assert board.toggle(task.id) is None
    assert board.error is not None and "rename" in board.error
    assert board.view is view_before
    assert not store.get(task.id).completed

    monkeypatch.undo()
    assert board.toggle(task.id) is not None
    assert board.error is None


def test_unknown_event_type_is_rejected(board: TaskBoard) -> None:
    with pytest.raises(TypeError):
        board.handle("not an event")  # type: ignore[arg-type]
