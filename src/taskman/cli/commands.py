# src/taskman/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import cast

from ..core.agenda import DayView, is_overdue, overdue_label
from ..core.events import DELETE_CHOICE, ChoiceResult, TaskFormResult, next_day, prev_day
from ..core.state import AppState
from ..tasks.task_errors import TaskStoreError
from ..tasks.task_models import CLEAR, SetTo, Task, UpdateOptions

ConfirmFn = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], ConfirmFn | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        confirm: ConfirmFn | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Store errors are reported in the reply; the store itself is left consistent.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, confirm)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskStoreError as e:
            logger.warning("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def _fmt_ts(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task(task: Task, *, overdue_at: date | None = None) -> str:
    mark = "x" if task.completed else " "
    line = f"#{task.id} [{mark}] {task.title}"
    if task.completed_at is not None:
        line += f"  (done {_fmt_ts(task.completed_at)})"
    elif overdue_at is not None:
        line += f"  ({overdue_label(task, overdue_at)})"
    elif task.due is not None:
        line += f"  (due {_fmt_ts(task.due)})"
    return line


def render_day_view(view: DayView, *, as_of: date | None = None) -> str:
    if view.is_today:
        header = "TODAY'S TASKS"
    else:
        header = view.day.strftime("%A, %B %d").replace(" 0", " ") + " TASKS"
    lines = [header]
    for label, tasks in view.sections():
        lines.append(f" {label}")
        if not tasks:
            lines.append("   (no items, use /add to add)")
        overdue_at = as_of if tasks is view.overdue else None
        for t in tasks:
            lines.append("   " + format_task(t, overdue_at=overdue_at))
    return "\n".join(lines)


# ---- argument parsing ----


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_day(raw: str, current: date, today: date) -> date | None:
    word = raw.lower()
    if word == "today":
        return today
    if word in ("next", "+"):
        return next_day(current).day
    if word in ("prev", "-"):
        return prev_day(current).day
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def _parse_due(args: list[str]) -> datetime | None:
    text = " ".join(args).strip()
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).astimezone()
        except ValueError:
            continue
    return None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    view = state.board.refresh()
    return render_day_view(view, as_of=state.board.today())


def cmd_all(state: AppState, args: list[str]) -> str:
    tasks = state.store.list_tasks()
    if not tasks:
        return "No tasks yet."
    current = state.board.today()
    return "\n".join(
        f"{t.date.strftime('%Y-%m-%d')}  {format_task(t)}{'  OVERDUE' if is_overdue(t, current) else ''}"
        for t in tasks
    )


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day              -> show the selected day
    /day today        -> jump to today
    /day next | prev  -> move one day
    /day YYYY-MM-DD   -> jump to a date
    """
    if args:
        day = _parse_day(args[0], state.board.day, state.board.today())
        if day is None:
            return "Usage: /day today | next | prev | YYYY-MM-DD"
        state.board.select_day(day)
    return cmd_list(state, [])


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [| notes]  (adds to the selected day)"""
    text = " ".join(args)
    title, _, notes = text.partition("|")
    if not title.strip():
        return "Usage: /add <title> [| notes]"
    task = state.board.submit_form(
        TaskFormResult(accepted=True, title=title.strip(), notes=notes.strip())
    )
    if task is None:
        return f"Error: {state.board.error}"
    return f"Added {format_task(task)}"


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    t = state.store.get(task_id)
    lines = [
        format_task(t),
        f"  date:    {t.date.strftime('%Y-%m-%d')}",
        f"  created: {_fmt_ts(t.created_at)}",
        f"  updated: {_fmt_ts(t.updated_at)}",
    ]
    if t.due is not None:
        lines.append(f"  due:     {_fmt_ts(t.due)}")
    if t.notes:
        lines.append(f"  notes:   {t.notes}")
    return "\n".join(lines)


def _set_completed(state: AppState, args: list[str], completed: bool, usage: str) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return usage
    task = state.store.mark_completed(task_id, completed)
    state.board.refresh()
    return format_task(task)


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, True, "Usage: /done <id>")


def cmd_undo(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, False, "Usage: /undo <id>")


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    task = state.board.toggle(task_id)
    if task is None:
        return f"Error: {state.board.error}"
    return format_task(task)


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /edit <id> <new title>"
    task = state.store.update(task_id, UpdateOptions(title=" ".join(args[1:])))
    state.board.refresh()
    return f"Updated {format_task(task)}"


def cmd_notes(state: AppState, args: list[str]) -> str:
    """/notes <id> <text>  (no text clears the notes)"""
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /notes <id> <text>"
    task = state.store.update(task_id, UpdateOptions(notes=" ".join(args[1:])))
    state.board.refresh()
    return f"Notes {'set' if task.notes else 'cleared'} for #{task.id}."


def cmd_due(state: AppState, args: list[str]) -> str:
    """
    /due <id> YYYY-MM-DD [HH:MM]  -> set due time
    /due <id> clear               -> remove due time
    """
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /due <id> <YYYY-MM-DD [HH:MM] | clear>"
    if args[1].lower() == "clear":
        options = UpdateOptions(due=CLEAR)
    else:
        due = _parse_due(args[1:])
        if due is None:
            return "Usage: /due <id> <YYYY-MM-DD [HH:MM] | clear>"
        options = UpdateOptions(due=SetTo(due))
    task = state.store.update(task_id, options)
    state.board.refresh()
    return f"Updated {format_task(task)}"


def cmd_delete(state: AppState, args: list[str], confirm: ConfirmFn | None = None) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    question = state.board.request_delete(task_id)
    confirmed = bool(confirm(question)) if confirm is not None else False
    deleted = state.board.confirm(ChoiceResult(choice_id=DELETE_CHOICE, confirmed=confirmed))
    if deleted:
        return f"Deleted #{task_id}."
    if state.board.error:
        return f"Error: {state.board.error}"
    return "Cancelled."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the selected day.", aliases=["ls"])
registry.register("all", cmd_all, help_text="Show every task in display order.")
registry.register("day", cmd_day, help_text="Select a day: /day today | next | prev | YYYY-MM-DD.")
registry.register("add", cmd_add, help_text="Add a task to the selected day: /add <title> [| notes].", aliases=["a"])
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("undo", cmd_undo, help_text="Mark a task not completed: /undo <id>.")
registry.register("toggle", cmd_toggle, help_text="Flip completion: /toggle <id>.", aliases=["t"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <id> <title>.")
registry.register("notes", cmd_notes, help_text="Set or clear notes: /notes <id> [text].")
registry.register("due", cmd_due, help_text="Set or clear due time: /due <id> <YYYY-MM-DD [HH:MM] | clear>.")
registry.register("del", cmd_delete, help_text="Delete a task (asks first): /del <id>.", aliases=["d", "rm"])
