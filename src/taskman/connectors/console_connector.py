# src/taskman/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

_YES = {"y", "yes"}


def _make_confirm(read: InputFn) -> Callable[[str], bool]:
    def confirm(question: str) -> bool:
        try:
            answer = read(f"{question} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in _YES

    return confirm


def run_console_loop(state: AppState, *, read: InputFn = input, write: OutputFn = print) -> None:
    logger.info("Console connector started (tasks=%s).", state.store.path)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskman"))

    write(f"[{app_name}] Type /help for commands, /exit to quit.\n")
    write(command_registry.handle(state, "/list") or "")

    confirm = _make_confirm(read)

    while True:
        try:
            line = read(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, line, confirm=confirm)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        write(reply)

    logger.info("Console connector finished.")
