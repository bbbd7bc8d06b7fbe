# src/taskman/cli/main.py

"""
CLI entrypoint.

Initializes settings and logging, loads the task store, then runs the
console loop in the main thread. A store that cannot be loaded is fatal.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .. import __version__
from ..cli.bootstrap import create_initial_state
from ..config import ConfigError, get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_errors import TaskStoreError

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="taskman", description="A day-by-day personal task tracker.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    _parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as e:
        print(f"taskman: {e}", file=sys.stderr)
        sys.exit(1)

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        file_enabled=settings.log_file_enabled,
    )

    logger.info("Starting %s %s...", settings.app_name, __version__)

    try:
        state = create_initial_state(settings=settings)
    except (TaskStoreError, OSError):
        logger.exception("Cannot load task store from %s", settings.tasks_path)
        sys.exit(1)

    try:
        run_console_loop(state)
    finally:
        # every mutation is already durable; nothing to flush here
        logger.info("Bye.")


if __name__ == "__main__":
    main()
