# src/taskman/config.py

"""Centralized settings loaded from environment variables (+ optional .env and config.json).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Precedence: environment > config.json > built-in defaults.
- config.json is optional; it is looked up in /etc/taskman/ then ~/.taskman/
  unless TASKMAN_CONFIG_FILE points somewhere explicit.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKMAN"

CONFIG_FILE_NAME = "config.json"
CONFIG_SEARCH_PATHS: tuple[Path, ...] = (
    Path("/etc/taskman"),
    Path("~/.taskman").expanduser(),
)

_FILE_KEYS = frozenset({"app_name", "log_level", "data_dir", "tasks_path", "log_file_enabled"})


class ConfigError(RuntimeError):
    pass


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return _parse_bool(raw)


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def find_config_file(search_paths: tuple[Path, ...] = CONFIG_SEARCH_PATHS) -> Path | None:
    explicit = os.getenv(_k("CONFIG_FILE"))
    if explicit is not None and explicit.strip():
        return Path(explicit).expanduser()
    for directory in search_paths:
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path | None) -> dict[str, Any]:
    """
    Read a JSON config file.

    Missing file -> {}. Unreadable or malformed file -> ConfigError.
    Unknown keys are dropped with a warning.
    """
    if path is None:
        return {}
    try:
        raw = path.read_text("utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"fatal error in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")

    unknown = sorted(set(data) - _FILE_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    return {k: v for k, v in data.items() if k in _FILE_KEYS}


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_file_enabled: bool

    # ---- Local data paths ----
    data_dir: Path
    tasks_path: Path

    # Where file values came from (None = no config file found)
    config_file: Path | None = None

    @staticmethod
    def from_env(*, config_file: Path | None = None, use_dotenv: bool = True) -> "Settings":
        if use_dotenv:
            load_dotenv(override=False)

        if config_file is None:
            config_file = find_config_file()
        file_values = load_config_file(config_file)

        def file_str(key: str, default: str) -> str:
            v = file_values.get(key)
            return str(v) if v not in (None, "") else default

        def file_bool(key: str, default: bool) -> bool:
            v = file_values.get(key)
            if v is None:
                return default
            if isinstance(v, bool):
                return v
            return _parse_bool(str(v))

        app_name = _env(_k("APP_NAME"), file_str("app_name", "taskman"))
        log_level = _env(_k("LOG_LEVEL"), file_str("log_level", "INFO")).upper()
        log_file_enabled = _env_bool(_k("LOG_FILE_ENABLED"), file_bool("log_file_enabled", True))

        data_dir = _env_path(_k("DATA_DIR"), Path(file_str("data_dir", ".local/taskman")).expanduser())
        default_tasks = file_values.get("tasks_path")
        tasks_default = (
            Path(str(default_tasks)).expanduser() if default_tasks else data_dir / "todo-tasks.json"
        )
        tasks_path = _env_path(_k("TASKS_PATH"), tasks_default)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_file_enabled=log_file_enabled,
            data_dir=data_dir,
            tasks_path=tasks_path,
            config_file=config_file if config_file is not None and config_file.is_file() else None,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
