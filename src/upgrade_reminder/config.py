# src/upgrade_reminder/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Stores receive their paths from Settings at construction (no global path state).
- Every tunable of the task engine has a default matching the desktop app.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "UPGRADE"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    language: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Tick timer ----
    tick_min_seconds: float
    tick_max_seconds: float
    tick_guard_seconds: float

    # ---- Lifecycle ----
    pending_delete_delay_seconds: int
    completed_keep_seconds: int
    advance_notify_seconds: int
    also_notify_at_due: bool
    notify_timeout_ms: int
    recurrence_max_iterations: int
    default_account: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "upgrade-reminder")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        language = _env(_k("LANGUAGE"), "en")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/upgrade_reminder"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        tick_min_seconds = _env_float(_k("TICK_MIN_SECONDS"), 1.0)
        tick_max_seconds = _env_float(_k("TICK_MAX_SECONDS"), 5.0)
        tick_guard_seconds = _env_float(_k("TICK_GUARD_SECONDS"), 3.0)

        # NOTE: 3 seconds is short for an "undo", but it is what the desktop app shipped with.
        pending_delete_delay_seconds = _env_int(_k("PENDING_DELETE_DELAY_SECONDS"), 3)
        completed_keep_seconds = _env_int(_k("COMPLETED_KEEP_SECONDS"), 60)
        advance_notify_seconds = _env_int(_k("ADVANCE_NOTIFY_SECONDS"), 0)
        also_notify_at_due = _env_bool(_k("ALSO_NOTIFY_AT_DUE"), True)
        notify_timeout_ms = _env_int(_k("NOTIFY_TIMEOUT_MS"), 3000)
        recurrence_max_iterations = _env_int(_k("RECURRENCE_MAX_ITERATIONS"), 1000)
        default_account = _env(_k("DEFAULT_ACCOUNT"), "Default")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            language=language,
            console_enabled=console_enabled,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            tick_min_seconds=tick_min_seconds,
            tick_max_seconds=tick_max_seconds,
            tick_guard_seconds=tick_guard_seconds,
            pending_delete_delay_seconds=max(0, pending_delete_delay_seconds),
            completed_keep_seconds=max(0, completed_keep_seconds),
            advance_notify_seconds=max(0, advance_notify_seconds),
            also_notify_at_due=also_notify_at_due,
            notify_timeout_ms=max(0, notify_timeout_ms),
            recurrence_max_iterations=max(1, recurrence_max_iterations),
            default_account=default_account,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
