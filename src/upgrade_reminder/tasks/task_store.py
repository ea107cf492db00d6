# src/upgrade_reminder/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from .task_models import DEFAULT_ACCOUNT, RepeatSpec, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    The whole list is the unit of persistence (a small key/value `prefs` table lives
    in the same file):
    - load() reads every row in list order; it never raises
    - save() replaces all rows inside one transaction, so a failed save leaves the
      previous snapshot intact; failures are logged, not raised

    The schema is created if missing; missing columns are added with ALTER TABLE.
    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.Error:
            # Unreadable file: load() will come back empty, save() will log its failure.
            logger.exception("TaskStore schema setup failed db=%s", self._db_path)
            return
        logger.info("TaskStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    position INTEGER NOT NULL,
                    account TEXT NOT NULL DEFAULT 'Default',
                    name TEXT NOT NULL DEFAULT '',
                    start TEXT NOT NULL,
                    days INTEGER NOT NULL DEFAULT 0,
                    hours INTEGER NOT NULL DEFAULT 0,
                    minutes INTEGER NOT NULL DEFAULT 0,
                    notified INTEGER NOT NULL DEFAULT 0,
                    done INTEGER NOT NULL DEFAULT 0,
                    completed_at TEXT,
                    pending_delete INTEGER NOT NULL DEFAULT 0,
                    delete_marked_at TEXT
                )
                """
            )

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS prefs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore: added column %s", name)

            add_col("advance_notified", "INTEGER NOT NULL DEFAULT 0")
            add_col("repeat", "TEXT")
            add_col("occurrence", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "TEXT")
            add_col("regenerated", "INTEGER NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _ts_to_str(ts: datetime | None) -> str | None:
        return ts.isoformat() if ts is not None else None

    @staticmethod
    def _str_to_ts(s: str | None) -> datetime | None:
        if not s:
            return None
        return datetime.fromisoformat(s)

    @staticmethod
    def _repeat_to_str(spec: RepeatSpec | None) -> str | None:
        if spec is None:
            return None
        return json.dumps(spec.to_dict(), ensure_ascii=False)

    @staticmethod
    def _str_to_repeat(s: str | None) -> RepeatSpec | None:
        if not s:
            return None
        val = json.loads(s)
        return RepeatSpec.from_dict(val) if isinstance(val, dict) else None

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        start = self._str_to_ts(row["start"])
        done = bool(row["done"])
        pending_delete = bool(row["pending_delete"])
        completed_at = self._str_to_ts(row["completed_at"])
        delete_marked_at = self._str_to_ts(row["delete_marked_at"])

        task = Task(
            account=str(row["account"] or DEFAULT_ACCOUNT),
            name=str(row["name"] or ""),
            start=start,
            days=int(row["days"] or 0),
            hours=int(row["hours"] or 0),
            minutes=int(row["minutes"] or 0),
            notified=bool(row["notified"]),
            advance_notified=bool(row["advance_notified"]),
            done=done,
            completed_at=completed_at if done else None,
            pending_delete=pending_delete,
            delete_marked_at=delete_marked_at if pending_delete else None,
            repeat=self._str_to_repeat(row["repeat"]),
            occurrence=int(row["occurrence"] or 0),
            regenerated=bool(row["regenerated"]),
        )
        created_at = self._str_to_ts(row["created_at"])
        if created_at is not None:
            task.created_at = created_at
        return task

    def _task_to_params(self, position: int, t: Task) -> tuple[Any, ...]:
        return (
            position,
            t.account,
            t.name,
            self._ts_to_str(t.start),
            t.days,
            t.hours,
            t.minutes,
            int(t.notified),
            int(t.advance_notified),
            int(t.done),
            self._ts_to_str(t.completed_at),
            int(t.pending_delete),
            self._ts_to_str(t.delete_marked_at),
            self._repeat_to_str(t.repeat),
            t.occurrence,
            self._ts_to_str(t.created_at),
            int(t.regenerated),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def load(self) -> list[Task]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM tasks ORDER BY position ASC").fetchall()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to load tasks from %s", self._db_path)
            return []

        out: list[Task] = []
        for row in rows:
            try:
                out.append(self._row_to_task(row))
            except Exception:
                logger.warning("Skipping unreadable task row position=%s", row["position"], exc_info=True)
        logger.debug("Loaded %d task(s)", len(out))
        return out

    def save(self, tasks: Iterable[Task]) -> None:
        params = [self._task_to_params(i, t) for i, t in enumerate(tasks)]
        try:
            conn = self._get_conn()
        except Exception:
            logger.exception("Failed to open %s for saving", self._db_path)
            return
        try:
            with conn:
                conn.execute("DELETE FROM tasks")
                conn.executemany(
                    """
                    INSERT INTO tasks(
                        position, account, name, start, days, hours, minutes,
                        notified, advance_notified, done, completed_at,
                        pending_delete, delete_marked_at, repeat, occurrence, created_at, regenerated
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    params,
                )
            logger.debug("Saved %d task(s)", len(params))
        except Exception:
            logger.exception("Failed to save tasks to %s (previous snapshot kept)", self._db_path)
        finally:
            conn.close()

    # ---- preferences ----

    def load_prefs(self) -> dict[str, Any]:
        """Stored preference values by key (JSON-decoded). Never raises; {} on failure."""
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT key, value FROM prefs").fetchall()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to load prefs from %s", self._db_path)
            return {}

        out: dict[str, Any] = {}
        for row in rows:
            try:
                out[str(row["key"])] = json.loads(row["value"])
            except (TypeError, ValueError):
                logger.warning("Skipping unreadable pref %s", row["key"])
        return out

    def save_prefs(self, values: Mapping[str, Any]) -> None:
        params = [(k, json.dumps(v, ensure_ascii=False)) for k, v in values.items()]
        try:
            conn = self._get_conn()
        except Exception:
            logger.exception("Failed to open %s for saving prefs", self._db_path)
            return
        try:
            with conn:
                conn.executemany(
                    """
                    INSERT INTO prefs(key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    params,
                )
            logger.debug("Saved %d pref(s)", len(params))
        except Exception:
            logger.exception("Failed to save prefs to %s", self._db_path)
        finally:
            conn.close()
