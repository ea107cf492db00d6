# tests/test_bootstrap.py

from __future__ import annotations

import dataclasses
import importlib.util
from datetime import timedelta
from pathlib import Path

import pytest

from upgrade_reminder.cli.bootstrap import create_initial_state
from upgrade_reminder.config import Settings
from upgrade_reminder.connectors.console_connector import run_console_loop
from upgrade_reminder.connectors.notifiers import ConsoleNotifier, LogNotifier
from upgrade_reminder.tasks.task_models import Task
from upgrade_reminder.tasks.task_store import TaskStore

from .conftest import T0


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("UPGRADE_LANGUAGE", "zh-CN")
    monkeypatch.setenv("UPGRADE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("UPGRADE_TASKS_DB_PATH", raising=False)
    monkeypatch.setenv("UPGRADE_PENDING_DELETE_DELAY_SECONDS", "-5")
    monkeypatch.setenv("UPGRADE_ALSO_NOTIFY_AT_DUE", "no")
    monkeypatch.setenv("UPGRADE_TICK_MAX_SECONDS", "abc")
    monkeypatch.setenv("UPGRADE_ADVANCE_NOTIFY_SECONDS", "300")

    s = Settings.from_env()
    assert s.language == "zh-CN"
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.pending_delete_delay_seconds == 0
    assert s.also_notify_at_due is False
    assert s.tick_max_seconds == 5.0
    assert s.advance_notify_seconds == 300


def test_create_initial_state_loads_tasks_in_order(settings, clock, notifier) -> None:
    store = TaskStore(settings.tasks_db_path)
    store.save(
        [
            Task(name="late", start=T0, days=2),
            Task(name="early", start=T0, minutes=5),
            Task(name="mid", start=T0, hours=3),
        ]
    )

    state = create_initial_state(settings=settings, notifier=notifier, clock=clock)
    assert [t.name for t in state.tasks] == ["early", "mid", "late"]
    assert state.notifier is notifier
    assert state.clock.now() == T0
    assert state.locale.language == "en"


def test_create_initial_state_headless_uses_log_notifier(settings) -> None:
    state = create_initial_state(settings=settings)
    assert isinstance(state.notifier, LogNotifier)
    assert state.tasks == []


def test_create_initial_state_applies_saved_prefs(settings) -> None:
    TaskStore(settings.tasks_db_path).save_prefs(
        {"accounts": ["main", "alt"], "advance_notify_seconds": 120, "auto_delete_seconds": None}
    )

    state = create_initial_state(settings=settings)
    assert state.prefs.accounts == ["main", "alt"]
    assert state.prefs.task_presets == []
    assert state.prefs.also_notify_at_due is True
    assert state.engine.advance_notify_seconds == 120
    assert state.engine.deletion_policy.completed_keep is None
    assert state.prefs_store is state.task_store


def test_save_tasks_persists_current_list(settings, clock, notifier) -> None:
    state = create_initial_state(settings=settings, notifier=notifier, clock=clock)
    state.engine.add(state.tasks, Task(name="x", start=T0, hours=1))
    state.save_tasks()
    assert [t.finish for t in TaskStore(settings.tasks_db_path).load()] == [T0 + timedelta(hours=1)]


def test_console_loop_runs_commands_until_exit(state, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    lines = iter(["", "/add main barracks 0 1 0", "hello", "/nope", "/exit", "/list"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Added: main | barracks" in out
    assert "Commands start with '/'" in out
    assert "Unknown command: /nope" in out
    assert [t.name for t in state.tasks] == ["barracks"]
    # loop stopped at /exit
    assert next(lines) == "/list"


def test_console_loop_stops_on_eof(state, monkeypatch: pytest.MonkeyPatch) -> None:
    def eof(_prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    run_console_loop(state)


def test_every_setting_is_documented() -> None:
    path = Path(__file__).resolve().parents[1] / "config.example.py"
    spec = importlib.util.spec_from_file_location("config_example", path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    documented = set(module.ENV_VARS)
    expected = {f"UPGRADE_{f.name.upper()}" for f in dataclasses.fields(Settings)}
    assert documented == expected


def test_notifiers_deliver(capsys, caplog: pytest.LogCaptureFixture) -> None:
    ConsoleNotifier().notify("[Due] main", "barracks finished at 10:00")
    assert "[Due] main: barracks finished at 10:00" in capsys.readouterr().out

    with caplog.at_level("INFO", logger="upgrade_reminder.connectors.notifiers"):
        LogNotifier().notify("[Soon] main", "wall finishes at 11:00")
    assert "NOTIFY [Soon] main | wall finishes at 11:00" in caplog.text
