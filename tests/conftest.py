# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from upgrade_reminder.core.prefs import UserPrefs
from upgrade_reminder.core.state import AppState
from upgrade_reminder.i18n.locales import get_locale
from upgrade_reminder.tasks.sort_strategy import ByFinishTimeSortStrategy
from upgrade_reminder.tasks.task_engine import TaskEngine

from .fakes import FakeClock, FakeNotifier, FakeTaskRepo

T0 = datetime(2025, 1, 31, 10, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the engine.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="upgrade-reminder-test",
        log_level="DEBUG",
        language="en",
        console_enabled=False,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        tick_min_seconds=1.0,
        tick_max_seconds=5.0,
        tick_guard_seconds=3.0,
        pending_delete_delay_seconds=3,
        completed_keep_seconds=60,
        advance_notify_seconds=0,
        also_notify_at_due=True,
        notify_timeout_ms=3000,
        recurrence_max_iterations=1000,
        default_account="Default",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def engine(settings: SimpleNamespace) -> TaskEngine:
    return TaskEngine.from_settings(settings)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    clock: FakeClock,
    notifier: FakeNotifier,
    repo: FakeTaskRepo,
) -> AppState:
    """AppState wired with deterministic fakes (in-memory repo, fixed clock, recording notifier)."""
    locale = get_locale(settings.language)
    return AppState(
        settings=settings,
        engine=TaskEngine.from_settings(
            settings, sort_strategy=ByFinishTimeSortStrategy(text_key=locale.sort_key)
        ),
        task_store=repo,
        notifier=notifier,
        clock=clock,
        locale=locale,
        prefs=UserPrefs.defaults(settings),
        prefs_store=repo,
    )
