# src/upgrade_reminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/engine/locale/notifier/clock),
- overlays persisted user prefs on the settings defaults,
- loads persisted tasks and puts them in engine order.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.notifiers import ConsoleNotifier, LogNotifier
from ..core.clock import SystemClock
from ..core.ports import Clock, Notifier
from ..core.prefs import UserPrefs
from ..core.state import AppState
from ..i18n.locales import get_locale
from ..tasks.sort_strategy import ByFinishTimeSortStrategy
from ..tasks.task_engine import TaskEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    notifier: Notifier | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    locale = get_locale(settings.language)
    engine = TaskEngine.from_settings(
        settings,
        sort_strategy=ByFinishTimeSortStrategy(text_key=locale.sort_key),
    )

    if notifier is None:
        notifier = ConsoleNotifier() if settings.console_enabled else LogNotifier()

    store = TaskStore(settings.tasks_db_path)
    prefs = UserPrefs.from_dict(store.load_prefs(), fallback=UserPrefs.defaults(settings))
    engine.apply_prefs(prefs)

    state = AppState(
        settings=settings,
        engine=engine,
        task_store=store,
        prefs=prefs,
        prefs_store=store,
        notifier=notifier,
        clock=clock or SystemClock(),
        locale=locale,
    )

    tasks = state.task_store.load()
    engine.sort_strategy.sort(tasks)
    state.tasks = tasks
    logger.info("Loaded %d task(s) (language=%s)", len(tasks), locale.language)
    return state
