# src/upgrade_reminder/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..i18n.locales import Locale
from ..tasks.task_engine import TaskEngine
from ..tasks.task_models import Task
from .ports import Clock, Notifier, PrefsRepo, TaskRepo
from .prefs import UserPrefs


@dataclass
class AppState:
    # Settings live on the state so commands and the scheduler read the same object.
    settings: Any

    engine: TaskEngine
    task_store: TaskRepo
    notifier: Notifier
    clock: Clock
    locale: Locale

    tasks: list[Task] = field(default_factory=list)

    prefs: UserPrefs = field(default_factory=UserPrefs)
    prefs_store: PrefsRepo | None = None

    # Serializes the tick with user commands; every mutation of `tasks` happens under it.
    lock: threading.RLock = field(default_factory=threading.RLock)

    def save_tasks(self) -> None:
        with self.lock:
            self.task_store.save(list(self.tasks))

    def save_prefs(self) -> None:
        """Push prefs into the engine and persist them."""
        with self.lock:
            self.engine.apply_prefs(self.prefs)
            if self.prefs_store is not None:
                self.prefs_store.save_prefs(self.prefs.to_dict())
