# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from upgrade_reminder.tasks.task_models import Task


class FakeClock:
    """Manually advanced clock for deterministic ticks."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass(slots=True)
class SentNotification:
    title: str
    body: str
    timeout_ms: int


@dataclass(slots=True)
class FakeNotifier:
    """Records notifications instead of showing them."""

    sent: list[SentNotification] = field(default_factory=list)

    def notify(self, title: str, body: str, timeout_ms: int = 3000) -> None:
        self.sent.append(SentNotification(title=title, body=body, timeout_ms=timeout_ms))


class FakeTaskRepo:
    """In-memory TaskRepo + PrefsRepo; keeps every saved snapshot for assertions."""

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks = list(tasks or [])
        self.saves: list[list[Task]] = []
        self.prefs: dict[str, Any] = {}
        self.prefs_saves = 0

    def load(self) -> list[Task]:
        return list(self.tasks)

    def save(self, tasks: Iterable[Task]) -> None:
        snapshot = list(tasks)
        self.saves.append(snapshot)
        self.tasks = snapshot

    def load_prefs(self) -> dict[str, Any]:
        return dict(self.prefs)

    def save_prefs(self, values: Mapping[str, Any]) -> None:
        self.prefs.update(values)
        self.prefs_saves += 1
