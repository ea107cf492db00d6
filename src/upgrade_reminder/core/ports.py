# src/upgrade_reminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine and scheduler depend on Protocols instead of concrete implementations.
This keeps storage/notification/clock swappable and makes testing deterministic.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class Clock(Protocol):
    """Source of "now" for every tick; injected so tests can freeze time."""
    def now(self) -> datetime: ...


class Notifier(Protocol):
    """Fire-and-forget delivery (tray toast, console line, log...). Never awaited or retried."""
    def notify(self, title: str, body: str, timeout_ms: int = 3000) -> None: ...


class TaskRepo(Protocol):
    """
    Whole-list task persistence.

    - load(): never raises; missing or unreadable storage gives []
    - save(): overwrites everything atomically; failures are swallowed by the store
    """

    def load(self) -> list[Task]: ...
    def save(self, tasks: Iterable[Task]) -> None: ...


class PrefsRepo(Protocol):
    """Key/value preference storage; same failure rules as TaskRepo."""

    def load_prefs(self) -> dict[str, Any]: ...
    def save_prefs(self, values: Mapping[str, Any]) -> None: ...


class SortStrategy(Protocol):
    def sort(self, tasks: list[Task]) -> None: ...
    def insert(self, tasks: list[Task], item: Task) -> int: ...


class DeletionPolicy(Protocol):
    def should_remove(self, task: Task, now: datetime, force: bool = False) -> bool: ...


class DurationFormatter(Protocol):
    def format(
            self,
            days: int,
            hours: int,
            minutes: int,
            seconds: int = 0,
            show_seconds: bool = False,
    ) -> str: ...
