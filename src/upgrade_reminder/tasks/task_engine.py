# src/upgrade_reminder/tasks/task_engine.py

"""
Task lifecycle engine.

Owns no state of its own: the caller passes the task list into every call and the
engine mutates it in place. One `tick` pass:
- flags tasks whose advance-notice instant has passed (optional),
- flags tasks that became due (exactly once, guarded by `notified`),
- purges soft-deleted / completed tasks the deletion policy releases.

Completion, soft delete and undo are explicit user actions, never time-driven.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from ..core.ports import DeletionPolicy, SortStrategy
from .deletion_policy import SimpleDeletionPolicy
from .recurrence import DEFAULT_MAX_ITERATIONS, ShouldSkip, build_next_task
from .sort_strategy import ByFinishTimeSortStrategy
from .task_models import Task
from .time_math import add_delta

if TYPE_CHECKING:
    from ..core.prefs import UserPrefs

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    ADVANCE = "advance"
    DUE = "due"


@dataclass(slots=True, frozen=True)
class TaskNotification:
    """A notification the engine wants delivered. The scheduler decides the wording."""

    task: Task
    kind: NotificationKind


@dataclass(slots=True)
class TickResult:
    notifications: list[TaskNotification] = field(default_factory=list)
    removed: list[Task] = field(default_factory=list)
    mutated: bool = False


class TaskEngine:
    def __init__(
        self,
        *,
        deletion_policy: DeletionPolicy | None = None,
        sort_strategy: SortStrategy | None = None,
        advance_notify_seconds: int = 0,
        also_notify_at_due: bool = True,
        recurrence_max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tick_min_seconds: float = 1.0,
        tick_max_seconds: float = 5.0,
        tick_guard_seconds: float = 3.0,
    ) -> None:
        self.deletion_policy = deletion_policy or SimpleDeletionPolicy()
        self.sort_strategy = sort_strategy or ByFinishTimeSortStrategy()
        self.advance_notify_seconds = max(0, int(advance_notify_seconds))
        self.also_notify_at_due = also_notify_at_due
        self.recurrence_max_iterations = recurrence_max_iterations
        self.tick_min_seconds = tick_min_seconds
        self.tick_max_seconds = max(tick_min_seconds, tick_max_seconds)
        self.tick_guard_seconds = tick_guard_seconds

    @classmethod
    def from_settings(cls, settings, *, sort_strategy: SortStrategy | None = None) -> TaskEngine:
        return cls(
            deletion_policy=SimpleDeletionPolicy(
                pending_delete_delay_seconds=settings.pending_delete_delay_seconds,
                completed_keep_seconds=settings.completed_keep_seconds,
            ),
            sort_strategy=sort_strategy,
            advance_notify_seconds=settings.advance_notify_seconds,
            also_notify_at_due=settings.also_notify_at_due,
            recurrence_max_iterations=settings.recurrence_max_iterations,
            tick_min_seconds=settings.tick_min_seconds,
            tick_max_seconds=settings.tick_max_seconds,
            tick_guard_seconds=settings.tick_guard_seconds,
        )

    def apply_prefs(self, prefs: UserPrefs) -> None:
        """Adopt the runtime-adjustable lifecycle values (advance notice, auto delete)."""
        self.advance_notify_seconds = max(0, int(prefs.advance_notify_seconds))
        self.also_notify_at_due = prefs.also_notify_at_due
        if isinstance(self.deletion_policy, SimpleDeletionPolicy):
            self.deletion_policy.set_completed_keep(prefs.auto_delete_seconds)
        else:
            logger.warning("Deletion policy %s ignores auto-delete prefs", type(self.deletion_policy).__name__)

    # ---- periodic evaluation ----

    def tick(self, tasks: list[Task], now: datetime, force: bool = False) -> TickResult:
        result = TickResult()
        advance = timedelta(seconds=self.advance_notify_seconds)

        for task in tasks:
            if task.done or task.pending_delete:
                continue

            finish = task.finish

            if advance and not task.advance_notified and finish > now and add_delta(finish, -advance) <= now:
                task.advance_notified = True
                result.mutated = True
                result.notifications.append(TaskNotification(task, NotificationKind.ADVANCE))

            if finish > now or task.notified:
                continue

            task.notified = True
            result.mutated = True
            if not self.also_notify_at_due and task.advance_notified:
                # Advance notice already went out and the user opted out of the second one.
                continue
            result.notifications.append(TaskNotification(task, NotificationKind.DUE))
            logger.debug("Task due: %s/%s finish=%s", task.account, task.name, finish)

        removed = self.purge(tasks, now, force=force)
        if removed:
            result.removed.extend(removed)
            result.mutated = True

        return result

    def purge(self, tasks: list[Task], now: datetime, force: bool = False) -> list[Task]:
        """Remove every task the deletion policy releases. Only pending_delete/done tasks qualify."""
        removed: list[Task] = []
        kept: list[Task] = []
        for task in tasks:
            if (task.pending_delete or task.done) and self.deletion_policy.should_remove(task, now, force):
                removed.append(task)
            else:
                kept.append(task)

        if removed:
            tasks[:] = kept
            logger.info("Purged %d task(s) (force=%s)", len(removed), force)
        return removed

    def next_tick_delay(self, tasks: list[Task], now: datetime) -> float:
        """
        Seconds to wait before the next tick.

        Aims a guard interval ahead of the nearest advance/due instant and clamps
        the result to [tick_min_seconds, tick_max_seconds].
        """
        nearest: datetime | None = None
        advance = timedelta(seconds=self.advance_notify_seconds)

        for task in tasks:
            if task.done or task.pending_delete:
                continue
            finish = task.finish
            candidates: list[datetime] = []
            if advance and not task.advance_notified:
                candidates.append(add_delta(finish, -advance))
            if not task.notified and (self.also_notify_at_due or not task.advance_notified):
                candidates.append(finish)
            for instant in candidates:
                if instant > now and (nearest is None or instant < nearest):
                    nearest = instant

        if nearest is None:
            return self.tick_max_seconds

        delta = (nearest - now).total_seconds() - self.tick_guard_seconds
        return min(self.tick_max_seconds, max(self.tick_min_seconds, delta))

    # ---- user actions ----

    def add(self, tasks: list[Task], task: Task) -> None:
        self.sort_strategy.insert(tasks, task)
        logger.info("Task added: %s/%s finish=%s", task.account, task.name, task.finish)

    def replace(self, tasks: list[Task], old: Task, new: Task) -> None:
        """Swap an edited task in, keeping the list ordered."""
        try:
            tasks.remove(old)
        except ValueError:
            logger.warning("replace(): task %s/%s not in list; adding", old.account, old.name)
        self.sort_strategy.insert(tasks, new)

    def reschedule(self, tasks: list[Task], task: Task, **changes) -> None:
        """Change start/duration of a listed task and move it to its new position."""
        task.reschedule(**changes)
        self.replace(tasks, task, task)

    def complete(
        self,
        tasks: list[Task],
        task: Task,
        now: datetime,
        *,
        should_skip: ShouldSkip | None = None,
    ) -> Task | None:
        """
        Mark a task done and, for an active repeat, insert its next occurrence.

        Returns the regenerated task, or None. Completing an already done task is a no-op,
        and a task that was reopened after producing its next occurrence does not produce
        another one, so the series never forks.
        """
        if task.done:
            return None

        task.done = True
        task.completed_at = now
        logger.info("Task completed: %s/%s", task.account, task.name)

        if not task.has_repeat:
            return None
        if task.regenerated:
            logger.info("Next occurrence of %s/%s already exists; not regenerating", task.account, task.name)
            return None

        nxt = build_next_task(
            task,
            now,
            should_skip=should_skip,
            max_iterations=self.recurrence_max_iterations,
        )
        if nxt is None:
            return None

        task.regenerated = True
        self.sort_strategy.insert(tasks, nxt)
        logger.info("Next occurrence of %s/%s starts %s", nxt.account, nxt.name, nxt.start)
        return nxt

    def reopen(self, task: Task) -> None:
        task.done = False
        task.completed_at = None

    def mark_pending_delete(self, task: Task, now: datetime) -> None:
        task.pending_delete = True
        task.delete_marked_at = now

    def undo_delete(self, task: Task) -> None:
        task.pending_delete = False
        task.delete_marked_at = None
