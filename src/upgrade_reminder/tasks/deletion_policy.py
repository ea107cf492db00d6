# src/upgrade_reminder/tasks/deletion_policy.py

from __future__ import annotations

from datetime import datetime, timedelta

from .task_models import Task

DEFAULT_PENDING_DELETE_DELAY_SECONDS = 3
DEFAULT_COMPLETED_KEEP_SECONDS = 60


class SimpleDeletionPolicy:
    """
    Time-based purge rules for soft-deleted and completed tasks.

    - pending_delete: removed once `pending_delete_delay_seconds` passed since it was marked
    - done:           removed once `completed_keep_seconds` passed since completion;
                      with `completed_keep_seconds=None` completed tasks stay until forced
    - force:          removes any pending_delete/done task right away

    pending_delete wins over done, so a completed task that is then soft-deleted
    follows the (shorter) pending-delete window.
    """

    def __init__(
        self,
        pending_delete_delay_seconds: int = DEFAULT_PENDING_DELETE_DELAY_SECONDS,
        completed_keep_seconds: int | None = DEFAULT_COMPLETED_KEEP_SECONDS,
    ) -> None:
        self.pending_delete_delay = timedelta(seconds=max(0, pending_delete_delay_seconds))
        self.completed_keep: timedelta | None = None
        self.set_completed_keep(completed_keep_seconds)

    def set_completed_keep(self, seconds: int | None) -> None:
        self.completed_keep = None if seconds is None else timedelta(seconds=max(0, seconds))

    def should_remove(self, task: Task, now: datetime, force: bool = False) -> bool:
        if task.pending_delete:
            if force:
                return True
            mark = task.delete_marked_at or datetime.min
            return now - mark >= self.pending_delete_delay

        if task.done:
            if force:
                return True
            if task.completed_at is None or self.completed_keep is None:
                return False
            return now - task.completed_at >= self.completed_keep

        return False
