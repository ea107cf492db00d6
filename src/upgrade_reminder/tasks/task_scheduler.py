# src/upgrade_reminder/tasks/task_scheduler.py

from __future__ import annotations

"""
Tick scheduler.

A small polling loop that, on every tick:
- reads "now" from the injected clock,
- runs the lifecycle engine over the task list (under the state lock),
- persists the list when the tick changed anything,
- hands notification texts to the injected notifier.

The wait between ticks adapts to the nearest due/advance instant (1..5 s by default).
TickTimer runs the loop on a background thread; start/stop are idempotent.
"""

import asyncio
import contextlib
import logging
import threading

from ..core.state import AppState
from ..i18n.locales import Locale
from .task_engine import NotificationKind, TaskNotification, TickResult

logger = logging.getLogger(__name__)


def build_message(locale: Locale, notification: TaskNotification, now) -> tuple[str, str]:
    """Title/body for one notification, in the configured language."""
    task = notification.task
    name = task.name or locale.text("task.unnamed")
    finish = locale.dates.format_smart(task.finish, now)

    prefix = "notify.advance" if notification.kind == NotificationKind.ADVANCE else "notify.due"
    title = locale.text(f"{prefix}.title", account=task.account)
    body = locale.text(f"{prefix}.body", name=name, finish=finish)
    return title, body


def tick_once(state: AppState, *, force: bool = False) -> TickResult:
    """One evaluation pass: engine tick, persist on change, then notify outside the lock."""
    with state.lock:
        now = state.clock.now()
        result = state.engine.tick(state.tasks, now, force=force)
        if result.mutated:
            state.save_tasks()
        messages = [build_message(state.locale, n, now) for n in result.notifications]

    timeout_ms = int(getattr(state.settings, "notify_timeout_ms", 3000))
    for title, body in messages:
        try:
            state.notifier.notify(title, body, timeout_ms)
        except Exception:
            logger.exception("notify failed title=%s", title)

    if result.removed:
        logger.info("Tick removed %d task(s)", len(result.removed))
    return result


async def run_task_scheduler(
        state: AppState,
        *,
        interval_seconds: float | None = None,
) -> None:
    """
    Tick forever.

    With interval_seconds=None the delay comes from engine.next_tick_delay(); otherwise
    the fixed interval is used. To stop the scheduler, cancel the coroutine/task.
    """
    while True:
        try:
            tick_once(state)
        except Exception:
            logger.exception("tick failed")

        if interval_seconds is not None:
            delay = max(0.01, float(interval_seconds))
        else:
            try:
                with state.lock:
                    delay = state.engine.next_tick_delay(state.tasks, state.clock.now())
            except Exception:
                logger.exception("next_tick_delay failed")
                delay = 1.0

        await asyncio.sleep(delay)


class TickTimer:
    """
    Runs run_task_scheduler on a dedicated thread with its own event loop.

    start() while running and stop() while stopped are no-ops, so there is never
    more than one timer for a state.
    """

    def __init__(self, state: AppState, *, interval_seconds: float | None = None) -> None:
        self._state = state
        self._interval = interval_seconds
        self._guard = threading.Lock()
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        with self._guard:
            if self.is_running:
                return False
            ready = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(ready,), name="tick-timer", daemon=True
            )
            self._thread.start()
            ready.wait(timeout=5.0)
            logger.info("Tick timer started.")
            return True

    def _run(self, ready: threading.Event) -> None:
        loop = asyncio.new_event_loop()
        self._loop = loop
        try:
            self._task = loop.create_task(
                run_task_scheduler(self._state, interval_seconds=self._interval)
            )
            ready.set()
            with contextlib.suppress(asyncio.CancelledError):
                loop.run_until_complete(self._task)
        finally:
            self._task = None
            self._loop = None
            loop.close()

    def stop(self, timeout: float = 5.0) -> bool:
        with self._guard:
            thread = self._thread
            if thread is None or not thread.is_alive():
                self._thread = None
                return False

            loop, task = self._loop, self._task
            if loop is not None and task is not None:
                # Loop may already be closing; nothing left to cancel then.
                with contextlib.suppress(RuntimeError):
                    loop.call_soon_threadsafe(task.cancel)

            thread.join(timeout)
            if thread.is_alive():
                # Still inside a tick; keep the handle so start() cannot spawn a second timer.
                logger.warning("Tick timer thread did not stop within %.1fs", timeout)
                return True
            self._thread = None
            logger.info("Tick timer stopped.")
            return True
