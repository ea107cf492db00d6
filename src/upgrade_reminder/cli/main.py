# src/upgrade_reminder/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the tick timer, then runs the
console REPL in the main thread (or just waits for a signal when the console
is disabled).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging
from ..tasks.task_scheduler import TickTimer

logger = logging.getLogger(__name__)


def _shutdown(state, timer: TickTimer) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        timer.stop()
    except Exception:
        logger.exception("Failed to stop tick timer.")

    # TaskStore swallows its own failures; this is the final snapshot.
    state.save_tasks()


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.data_dir, console_level=level_from_name(settings.log_level))

    logger.info("Starting %s (log file %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)
    timer = TickTimer(state)
    timer.start()

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            signal.signal(signal.SIGINT, _handle_signal)
            signal.signal(signal.SIGTERM, _handle_signal)
            logger.info("Console disabled. Ticking in background. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        _shutdown(state, timer)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
