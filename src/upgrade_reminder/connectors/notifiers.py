# src/upgrade_reminder/connectors/notifiers.py

from __future__ import annotations

import logging
from datetime import datetime

logger = logging.getLogger(__name__)


class LogNotifier:
    """Notifier that only writes to the log (headless runs)."""

    def notify(self, title: str, body: str, timeout_ms: int = 3000) -> None:
        logger.info("NOTIFY %s | %s", title, body)


class ConsoleNotifier:
    """Prints notifications into the interactive console, with a local timestamp."""

    def notify(self, title: str, body: str, timeout_ms: int = 3000) -> None:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        print(f"\n[{ts}] {title}: {body}", flush=True)
        logger.debug("Console notification shown (timeout hint %sms): %s", timeout_ms, title)
