# src/upgrade_reminder/core/clock.py

from __future__ import annotations

from datetime import datetime


class SystemClock:
    """Host wall clock (naive local time, no timezone conversion)."""

    def now(self) -> datetime:
        return datetime.now()
