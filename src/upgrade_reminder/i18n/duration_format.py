# src/upgrade_reminder/i18n/duration_format.py

from __future__ import annotations

from datetime import timedelta

from ..core.ports import DurationFormatter
from ..tasks.time_math import normalize_dhms, split_timedelta

MAX_UNITS = 2


class UnitDurationFormatter:
    """
    Compact "largest two non-zero units" formatter.

    Units are days, hours, minutes and, only when `show_seconds` is set, seconds.
    Input is normalized first (90 minutes -> 1h 30m). All-zero input gives "0m"
    (or "0s" with seconds).
    """

    def __init__(self, day: str, hour: str, minute: str, second: str, sep: str = " ") -> None:
        self._labels = (day, hour, minute, second)
        self._sep = sep

    def format(
        self,
        days: int,
        hours: int,
        minutes: int,
        seconds: int = 0,
        show_seconds: bool = False,
    ) -> str:
        d, h, m, s = normalize_dhms(days, hours, minutes, seconds)
        values = [d, h, m] + ([s] if show_seconds else [])

        parts = [f"{v}{label}" for v, label in zip(values, self._labels) if v > 0]
        if not parts:
            return f"0{self._labels[3] if show_seconds else self._labels[2]}"
        return self._sep.join(parts[:MAX_UNITS])


class EnDurationFormatter(UnitDurationFormatter):
    def __init__(self) -> None:
        super().__init__("d", "h", "m", "s")


class ZhCnDurationFormatter(UnitDurationFormatter):
    def __init__(self) -> None:
        super().__init__("天", "时", "分", "秒")


def format_remaining(delta: timedelta, formatter: DurationFormatter, show_seconds: bool = True) -> str:
    """Format a positive remaining time. Callers label non-positive deltas themselves."""
    d, h, m, s = split_timedelta(delta)
    return formatter.format(d, h, m, s, show_seconds=show_seconds)
