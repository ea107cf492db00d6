# src/upgrade_reminder/i18n/date_format.py

from __future__ import annotations

from datetime import datetime
from enum import Enum


class DateOrder(str, Enum):
    YMD = "ymd"
    DMY = "dmy"
    MDY = "mdy"


_FULL = {
    DateOrder.YMD: "%Y-%m-%d",
    DateOrder.DMY: "%d-%m-%Y",
    DateOrder.MDY: "%m-%d-%Y",
}

_NO_YEAR = {
    DateOrder.YMD: "%m-%d",
    DateOrder.DMY: "%d-%m",
    DateOrder.MDY: "%m-%d",
}


def date_order_for(language: str) -> DateOrder:
    """zh/ja/ko and en-CA read year first, en-US month first, everything else day first."""
    if not language or not language.strip():
        return DateOrder.DMY
    tag = language.replace("_", "-").lower()
    lang = tag.split("-", 1)[0]

    if lang in ("zh", "ja", "ko"):
        return DateOrder.YMD
    if lang == "en":
        if tag.startswith("en-us"):
            return DateOrder.MDY
        if tag.startswith("en-ca"):
            return DateOrder.YMD
    return DateOrder.DMY


class DateFormatter:
    def __init__(self, language: str) -> None:
        self.order = date_order_for(language)

    def format_date(self, dt: datetime, include_year: bool = True) -> str:
        fmt = _FULL[self.order] if include_year else _NO_YEAR[self.order]
        return dt.strftime(fmt)

    def format_time(self, dt: datetime, include_seconds: bool = False) -> str:
        # 24h clock, hour without leading zero
        hm = f"{dt.hour}:{dt.minute:02d}"
        return f"{hm}:{dt.second:02d}" if include_seconds else hm

    def format_datetime(self, dt: datetime, include_year: bool = True, include_seconds: bool = False) -> str:
        return f"{self.format_date(dt, include_year)} {self.format_time(dt, include_seconds)}"

    def format_smart(self, dt: datetime, now: datetime) -> str:
        """Time only on the same day, no year within the same year, full date otherwise."""
        time_part = self.format_time(dt, include_seconds=dt.second != 0)
        if dt.date() == now.date():
            return time_part
        return f"{self.format_date(dt, include_year=dt.year != now.year)} {time_part}"
