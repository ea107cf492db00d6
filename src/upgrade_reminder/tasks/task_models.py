# src/upgrade_reminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

from .time_math import add_dhms

DEFAULT_ACCOUNT = "Default"


class RepeatMode(StrEnum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    @classmethod
    def from_db(cls, raw: str | None) -> RepeatMode:
        if not raw:
            return cls.NONE
        try:
            return cls(raw)
        except ValueError:
            return cls.NONE


def _non_negative(**parts: int) -> None:
    for name, value in parts.items():
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True, slots=True)
class RepeatCustom:
    """Custom period, down to seconds. At least one field must be > 0 to be a real period."""

    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __post_init__(self) -> None:
        _non_negative(
            years=self.years,
            months=self.months,
            days=self.days,
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.years or self.months or self.days or self.hours or self.minutes or self.seconds)


@dataclass(frozen=True, slots=True)
class SkipRule:
    """After every `remind_times` reminders, skip `skip_times` occurrences."""

    remind_times: int = 0
    skip_times: int = 0

    def __post_init__(self) -> None:
        _non_negative(remind_times=self.remind_times, skip_times=self.skip_times)

    @property
    def is_active(self) -> bool:
        return self.remind_times > 0 and self.skip_times > 0

    def skips_occurrence(self, index: int) -> bool:
        """True if the occurrence with this 0-based index falls into a skip window."""
        if not self.is_active:
            return False
        return index % (self.remind_times + self.skip_times) >= self.remind_times


@dataclass(frozen=True, slots=True)
class RepeatSpec:
    mode: RepeatMode = RepeatMode.NONE
    custom: RepeatCustom | None = None
    end_at: datetime | None = None
    skip: SkipRule | None = None
    offset_seconds: int = 0

    @property
    def is_repeat(self) -> bool:
        if self.mode == RepeatMode.NONE:
            return False
        if self.mode == RepeatMode.CUSTOM:
            return self.custom is not None and not self.custom.is_empty
        return True

    @property
    def has_end(self) -> bool:
        return self.end_at is not None

    @property
    def has_skip(self) -> bool:
        return self.skip is not None and self.skip.is_active

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"mode": self.mode.value, "offset_seconds": self.offset_seconds}
        if self.custom is not None:
            c = self.custom
            out["custom"] = {
                "years": c.years,
                "months": c.months,
                "days": c.days,
                "hours": c.hours,
                "minutes": c.minutes,
                "seconds": c.seconds,
            }
        if self.end_at is not None:
            out["end_at"] = self.end_at.isoformat()
        if self.skip is not None:
            out["skip"] = {"remind_times": self.skip.remind_times, "skip_times": self.skip.skip_times}
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RepeatSpec | None:
        if not data:
            return None
        custom_raw = data.get("custom")
        skip_raw = data.get("skip")
        end_raw = data.get("end_at")
        return cls(
            mode=RepeatMode.from_db(data.get("mode")),
            custom=RepeatCustom(**custom_raw) if isinstance(custom_raw, dict) else None,
            end_at=datetime.fromisoformat(end_raw) if end_raw else None,
            skip=SkipRule(**skip_raw) if isinstance(skip_raw, dict) else None,
            offset_seconds=int(data.get("offset_seconds") or 0),
        )


@dataclass(eq=False, slots=True)
class Task:
    """
    One tracked upgrade.

    `finish` is derived from `start` and the duration on every read, so it can never
    disagree with them. Identity is the instance itself (eq=False).
    """

    account: str = DEFAULT_ACCOUNT
    name: str = ""
    start: datetime | None = None
    days: int = 0
    hours: int = 0
    minutes: int = 0

    notified: bool = False
    advance_notified: bool = False
    done: bool = False
    completed_at: datetime | None = None
    pending_delete: bool = False
    delete_marked_at: datetime | None = None

    repeat: RepeatSpec | None = None
    occurrence: int = 0
    # Set once this task produced its next occurrence; a reopened task never produces another.
    regenerated: bool = False

    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        _non_negative(days=self.days, hours=self.hours, minutes=self.minutes)
        if self.start is None:
            self.start = self.created_at

    @property
    def finish(self) -> datetime:
        assert self.start is not None
        return add_dhms(self.start, self.days, self.hours, self.minutes)

    @property
    def has_repeat(self) -> bool:
        return self.repeat is not None and self.repeat.is_repeat

    def remaining(self, now: datetime) -> timedelta:
        return self.finish - now

    def reschedule(
        self,
        *,
        start: datetime | None = None,
        days: int | None = None,
        hours: int | None = None,
        minutes: int | None = None,
    ) -> None:
        """Change start and/or duration; the due flags are reset since finish moved."""
        new_days = self.days if days is None else days
        new_hours = self.hours if hours is None else hours
        new_minutes = self.minutes if minutes is None else minutes
        _non_negative(days=new_days, hours=new_hours, minutes=new_minutes)

        if start is not None:
            self.start = start
        self.days, self.hours, self.minutes = new_days, new_hours, new_minutes
        self.notified = False
        self.advance_notified = False
