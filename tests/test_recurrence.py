# tests/test_recurrence.py

from __future__ import annotations

from datetime import datetime, timedelta

from upgrade_reminder.tasks.recurrence import build_next_task, next_occurrence
from upgrade_reminder.tasks.task_models import (
    RepeatCustom,
    RepeatMode,
    RepeatSpec,
    SkipRule,
    Task,
)

JAN31 = datetime(2025, 1, 31, 10, 0)


def test_daily_weekly_monthly_yearly() -> None:
    assert next_occurrence(RepeatSpec(mode=RepeatMode.DAILY), JAN31) == datetime(2025, 2, 1, 10, 0)
    assert next_occurrence(RepeatSpec(mode=RepeatMode.WEEKLY), JAN31) == datetime(2025, 2, 7, 10, 0)
    assert next_occurrence(RepeatSpec(mode=RepeatMode.MONTHLY), JAN31) == datetime(2025, 2, 28, 10, 0)
    leap = datetime(2024, 2, 29, 9, 30)
    assert next_occurrence(RepeatSpec(mode=RepeatMode.YEARLY), leap) == datetime(2025, 2, 28, 9, 30)


def test_custom_is_calendar_aware() -> None:
    spec = RepeatSpec(mode=RepeatMode.CUSTOM, custom=RepeatCustom(months=1, days=10, hours=2))
    assert next_occurrence(spec, JAN31) == datetime(2025, 3, 10, 12, 0)


def test_no_repeat_and_empty_custom_give_nothing() -> None:
    assert next_occurrence(None, JAN31) is None
    assert next_occurrence(RepeatSpec(), JAN31) is None
    empty = RepeatSpec(mode=RepeatMode.CUSTOM, custom=RepeatCustom())
    assert next_occurrence(empty, JAN31) is None


def test_end_boundary_stops_series() -> None:
    spec = RepeatSpec(mode=RepeatMode.DAILY, end_at=datetime(2025, 2, 1, 9, 59))
    assert next_occurrence(spec, JAN31) is None
    spec = RepeatSpec(mode=RepeatMode.DAILY, end_at=datetime(2025, 2, 1, 10, 0))
    assert next_occurrence(spec, JAN31) == datetime(2025, 2, 1, 10, 0)


def test_skip_predicate_defers_to_next_step() -> None:
    # Jan 31 2025 is a Friday; skip weekends -> Monday Feb 3
    def is_weekend(candidate: datetime) -> bool:
        return candidate.weekday() >= 5

    spec = RepeatSpec(mode=RepeatMode.DAILY)
    assert next_occurrence(spec, JAN31, should_skip=is_weekend) == datetime(2025, 2, 3, 10, 0)


def test_skip_does_not_drift_month_end() -> None:
    seen: list[datetime] = []

    def skip_first(candidate: datetime) -> bool:
        seen.append(candidate)
        return len(seen) == 1

    spec = RepeatSpec(mode=RepeatMode.MONTHLY)
    # Feb 28 skipped -> Mar 31 (anchored on Jan 31), not Mar 28
    assert next_occurrence(spec, JAN31, should_skip=skip_first) == datetime(2025, 3, 31, 10, 0)


def test_skip_is_bounded() -> None:
    calls = 0

    def always(_candidate: datetime) -> bool:
        nonlocal calls
        calls += 1
        return True

    spec = RepeatSpec(mode=RepeatMode.CUSTOM, custom=RepeatCustom(seconds=1))
    assert next_occurrence(spec, JAN31, should_skip=always, max_iterations=1000) is None
    assert calls == 1000


def test_skip_stops_at_end_boundary() -> None:
    spec = RepeatSpec(mode=RepeatMode.DAILY, end_at=datetime(2025, 2, 5, 0, 0))
    assert next_occurrence(spec, JAN31, should_skip=lambda _c: True) is None


def test_offset_shifts_next_start() -> None:
    spec = RepeatSpec(mode=RepeatMode.DAILY, offset_seconds=-60)
    assert next_occurrence(spec, JAN31) == datetime(2025, 2, 1, 9, 59)


def test_saturated_candidate_ends_series() -> None:
    spec = RepeatSpec(mode=RepeatMode.YEARLY)
    assert next_occurrence(spec, datetime(9999, 3, 1)) is None


def test_build_next_task_keeps_duration_and_identity_fields() -> None:
    spec = RepeatSpec(mode=RepeatMode.DAILY)
    done = Task(
        account="main",
        name="town hall",
        start=JAN31 - timedelta(hours=3),
        hours=3,
        minutes=15,
        repeat=spec,
        notified=True,
        done=True,
        completed_at=JAN31,
    )
    nxt = build_next_task(done, JAN31)
    assert nxt is not None
    # previous finish = 10:15, +1 day
    assert nxt.start == datetime(2025, 2, 1, 10, 15)
    assert nxt.finish == datetime(2025, 2, 1, 13, 30)
    assert (nxt.account, nxt.name, nxt.days, nxt.hours, nxt.minutes) == ("main", "town hall", 0, 3, 15)
    assert not nxt.done and not nxt.notified and not nxt.pending_delete
    assert nxt.completed_at is None and nxt.delete_marked_at is None
    assert nxt.repeat is spec
    assert nxt.occurrence == 1


def test_build_next_task_respects_end_boundary_against_now() -> None:
    spec = RepeatSpec(mode=RepeatMode.DAILY, end_at=JAN31)
    t = Task(start=JAN31 - timedelta(hours=1), hours=1, repeat=spec)
    assert build_next_task(t, JAN31) is None


def test_build_next_task_applies_counting_skip_rule() -> None:
    # remind 2, skip 1: occurrence indices 0, 1 remind, 2 skipped, 3 reminds
    spec = RepeatSpec(mode=RepeatMode.DAILY, skip=SkipRule(remind_times=2, skip_times=1))
    t = Task(start=JAN31 - timedelta(hours=1), hours=1, repeat=spec, occurrence=1)
    nxt = build_next_task(t, JAN31)
    assert nxt is not None
    assert nxt.start == datetime(2025, 2, 2, 10, 0)
    assert nxt.occurrence == 3

    again = build_next_task(nxt, nxt.finish)
    assert again is not None
    assert again.occurrence == 4
    assert again.start == nxt.finish + timedelta(days=1)
