# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from upgrade_reminder.tasks.task_models import (
    RepeatCustom,
    RepeatMode,
    RepeatSpec,
    SkipRule,
    Task,
)

T0 = datetime(2025, 1, 31, 10, 0)


def test_finish_is_start_plus_duration() -> None:
    t = Task(account="a", name="barracks", start=T0, days=1, hours=2, minutes=3)
    assert t.finish == T0 + timedelta(days=1, hours=2, minutes=3)


def test_finish_follows_reschedule() -> None:
    t = Task(start=T0, hours=1, notified=True, advance_notified=True)
    t.reschedule(start=T0 + timedelta(hours=5), minutes=30)
    assert t.finish == T0 + timedelta(hours=6, minutes=30)
    assert not t.notified
    assert not t.advance_notified


def test_start_defaults_to_creation_time() -> None:
    t = Task(hours=1, created_at=T0)
    assert t.start == T0
    assert t.finish == T0 + timedelta(hours=1)


def test_zero_duration_is_allowed() -> None:
    t = Task(start=T0)
    assert t.finish == T0


@pytest.mark.parametrize("field", ["days", "hours", "minutes"])
def test_negative_duration_rejected(field: str) -> None:
    with pytest.raises(ValueError):
        Task(start=T0, **{field: -1})


def test_reschedule_rejects_negative_and_keeps_task() -> None:
    t = Task(start=T0, hours=1)
    with pytest.raises(ValueError):
        t.reschedule(hours=-2)
    assert t.hours == 1


def test_finish_saturates_instead_of_overflowing() -> None:
    t = Task(start=datetime(9999, 12, 31, 23, 0), days=5)
    assert t.finish == datetime.max


def test_tasks_compare_by_identity() -> None:
    a = Task(start=T0, hours=1)
    b = Task(start=T0, hours=1, created_at=a.created_at)
    assert a != b
    assert a == a


def test_empty_custom_repeat_is_not_a_repeat() -> None:
    spec = RepeatSpec(mode=RepeatMode.CUSTOM, custom=RepeatCustom())
    assert spec.custom is not None and spec.custom.is_empty
    assert not spec.is_repeat
    assert not RepeatSpec(mode=RepeatMode.CUSTOM).is_repeat
    assert not RepeatSpec().is_repeat
    assert RepeatSpec(mode=RepeatMode.CUSTOM, custom=RepeatCustom(seconds=1)).is_repeat
    assert RepeatSpec(mode=RepeatMode.WEEKLY).is_repeat


def test_custom_rejects_negative_component() -> None:
    with pytest.raises(ValueError):
        RepeatCustom(months=-1)


def test_skip_rule_windows() -> None:
    rule = SkipRule(remind_times=2, skip_times=1)
    assert rule.is_active
    assert [rule.skips_occurrence(i) for i in range(6)] == [False, False, True, False, False, True]
    assert not SkipRule(remind_times=2).is_active
    assert not SkipRule(remind_times=2).skips_occurrence(2)


def test_repeat_spec_dict_shape() -> None:
    spec = RepeatSpec(
        mode=RepeatMode.CUSTOM,
        custom=RepeatCustom(months=1, days=10),
        end_at=datetime(2025, 6, 1, 0, 0),
        skip=SkipRule(3, 1),
        offset_seconds=-60,
    )
    data = spec.to_dict()
    assert data["mode"] == "custom"
    assert data["custom"]["days"] == 10
    assert data["end_at"] == "2025-06-01T00:00:00"
    assert RepeatSpec.from_dict(data) == spec


def test_repeat_spec_from_unknown_mode_falls_back_to_none() -> None:
    spec = RepeatSpec.from_dict({"mode": "hourly"})
    assert spec is not None
    assert spec.mode == RepeatMode.NONE
    assert RepeatSpec.from_dict(None) is None
