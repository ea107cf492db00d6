# src/upgrade_reminder/tasks/recurrence.py

"""
Recurrence calculator.

Given the finish time of a completed occurrence and its RepeatSpec, find the start
of the next occurrence:
- step k is always computed from the anchor (previous finish + k periods), so
  month-end clamping does not drift while skipping,
- the skip predicate defers the candidate by one more step, at most
  `max_iterations` times,
- a candidate past the end boundary ends the series.

The new occurrence keeps the completed task's duration; the rule only moves its start.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .task_models import RepeatMode, RepeatSpec, Task
from .time_math import MAX_DATETIME, add_dhms, add_period

logger = logging.getLogger(__name__)

ShouldSkip = Callable[[datetime], bool]

DEFAULT_MAX_ITERATIONS = 1000


def step(spec: RepeatSpec, anchor: datetime, k: int = 1) -> datetime:
    """Return anchor advanced by k periods of the rule (saturating)."""
    mode = spec.mode
    if mode == RepeatMode.DAILY:
        return add_period(anchor, days=k)
    if mode == RepeatMode.WEEKLY:
        return add_period(anchor, days=7 * k)
    if mode == RepeatMode.MONTHLY:
        return add_period(anchor, months=k)
    if mode == RepeatMode.YEARLY:
        return add_period(anchor, years=k)
    if mode == RepeatMode.CUSTOM and spec.custom is not None:
        c = spec.custom
        return add_period(
            anchor,
            years=c.years * k,
            months=c.months * k,
            days=c.days * k,
            hours=c.hours * k,
            minutes=c.minutes * k,
            seconds=c.seconds * k,
        )
    raise ValueError(f"Repeat mode {mode!s} has no period")


def next_occurrence(
    spec: RepeatSpec | None,
    previous_finish: datetime,
    *,
    should_skip: ShouldSkip | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> datetime | None:
    """Start of the next occurrence, or None when the series is over."""
    if spec is None or not spec.is_repeat:
        return None

    for k in range(1, max(1, max_iterations) + 1):
        candidate = step(spec, previous_finish, k)
        if spec.offset_seconds and candidate != MAX_DATETIME:
            candidate = add_dhms(candidate, seconds=spec.offset_seconds)

        if spec.end_at is not None and candidate > spec.end_at:
            return None
        if candidate == MAX_DATETIME:
            return None

        if should_skip is None or not should_skip(candidate):
            return candidate

    logger.warning(
        "Recurrence gave up after %d skipped candidates (mode=%s, from=%s)",
        max_iterations,
        spec.mode.value,
        previous_finish,
    )
    return None


def skip_predicate_for(task: Task) -> ShouldSkip | None:
    """
    Turn the task's SkipRule into a ShouldSkip predicate.

    The predicate is stateful: each call consumes the next occurrence index
    after the task's own, so it must be created fresh per calculation.
    """
    spec = task.repeat
    if spec is None or not spec.has_skip:
        return None
    rule = spec.skip
    assert rule is not None
    index = task.occurrence

    def _should_skip(_candidate: datetime) -> bool:
        nonlocal index
        index += 1
        return rule.skips_occurrence(index)

    return _should_skip


def build_next_task(
    task: Task,
    now: datetime,
    *,
    should_skip: ShouldSkip | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Task | None:
    """
    Create the next occurrence of a completed repeating task.

    Returns None if the task does not repeat, its end boundary is not after `now`,
    or no acceptable candidate exists.
    """
    spec = task.repeat
    if spec is None or not spec.is_repeat:
        return None
    if spec.end_at is not None and spec.end_at <= now:
        return None

    inner = should_skip if should_skip is not None else skip_predicate_for(task)
    skipped = 0

    def counting_skip(candidate: datetime) -> bool:
        nonlocal skipped
        hit = inner is not None and inner(candidate)
        if hit:
            skipped += 1
        return hit

    start = next_occurrence(spec, task.finish, should_skip=counting_skip, max_iterations=max_iterations)
    if start is None:
        logger.info("Recurrence ended for %s/%s", task.account, task.name)
        return None

    return Task(
        account=task.account,
        name=task.name,
        start=start,
        days=task.days,
        hours=task.hours,
        minutes=task.minutes,
        repeat=spec,
        occurrence=task.occurrence + 1 + skipped,
        created_at=now,
    )
