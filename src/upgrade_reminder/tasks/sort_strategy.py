# src/upgrade_reminder/tasks/sort_strategy.py

"""
Ordering strategies for the task list.

A strategy owns one sort key. `sort` reorders the whole list in place, `insert`
binary-searches the slot right after every element with an equal-or-smaller key,
so equal keys keep insertion (FIFO) order and a run of inserts produces the same
list as appending everything and calling `sort`.
"""

from __future__ import annotations

import bisect
from collections.abc import Callable
from typing import Any

from .task_models import Task

TextKey = Callable[[str], Any]


def ordinal_key(text: str) -> str:
    return text


class _KeyedSortStrategy:
    def __init__(self, text_key: TextKey = ordinal_key) -> None:
        self._text_key = text_key

    def key(self, task: Task) -> tuple[Any, ...]:
        raise NotImplementedError

    def sort(self, tasks: list[Task]) -> None:
        tasks.sort(key=self.key)

    def insert(self, tasks: list[Task], item: Task) -> int:
        idx = bisect.bisect_right(tasks, self.key(item), key=self.key)
        tasks.insert(idx, item)
        return idx


class ByFinishTimeSortStrategy(_KeyedSortStrategy):
    """Ascending finish time, ties broken by account then task name."""

    def key(self, task: Task) -> tuple[Any, ...]:
        return (task.finish, self._text_key(task.account), self._text_key(task.name))


class ByAccountSortStrategy(_KeyedSortStrategy):
    """Grouped by account, each group ordered by finish time then name."""

    def key(self, task: Task) -> tuple[Any, ...]:
        return (self._text_key(task.account), task.finish, self._text_key(task.name))
