# src/upgrade_reminder/core/prefs.py

"""
User preferences changed at runtime (console commands) and persisted next to the tasks.

Settings (env/.env) provide the first-run defaults; once a value is saved here it wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserPrefs:
    accounts: list[str] = field(default_factory=list)
    task_presets: list[str] = field(default_factory=list)
    advance_notify_seconds: int = 0
    also_notify_at_due: bool = True
    # None: completed tasks are only removed by /clear
    auto_delete_seconds: int | None = 60

    @classmethod
    def defaults(cls, settings) -> UserPrefs:
        return cls(
            accounts=[settings.default_account],
            task_presets=[],
            advance_notify_seconds=settings.advance_notify_seconds,
            also_notify_at_due=settings.also_notify_at_due,
            auto_delete_seconds=settings.completed_keep_seconds,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accounts": list(self.accounts),
            "task_presets": list(self.task_presets),
            "advance_notify_seconds": self.advance_notify_seconds,
            "also_notify_at_due": self.also_notify_at_due,
            "auto_delete_seconds": self.auto_delete_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, fallback: UserPrefs) -> UserPrefs:
        """Overlay stored values on `fallback`; a value of the wrong type keeps the fallback."""
        out = cls(**fallback.to_dict())

        for key in ("accounts", "task_presets"):
            val = data.get(key)
            if isinstance(val, list) and all(isinstance(v, str) for v in val):
                setattr(out, key, list(val))
            elif val is not None:
                logger.warning("Ignoring stored %s=%r", key, val)

        adv = data.get("advance_notify_seconds")
        if isinstance(adv, int) and not isinstance(adv, bool) and adv >= 0:
            out.advance_notify_seconds = adv

        due = data.get("also_notify_at_due")
        if isinstance(due, bool):
            out.also_notify_at_due = due

        if "auto_delete_seconds" in data:
            keep = data["auto_delete_seconds"]
            if keep is None or (isinstance(keep, int) and not isinstance(keep, bool) and keep >= 0):
                out.auto_delete_seconds = keep

        return out


def add_item(items: list[str], name: str) -> bool:
    """Append `name` unless an entry equal to it (ignoring case) exists. Returns True if added."""
    name = name.strip()
    if not name or any(i.casefold() == name.casefold() for i in items):
        return False
    items.append(name)
    return True


def remove_item(items: list[str], name: str) -> bool:
    for i, item in enumerate(items):
        if item.casefold() == name.strip().casefold():
            del items[i]
            return True
    return False
