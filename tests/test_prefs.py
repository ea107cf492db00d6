# tests/test_prefs.py

from __future__ import annotations

import pytest

from upgrade_reminder.core.prefs import UserPrefs, add_item, remove_item


def test_defaults_come_from_settings(settings) -> None:
    p = UserPrefs.defaults(settings)
    assert p.accounts == ["Default"]
    assert p.task_presets == []
    assert p.advance_notify_seconds == 0
    assert p.also_notify_at_due is True
    assert p.auto_delete_seconds == 60


def test_from_dict_overlays_valid_values(settings) -> None:
    fallback = UserPrefs.defaults(settings)
    p = UserPrefs.from_dict(
        {
            "accounts": ["main"],
            "task_presets": ["Town Hall"],
            "advance_notify_seconds": 300,
            "also_notify_at_due": False,
            "auto_delete_seconds": None,
        },
        fallback=fallback,
    )
    assert p.to_dict() == {
        "accounts": ["main"],
        "task_presets": ["Town Hall"],
        "advance_notify_seconds": 300,
        "also_notify_at_due": False,
        "auto_delete_seconds": None,
    }
    # the fallback is copied, not shared
    p.accounts.append("alt")
    assert fallback.accounts == ["Default"]


def test_from_dict_keeps_fallback_for_bad_values(settings, caplog: pytest.LogCaptureFixture) -> None:
    fallback = UserPrefs.defaults(settings)
    p = UserPrefs.from_dict(
        {
            "accounts": ["main", 3],
            "task_presets": "Town Hall",
            "advance_notify_seconds": True,
            "also_notify_at_due": "yes",
            "auto_delete_seconds": -1,
        },
        fallback=fallback,
    )
    assert p.to_dict() == fallback.to_dict()
    assert "Ignoring stored accounts" in caplog.text

    assert UserPrefs.from_dict({}, fallback=fallback).auto_delete_seconds == 60


def test_add_and_remove_items_ignore_case() -> None:
    items = ["Main"]
    assert add_item(items, "  alt ")
    assert not add_item(items, "MAIN")
    assert not add_item(items, "   ")
    assert items == ["Main", "alt"]

    assert remove_item(items, "main")
    assert not remove_item(items, "main")
    assert items == ["alt"]
