# src/upgrade_reminder/i18n/locales.py

"""
Per-language bundles.

A Locale is picked once at startup (get_locale) and handed to whoever needs text:
the scheduler for notification wording, the CLI for labels, the sort strategy for
its tie-break key.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field

from ..core.ports import DurationFormatter
from .date_format import DateFormatter
from .duration_format import EnDurationFormatter, ZhCnDurationFormatter

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_EN_MESSAGES = {
    "notify.due.title": "[Due] {account}",
    "notify.due.body": "{name} finished at {finish}",
    "notify.advance.title": "[Soon] {account}",
    "notify.advance.body": "{name} finishes at {finish}",
    "remaining.due": "Due",
    "status.done": "done",
    "status.deleting": "deleting",
    "task.unnamed": "-",
}

_ZH_CN_MESSAGES = {
    "notify.due.title": "[到点] {account}",
    "notify.due.body": "{name} 完成时间：{finish}",
    "notify.advance.title": "[提前] {account}",
    "notify.advance.body": "{name} 即将到点，完成时间：{finish}",
    "remaining.due": "到点",
    "status.done": "已完成",
    "status.deleting": "待删除",
    "task.unnamed": "-",
}


def text_sort_key(text: str) -> str:
    """Case-insensitive, normalization-insensitive key for account/task names."""
    return unicodedata.normalize("NFKC", text).casefold()


@dataclass(frozen=True, slots=True)
class Locale:
    language: str
    durations: DurationFormatter
    dates: DateFormatter
    messages: dict[str, str] = field(default_factory=dict)

    def text(self, key: str, **kwargs: object) -> str:
        template = self.messages.get(key) or _EN_MESSAGES.get(key) or key
        if not kwargs:
            return template
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError):
            logger.warning("Bad template for %s in %s", key, self.language)
            return template

    def sort_key(self, text: str) -> str:
        return text_sort_key(text)


def get_locale(language: str | None) -> Locale:
    code = (language or DEFAULT_LANGUAGE).replace("_", "-")
    primary = code.split("-", 1)[0].lower()

    if primary == "zh":
        return Locale(code, ZhCnDurationFormatter(), DateFormatter(code), dict(_ZH_CN_MESSAGES))
    if primary != "en":
        logger.info("No bundle for language %s; using English texts", code)
    return Locale(code, EnDurationFormatter(), DateFormatter(code), dict(_EN_MESSAGES))
