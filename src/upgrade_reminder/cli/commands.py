# src/upgrade_reminder/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from datetime import datetime

from ..core.prefs import add_item, remove_item
from ..core.state import AppState
from ..i18n.duration_format import format_remaining
from ..tasks.task_models import RepeatCustom, RepeatMode, RepeatSpec, SkipRule, Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

DATETIME_INPUT_FORMAT = "%Y-%m-%d %H:%M"


class CommandError(ValueError):
    """Bad user input; the message is shown as the command reply."""


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except CommandError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----

def _parse_int(raw: str, what: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise CommandError(f"{what} must be a whole number, got {raw!r}.") from None
    if value < 0:
        raise CommandError(f"{what} must be >= 0.")
    return value


def _parse_datetime(raw: str) -> datetime:
    try:
        return datetime.strptime(raw, DATETIME_INPUT_FORMAT)
    except ValueError:
        raise CommandError(f"Expected a time like 2025-01-31 10:00, got {raw!r}.") from None


def _take_datetime(tokens: list[str]) -> tuple[datetime, int]:
    """
    Parse a datetime from the head of `tokens`: either one quoted token
    ("2025-01-31 10:00") or a date token followed by a time token.
    Returns the value and the number of tokens used.
    """
    if not tokens:
        raise CommandError("Missing time, expected something like 2025-01-31 10:00.")
    if len(tokens) >= 2 and " " not in tokens[0].strip():
        try:
            return datetime.strptime(f"{tokens[0]} {tokens[1]}", DATETIME_INPUT_FORMAT), 2
        except ValueError:
            pass
    return _parse_datetime(tokens[0]), 1


def _resolve_preset(raw: str, items: list[str], list_command: str) -> str:
    """`#k` picks the k-th preset (1-based); anything else is used as typed."""
    raw = raw.strip()
    if not raw.startswith("#") or len(raw) == 1:
        return raw
    idx = _parse_int(raw[1:], "Preset number")
    if idx < 1 or idx > len(items):
        raise CommandError(f"No preset #{idx}. Use /{list_command} to list them.")
    return items[idx - 1]


def _default_account(state: AppState) -> str:
    return state.prefs.accounts[0] if state.prefs.accounts else state.settings.default_account


def _pick_task(state: AppState, args: list[str], usage: str) -> Task:
    if not args:
        raise CommandError(usage)
    idx = _parse_int(args[0], "Task number")
    if idx < 1 or idx > len(state.tasks):
        raise CommandError(f"No task #{idx}. Use /list to see task numbers.")
    return state.tasks[idx - 1]


def describe_task(state: AppState, task: Task, now: datetime) -> str:
    loc = state.locale
    name = task.name or loc.text("task.unnamed")

    if task.pending_delete:
        status = loc.text("status.deleting")
    elif task.done:
        status = loc.text("status.done")
    elif task.finish <= now:
        status = loc.text("remaining.due")
    else:
        status = format_remaining(task.remaining(now), loc.durations)

    duration = loc.durations.format(task.days, task.hours, task.minutes)
    line = f"{task.account} | {name} | {duration} | {loc.dates.format_smart(task.finish, now)} | {status}"
    if task.has_repeat and task.repeat is not None:
        line += f" | repeat={task.repeat.mode.value}"
    return line


# ---- commands ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    with state.lock:
        total = len(state.tasks)
        done = sum(1 for t in state.tasks if t.done)
        deleting = sum(1 for t in state.tasks if t.pending_delete)
    return (
        "Status:\n"
        f"  Language: {state.locale.language}\n"
        f"  Tasks: {total} (done {done}, pending delete {deleting})\n"
        f"  Pending-delete delay: {s.pending_delete_delay_seconds}s\n"
        f"  Auto delete: {_describe_auto_delete(state)}\n"
        f"  Advance notice: {_describe_advance(state)}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    with state.lock:
        now = state.clock.now()
        if not state.tasks:
            return "No tasks."
        lines = [f"{i}. {describe_task(state, t, now)}" for i, t in enumerate(state.tasks, start=1)]
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <account> <name> <days> <hours> <minutes> [YYYY-MM-DD HH:MM]
    """
    usage = 'Usage: /add <account> <name> <days> <hours> <minutes> ["YYYY-MM-DD HH:MM"]'
    if len(args) not in (5, 6, 7):
        raise CommandError(usage)

    account = _resolve_preset(args[0], state.prefs.accounts, "accounts") or _default_account(state)
    name = _resolve_preset(args[1], state.prefs.task_presets, "presets")
    days = _parse_int(args[2], "Days")
    hours = _parse_int(args[3], "Hours")
    minutes = _parse_int(args[4], "Minutes")
    start = _parse_datetime(" ".join(args[5:])) if len(args) > 5 else None

    with state.lock:
        now = state.clock.now()
        task = Task(
            account=account,
            name=name,
            start=start or now,
            days=days,
            hours=hours,
            minutes=minutes,
            created_at=now,
        )
        state.engine.add(state.tasks, task)
        state.save_tasks()
        return f"Added: {describe_task(state, task, now)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    with state.lock:
        task = _pick_task(state, args, "Usage: /done <task number>")
        if task.done:
            return "Task is already done. Use /reopen to undo."
        now = state.clock.now()
        nxt = state.engine.complete(state.tasks, task, now)
        state.save_tasks()
        if nxt is not None:
            return f"Done. Next occurrence: {describe_task(state, nxt, now)}"
        return "Done."


def cmd_reopen(state: AppState, args: list[str]) -> str:
    with state.lock:
        task = _pick_task(state, args, "Usage: /reopen <task number>")
        state.engine.reopen(task)
        state.save_tasks()
    return "Reopened."


def cmd_delete(state: AppState, args: list[str]) -> str:
    with state.lock:
        task = _pick_task(state, args, "Usage: /del <task number>")
        state.engine.mark_pending_delete(task, state.clock.now())
        state.save_tasks()
    delay = state.settings.pending_delete_delay_seconds
    return f"Marked for deletion; /undo within {delay}s to keep it."


def cmd_undo(state: AppState, args: list[str]) -> str:
    with state.lock:
        task = _pick_task(state, args, "Usage: /undo <task number>")
        if not task.pending_delete:
            return "Task is not marked for deletion."
        state.engine.undo_delete(task)
        state.save_tasks()
    return "Deletion cancelled."


def _parse_repeat(args: list[str]) -> RepeatSpec:
    if not args:
        raise CommandError("Missing repeat mode.")
    try:
        mode = RepeatMode(args[0].lower())
    except ValueError:
        raise CommandError(f"Unknown repeat mode {args[0]!r}.") from None

    rest = args[1:]
    custom = None
    if mode == RepeatMode.CUSTOM:
        if len(rest) < 6:
            raise CommandError("custom needs six numbers: years months days hours minutes seconds.")
        y, mo, d, h, mi, s = (_parse_int(v, "Period") for v in rest[:6])
        custom = RepeatCustom(years=y, months=mo, days=d, hours=h, minutes=mi, seconds=s)
        rest = rest[6:]

    end_at = None
    skip = None
    while rest:
        word = rest[0].lower()
        if word == "until" and len(rest) >= 2:
            end_at, used = _take_datetime(rest[1:])
            rest = rest[1 + used:]
        elif word == "skip" and len(rest) >= 3:
            skip = SkipRule(_parse_int(rest[1], "Remind count"), _parse_int(rest[2], "Skip count"))
            rest = rest[3:]
        else:
            raise CommandError(f"Unexpected repeat option {rest[0]!r}.")

    return RepeatSpec(mode=mode, custom=custom, end_at=end_at, skip=skip)


def cmd_repeat(state: AppState, args: list[str]) -> str:
    """
    /repeat <n> none|daily|weekly|monthly|yearly
    /repeat <n> custom <Y> <M> <D> <h> <m> <s>
    options: until "YYYY-MM-DD HH:MM", skip <remind> <skip>
    """
    usage = (
        "Usage: /repeat <n> <none|daily|weekly|monthly|yearly|custom Y M D h m s> "
        '[until "YYYY-MM-DD HH:MM"] [skip <remind> <skip>]'
    )
    if len(args) < 2:
        raise CommandError(usage)
    spec = _parse_repeat(args[1:])
    with state.lock:
        task = _pick_task(state, args, usage)
        task.repeat = spec if spec.mode != RepeatMode.NONE else None
        state.save_tasks()
    if spec.mode == RepeatMode.CUSTOM and not spec.is_repeat:
        return "Custom period is all zeros; the task will not repeat."
    return f"Repeat set to {spec.mode.value}."


def cmd_clear(state: AppState, args: list[str]) -> str:
    """Remove completed and soft-deleted tasks now, ignoring their grace periods."""
    with state.lock:
        removed = state.engine.purge(state.tasks, state.clock.now(), force=True)
        if removed:
            state.save_tasks()
    return f"Removed {len(removed)} task(s)."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n> <days> <hours> <minutes> [YYYY-MM-DD HH:MM]
    """
    usage = 'Usage: /edit <n> <days> <hours> <minutes> ["YYYY-MM-DD HH:MM"]'
    if len(args) not in (4, 5, 6):
        raise CommandError(usage)

    days = _parse_int(args[1], "Days")
    hours = _parse_int(args[2], "Hours")
    minutes = _parse_int(args[3], "Minutes")
    start = _parse_datetime(" ".join(args[4:])) if len(args) > 4 else None

    with state.lock:
        task = _pick_task(state, args, usage)
        state.engine.reschedule(state.tasks, task, start=start, days=days, hours=hours, minutes=minutes)
        state.save_tasks()
        return f"Updated: {describe_task(state, task, state.clock.now())}"


def cmd_rename(state: AppState, args: list[str]) -> str:
    usage = "Usage: /rename <n> <account> <name>"
    if len(args) != 3:
        raise CommandError(usage)

    with state.lock:
        task = _pick_task(state, args, usage)
        account = _resolve_preset(args[1], state.prefs.accounts, "accounts") or _default_account(state)
        name = _resolve_preset(args[2], state.prefs.task_presets, "presets")
        task.account, task.name = account, name
        state.engine.replace(state.tasks, task, task)
        state.save_tasks()
        return f"Updated: {describe_task(state, task, state.clock.now())}"


def _manage_list(state: AppState, args: list[str], attr: str, title: str, command: str) -> str:
    """Show / add / delete entries of one preset list (accounts or task names)."""
    with state.lock:
        items: list[str] = getattr(state.prefs, attr)

        if not args:
            if not items:
                return f"No {title} yet. Add one with /{command} add <name>."
            lines = [f"{title.capitalize()}:"]
            lines.extend(f"  #{i} {item}" for i, item in enumerate(items, start=1))
            return "\n".join(lines)

        action = args[0].lower()
        name = " ".join(args[1:]).strip()
        if action not in ("add", "del", "rm") or not name:
            raise CommandError(f"Usage: /{command} [add|del <name>]")

        if action == "add":
            if not add_item(items, name):
                return f"{name!r} is already in {title}."
            state.save_prefs()
            return f"Added {name!r} to {title}."

        if not remove_item(items, name):
            return f"{name!r} is not in {title}."
        state.save_prefs()
        return f"Removed {name!r} from {title}."


def cmd_accounts(state: AppState, args: list[str]) -> str:
    return _manage_list(state, args, "accounts", "accounts", "accounts")


def cmd_presets(state: AppState, args: list[str]) -> str:
    return _manage_list(state, args, "task_presets", "task presets", "presets")


def _describe_advance(state: AppState) -> str:
    p = state.prefs
    if p.advance_notify_seconds <= 0:
        return "off"
    text = f"{state.locale.durations.format(0, 0, 0, p.advance_notify_seconds, show_seconds=True)} before finish"
    return text if p.also_notify_at_due else f"{text}, no notice at finish"


def _describe_auto_delete(state: AppState) -> str:
    keep = state.prefs.auto_delete_seconds
    if keep is None:
        return "off (use /clear)"
    return f"{state.locale.durations.format(0, 0, 0, keep, show_seconds=True)} after completion"


def cmd_advance(state: AppState, args: list[str]) -> str:
    """
    /advance                  show the current setting
    /advance <seconds>|off    extra notice this long before finish
    /advance due on|off       whether the notice at finish still follows
    """
    if not args:
        return f"Advance notice: {_describe_advance(state)}"

    with state.lock:
        if args[0].lower() == "due":
            if len(args) != 2 or args[1].lower() not in ("on", "off"):
                raise CommandError("Usage: /advance due on|off")
            state.prefs.also_notify_at_due = args[1].lower() == "on"
        elif args[0].lower() == "off":
            state.prefs.advance_notify_seconds = 0
        else:
            state.prefs.advance_notify_seconds = _parse_int(args[0], "Seconds")
        state.save_prefs()
        return f"Advance notice: {_describe_advance(state)}"


def cmd_autodelete(state: AppState, args: list[str]) -> str:
    """
    /autodelete               show the current setting
    /autodelete <seconds>|off how long completed tasks stay listed
    """
    if not args:
        return f"Auto delete: {_describe_auto_delete(state)}"

    keep = None if args[0].lower() == "off" else _parse_int(args[0], "Seconds")
    with state.lock:
        state.prefs.auto_delete_seconds = keep
        state.save_prefs()
        # apply right away instead of waiting for the next tick
        removed = state.engine.purge(state.tasks, state.clock.now())
        if removed:
            state.save_tasks()
        reply = f"Auto delete: {_describe_auto_delete(state)}"
    if removed:
        reply += f" (removed {len(removed)} task(s))"
    return reply


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts and lifecycle settings.")
registry.register("list", cmd_list, help_text="List tasks in order.", aliases=["ls"])
registry.register("add", cmd_add, help_text='Add a task: /add <account> <name> <d> <h> <m> ["YYYY-MM-DD HH:MM"].')
registry.register("done", cmd_done, help_text="Complete a task: /done <n>.")
registry.register("reopen", cmd_reopen, help_text="Undo completion: /reopen <n>.")
registry.register("del", cmd_delete, help_text="Soft-delete a task: /del <n>.", aliases=["delete", "rm"])
registry.register("undo", cmd_undo, help_text="Cancel a pending delete: /undo <n>.")
registry.register("repeat", cmd_repeat, help_text="Set recurrence: /repeat <n> <mode> [...].")
registry.register("clear", cmd_clear, help_text="Remove completed and deleted tasks now.")
registry.register("edit", cmd_edit, help_text='Change duration/start: /edit <n> <d> <h> <m> ["YYYY-MM-DD HH:MM"].')
registry.register("rename", cmd_rename, help_text="Change account and name: /rename <n> <account> <name>.")
registry.register("accounts", cmd_accounts, help_text="List or edit account presets: /accounts [add|del <name>].")
registry.register("presets", cmd_presets, help_text="List or edit task name presets: /presets [add|del <name>].")
registry.register("advance", cmd_advance, help_text="Advance notice: /advance [<seconds>|off|due on|off].")
registry.register("autodelete", cmd_autodelete, help_text="Keep completed tasks for: /autodelete [<seconds>|off].")
