"""
Task subsystem.

Components:
- task_models.py: data structures (Task, RepeatSpec, RepeatCustom, SkipRule)
- time_math.py: calendar-aware, saturating date arithmetic
- deletion_policy.py: when soft-deleted / completed tasks get purged
- sort_strategy.py: list ordering and binary-search insertion
- recurrence.py: next occurrence of a completed repeating task
- task_engine.py: per-tick lifecycle (due, advance notice, purge) and user actions
- task_store.py: SQLite-backed whole-list storage
- task_scheduler.py: periodic tick loop and its background timer
"""
