# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Put machine-specific values into .env (gitignored); every variable below is optional.
"""

ENV_VARS = {
    # App / logging
    "UPGRADE_APP_NAME": "App display name (default: upgrade-reminder).",
    "UPGRADE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "UPGRADE_LANGUAGE": "UI language tag, e.g. en, en-US, zh-CN (default: en).",
    # Connectors
    "UPGRADE_CONSOLE_ENABLED": "Run the interactive console (true/false). Headless mode only logs notifications.",
    # Local paths
    "UPGRADE_DATA_DIR": "Local data dir (default: .local/upgrade_reminder).",
    "UPGRADE_TASKS_DB_PATH": "Tasks SQLite path (default: <DATA_DIR>/tasks.sqlite3).",
    # Tick timer
    "UPGRADE_TICK_MIN_SECONDS": "Shortest wait between ticks (default: 1).",
    "UPGRADE_TICK_MAX_SECONDS": "Longest wait between ticks (default: 5).",
    "UPGRADE_TICK_GUARD_SECONDS": "Wake up this long before the next due instant (default: 3).",
    # Lifecycle
    "UPGRADE_PENDING_DELETE_DELAY_SECONDS": "Undo window after /del (default: 3).",
    "UPGRADE_COMPLETED_KEEP_SECONDS": "How long completed tasks stay listed (default: 60).",
    "UPGRADE_ADVANCE_NOTIFY_SECONDS": "Extra notice this many seconds before finish; 0 disables (default: 0).",
    "UPGRADE_ALSO_NOTIFY_AT_DUE": "Still notify at finish after an advance notice (true/false, default: true).",
    "UPGRADE_NOTIFY_TIMEOUT_MS": "Display time hint passed to the notifier (default: 3000).",
    "UPGRADE_RECURRENCE_MAX_ITERATIONS": "Max skipped candidates when computing a repeat (default: 1000).",
    "UPGRADE_DEFAULT_ACCOUNT": "Account used when /add gets an empty one (default: Default).",
}
