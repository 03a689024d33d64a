# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TICKOFF_APP_NAME": "App display name (default: tickoff).",
    "TICKOFF_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths
    "TICKOFF_DATA_DIR": "Local data directory (default: .local/tickoff).",
    "TICKOFF_STORAGE_DIR": "Key-value storage directory (default: <DATA_DIR>/storage).",
    # Storage
    "TICKOFF_STORAGE_KEY": "Slot holding the todo list (default: todos).",
    "TICKOFF_STORAGE_QUOTA_BYTES": "Max size of one stored value, 0 = unlimited (default: 5242880).",
    "TICKOFF_PERSIST_EMPTY": "Write the list even when it is empty (default: true).",
    # Console
    "TICKOFF_COLOR": "Colour output when stdout is a TTY (default: true). NO_COLOR also disables it.",
    "TICKOFF_DEFAULT_SORT": "Initial sort: createdAt | dueDate | priority (default: createdAt).",
}
