# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets: keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "NOTESAVE_APP_NAME": "App display name (default: notesave).",
    "NOTESAVE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "NOTESAVE_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    "NOTESAVE_MATRIX_ENABLED": "Enable Matrix host + connector (true/false, default: false).",
    # Storage
    "NOTESAVE_STORAGE_BACKEND": "auto | local | remote | memory (default: auto = remote when the host supports it).",
    "NOTESAVE_REMOTE_STORAGE_MIN_VERSION": "Minimum host version for remote storage (default: 6.9).",
    "NOTESAVE_HOST_VERSION": "Host API level advertised by the Matrix bridge (default: 7.0).",
    "NOTESAVE_ORDERED_WRITES": "Serialize writes per key, newest wins (true/false, default: false).",
    "NOTESAVE_TASKS_KEY": "Storage key of the task snapshot (default: notesave_db_v1).",
    "NOTESAVE_THEME_KEY": "Storage key of the theme preference (default: notesave_theme_pref).",
    # Features
    "NOTESAVE_REMINDERS_ENABLED": "Show/accept reminder times in the editor (default: true).",
    "NOTESAVE_AI_SUGGESTIONS_ENABLED": "Offer AI sub-step suggestions (default: true).",
    "NOTESAVE_TOAST_ON_EVERY_SAVE": "Toast 'Task saved' after every save (default: false).",
    # UI timing
    "NOTESAVE_MODAL_ANIMATION_SECONDS": "Modal open/close transition length (default: 0.3).",
    "NOTESAVE_TOAST_SECONDS": "How long a toast stays visible (default: 3.0).",
    # LLM / OpenRouter
    "NOTESAVE_OPENROUTER_API_KEY": "OpenRouter API key (AI suggestions are offline without it).",
    "NOTESAVE_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "NOTESAVE_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "NOTESAVE_SUGGESTION_LANGUAGE": "Language the sub-steps are written in (default: Russian).",
    "NOTESAVE_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "NOTESAVE_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 30).",
    "NOTESAVE_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "NOTESAVE_APP_TITLE": "Optional OpenRouter metadata header title.",
    # Matrix
    "NOTESAVE_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "NOTESAVE_MATRIX_USER_ID": "Matrix user ID (bot account the app runs as).",
    "NOTESAVE_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "NOTESAVE_MATRIX_ROOMS": "Optional allowlist of room IDs for commands (empty => all rooms).",
    "NOTESAVE_MATRIX_STORAGE_ROOM": "Room whose state holds the tasks (empty => no remote storage).",
    # Paths (gitignored)
    "NOTESAVE_DATA_DIR": "Local data directory (default: .local/notesave).",
    "NOTESAVE_LOCAL_STORAGE_PATH": "Local key-value JSON file (default: <data_dir>/local_storage.json).",
    "NOTESAVE_MATRIX_STORE_PATH": "Matrix session directory (default: <data_dir>/matrix_store).",
}
