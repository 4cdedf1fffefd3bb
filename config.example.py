# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Put the store key in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening src/taskboard/config.py.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Remote store (required)
    "TASKBOARD_STORE_URL": "Base URL of the PostgREST-compatible store. SUPABASE_URL is accepted too.",
    "TASKBOARD_STORE_KEY": "API key sent as apikey + bearer token. SUPABASE_KEY is accepted too.",
    "TASKBOARD_STORE_REST_PATH": "REST prefix under the base URL (default: /rest/v1).",
    "TASKBOARD_HTTP_TIMEOUT_SECONDS": "Per-request timeout (default: 30).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory for logs (default: .local/taskboard).",
    # View defaults
    "TASKBOARD_SEARCH_DEBOUNCE_MS": "Quiet window before a title search is applied (default: 300).",
    "TASKBOARD_PAGE_SIZE": "Rows per page for task and category lists (default: 10).",
}
