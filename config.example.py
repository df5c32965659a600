# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit a .env that points at a production API with real credentials.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # REST API
    "TASKFLOW_API_URL": (
        "REST base path (default: http://localhost:8080/api). "
        "API_URL and REACT_APP_API_URL are accepted as fallbacks."
    ),
    "TASKFLOW_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TASKFLOW_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 15).",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory (default: .local/taskflow).",
    "TASKFLOW_STORAGE_PATH": (
        "Durable session storage JSON (default: <data_dir>/storage.json). Holds the bearer token."
    ),
}
