# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPULSE_APP_NAME": "App display name, also used in the console welcome line (default: taskpulse).",
    "TASKPULSE_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKPULSE_DATA_DIR": "Local directory for taskpulse.log (default: .local/taskpulse).",
    # Background task
    "TASKPULSE_TICK_SECONDS": "Seconds between progress steps (default: 1.0).",
    "TASKPULSE_DEFAULT_ITERATIONS": "Step count used until a form sets one (default: 4).",
    "TASKPULSE_COUNT_FIELD": "Form field holding the step count (default: count).",
    # Connectors
    "TASKPULSE_CONSOLE_ENABLED": "Interactive console REPL; when off, one default run executes (true/false).",
}
