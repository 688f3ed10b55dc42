import os

def env_bool(key, default=False):
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes", "on")


def env_int(key, default):
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def env_float(key, default):
    try:
        return float(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


APP_TITLE = "Automotive Intelligence"
HOME_TITLE = f"{APP_TITLE} | Home"

DB_NAME = os.getenv("DB_NAME", "automotive_intelligence")
DB_BOOTSTRAP_INDEXES = env_bool("DB_BOOTSTRAP_INDEXES")

# Upper bound for the three dashboard reads, in seconds
DASHBOARD_TIMEOUT = env_float("DASHBOARD_TIMEOUT", 10.0)

SESSION_MAX_AGE = env_int("SESSION_MAX_AGE", 3600)
SESSION_COOKIE_SECURE = env_bool("SESSION_COOKIE_SECURE")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
