"""Application configuration and constants."""
import os


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Parse float from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Session limits
MIN_STUDY_MINUTES = 1
MAX_STUDY_MINUTES = 120
MIN_QUESTIONS = 1
MAX_QUESTIONS = 50
DEFAULT_QUESTION_COUNT = 10

# Question source
SOURCE_REMOTE = "remote"
SOURCE_STATIC = "static"
QUESTION_SOURCE = os.environ.get("QUESTION_SOURCE", SOURCE_REMOTE).strip().lower()
QUESTION_API_BASE_URL = os.environ.get(
    "QUESTION_API_BASE_URL", "http://localhost:3000"
)
QUESTION_API_PATH = "/api/questions/generate"
QUESTION_API_TIMEOUT_SECONDS = _parse_float_env("QUESTION_API_TIMEOUT_SECONDS", 60.0)

# Countdown
TICK_INTERVAL_SECONDS = _parse_float_env("STUDY_TICK_SECONDS", 1.0)

# Logging
LOG_LEVEL = os.environ.get("STUDY_LOG_LEVEL", "INFO").upper()

# Server
SERVER_HOST = os.environ.get("STUDY_HOST", "127.0.0.1")
SERVER_PORT = _parse_int_env("STUDY_PORT", 8000)
