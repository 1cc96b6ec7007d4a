"""Session dependencies for FastAPI."""
from session_runner import SessionRunner

from api.services.session_service import get_runner


def get_session_runner() -> SessionRunner:
    """Get the runner driving the current study session."""
    return get_runner()
