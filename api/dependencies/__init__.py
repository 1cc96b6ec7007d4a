"""FastAPI dependencies."""
from api.dependencies.session import get_session_runner

__all__ = ["get_session_runner"]
