"""HTTP surface for the study session."""
from api.app import app

__all__ = ["app"]
