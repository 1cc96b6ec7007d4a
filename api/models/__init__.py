"""Pydantic models."""
from api.models.session import (
    AnswerRequest,
    SessionStateResponse,
    StartStudyRequest,
)

__all__ = [
    "AnswerRequest",
    "SessionStateResponse",
    "StartStudyRequest",
]
