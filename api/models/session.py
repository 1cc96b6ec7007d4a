"""Session-related Pydantic models."""
from pydantic import BaseModel, Field

from core.config import (
    DEFAULT_QUESTION_COUNT,
    MAX_STUDY_MINUTES,
    MIN_STUDY_MINUTES,
)


class StartStudyRequest(BaseModel):
    """Model for starting a study countdown."""

    subject: str = ""
    content: str = ""
    questionCount: int = DEFAULT_QUESTION_COUNT
    studyMinutes: int = Field(..., ge=MIN_STUDY_MINUTES, le=MAX_STUDY_MINUTES)


class AnswerRequest(BaseModel):
    """Model for selecting an alternative."""

    alternativeId: str | int


class SessionConfigPayload(BaseModel):
    subject: str
    content: str
    questionCount: int
    studyMinutes: int


class AlternativePayload(BaseModel):
    id: str
    text: str
    order: int
    isCorrect: bool | None = None
    explanation: str | None = None


class QuestionPayload(BaseModel):
    id: str
    statement: str
    alternatives: list[AlternativePayload]


class ResultsPayload(BaseModel):
    correct: int
    incorrect: int
    total: int
    percent: float
    feedback: str
    message: str


class SessionStateResponse(BaseModel):
    """Model for the current session state."""

    stage: str
    sessionId: str | None = None
    config: SessionConfigPayload | None = None
    remainingSeconds: int = 0
    countdown: str = "00:00"
    acquiring: bool = False
    startedAt: str | None = None
    questions: list[QuestionPayload] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    answeredCount: int = 0
    canSubmit: bool = False
    results: ResultsPayload | None = None
    error: str | None = None
