from __future__ import annotations
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Mapping, Union

from core.config import (
    MAX_QUESTIONS,
    MAX_STUDY_MINUTES,
    MIN_QUESTIONS,
    MIN_STUDY_MINUTES,
)


class Stage(str, enum.Enum):
    SETUP = "setup"
    STUDYING = "studying"
    QUIZ = "quiz"
    RESULTS = "results"


@dataclass(frozen=True)
class SessionConfig:
    subject: str
    content: str
    question_count: int
    study_minutes: int

    def validation_errors(self, require_topic: bool = True) -> list[str]:
        """Reasons this config cannot start a session (empty when valid).

        With ``require_topic`` off only the study duration is checked; the
        question set is then fixed by the source.
        """
        errors: list[str] = []
        if not _in_range(self.study_minutes, MIN_STUDY_MINUTES, MAX_STUDY_MINUTES):
            errors.append(
                f"Study time must be between {MIN_STUDY_MINUTES} "
                f"and {MAX_STUDY_MINUTES} minutes"
            )
        if not require_topic:
            return errors
        if not isinstance(self.subject, str) or not self.subject.strip():
            errors.append("Subject is required")
        if not isinstance(self.content, str) or not self.content.strip():
            errors.append("Content is required")
        if not _in_range(self.question_count, MIN_QUESTIONS, MAX_QUESTIONS):
            errors.append(
                f"Question count must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}"
            )
        return errors

    @property
    def duration_seconds(self) -> int:
        return self.study_minutes * 60


def _in_range(value: object, low: int, high: int) -> bool:
    # bool is an int subclass; never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return low <= value <= high


@dataclass(frozen=True)
class Alternative:
    id: str
    text: str
    is_correct: bool = False
    order: int = 0
    explanation: str = ""


@dataclass(frozen=True)
class Question:
    id: str
    statement: str
    alternatives: tuple[Alternative, ...]
    subject: str = ""
    content: str = ""

    def sorted_alternatives(self) -> list[Alternative]:
        # sorted() is stable, so equal orders keep their original sequence
        return sorted(self.alternatives, key=lambda alt: alt.order)

    def find_alternative(self, alternative_id: str) -> Alternative | None:
        return next(
            (alt for alt in self.alternatives if alt.id == alternative_id), None
        )

    def is_correct_choice(self, alternative_id: str | None) -> bool:
        if alternative_id is None:
            return False
        selected = self.find_alternative(alternative_id)
        return bool(selected and selected.is_correct)


@dataclass(frozen=True)
class Results:
    correct: int
    incorrect: int

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    @property
    def percent(self) -> float:
        return (self.correct / self.total * 100) if self.total else 0.0


# Stage data. Each state object belongs to exactly one Stage and carries only
# the fields that stage can have.


@dataclass(frozen=True)
class SetupState:
    stage: ClassVar[Stage] = Stage.SETUP
    draft: SessionConfig | None = None
    error: str | None = None


@dataclass(frozen=True)
class StudyingState:
    stage: ClassVar[Stage] = Stage.STUDYING
    session_id: str
    config: SessionConfig
    remaining_seconds: int
    started_at: datetime
    acquiring: bool = False


@dataclass(frozen=True)
class QuizState:
    stage: ClassVar[Stage] = Stage.QUIZ
    session_id: str
    config: SessionConfig
    questions: tuple[Question, ...]
    answers: Mapping[str, str] = field(default_factory=dict)

    @property
    def answered_count(self) -> int:
        return sum(1 for question in self.questions if question.id in self.answers)

    @property
    def all_answered(self) -> bool:
        return bool(self.questions) and self.answered_count == len(self.questions)

    def find_question(self, question_id: str) -> Question | None:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass(frozen=True)
class ResultsState:
    stage: ClassVar[Stage] = Stage.RESULTS
    session_id: str
    config: SessionConfig
    questions: tuple[Question, ...]
    answers: Mapping[str, str]
    results: Results


SessionState = Union[SetupState, StudyingState, QuizState, ResultsState]


@dataclass(frozen=True)
class AcquisitionTicket:
    """Handle for one in-flight question acquisition."""

    session_id: str
    config: SessionConfig
