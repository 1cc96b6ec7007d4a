from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from models import (
    Alternative,
    Question,
    QuizState,
    Results,
    ResultsState,
    SessionConfig,
    SessionState,
    SetupState,
    StudyingState,
)
from scoring import feedback_message, feedback_tier


def format_countdown(seconds: int) -> str:
    """Render remaining seconds as MM:SS (minutes are not wrapped at 60)."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def _record_id(value: object, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{name} must be a string or integer")
    cleaned = str(value).strip()
    if not cleaned:
        raise ValueError(f"{name} is required")
    return cleaned


def parse_alternative(record: object, position: int) -> Alternative:
    if not isinstance(record, dict):
        raise ValueError("Invalid alternative format")
    order = record.get("order", position)
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        order = position
    elif not math.isfinite(order):
        raise ValueError("Alternative order must be a finite number")
    return Alternative(
        id=_record_id(record.get("id"), "alternative id"),
        text=str(record.get("text") or ""),
        is_correct=bool(record.get("isCorrect")),
        order=int(order),
        explanation=str(record.get("explanation") or ""),
    )


def parse_question(record: object) -> Question:
    """Build a Question from one generation-service record."""
    if not isinstance(record, dict):
        raise ValueError("Invalid question format")
    alternatives_payload = record.get("alternatives")
    if not isinstance(alternatives_payload, list) or not alternatives_payload:
        raise ValueError("Question has no alternatives")
    alternatives = tuple(
        parse_alternative(item, position)
        for position, item in enumerate(alternatives_payload)
    )
    ids = [alt.id for alt in alternatives]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate alternative id")
    return Question(
        id=_record_id(record.get("id"), "question id"),
        statement=str(record.get("statement") or ""),
        alternatives=alternatives,
        subject=str(record.get("subject") or ""),
        content=str(record.get("content") or ""),
    )


def parse_question_records(payload: object) -> list[Question]:
    if not isinstance(payload, list):
        raise ValueError("Expected a list of questions")
    questions = [parse_question(item) for item in payload]
    ids = [question.id for question in questions]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate question id")
    return questions


def serialize_config(config: SessionConfig | None) -> dict[str, Any] | None:
    if config is None:
        return None
    return {
        "subject": config.subject,
        "content": config.content,
        "questionCount": config.question_count,
        "studyMinutes": config.study_minutes,
    }


def serialize_question(question: Question, reveal: bool = False) -> dict[str, Any]:
    alternatives = []
    for alt in question.sorted_alternatives():
        item: dict[str, Any] = {"id": alt.id, "text": alt.text, "order": alt.order}
        if reveal:
            item["isCorrect"] = alt.is_correct
            item["explanation"] = alt.explanation
        alternatives.append(item)
    return {
        "id": question.id,
        "statement": question.statement,
        "alternatives": alternatives,
    }


def serialize_results(results: Results) -> dict[str, Any]:
    return {
        "correct": results.correct,
        "incorrect": results.incorrect,
        "total": results.total,
        "percent": round(results.percent, 1),
        "feedback": feedback_tier(results),
        "message": feedback_message(results),
    }


def _serialize_questions(
    questions: Iterable[Question], reveal: bool
) -> list[dict[str, Any]]:
    return [serialize_question(question, reveal) for question in questions]


def serialize_state(state: SessionState) -> dict[str, Any]:
    """Flatten a session state into the payload shown by every front-end."""
    payload: dict[str, Any] = {
        "stage": state.stage.value,
        "sessionId": None,
        "config": None,
        "remainingSeconds": 0,
        "countdown": format_countdown(0),
        "acquiring": False,
        "questions": [],
        "answers": {},
        "answeredCount": 0,
        "canSubmit": False,
        "results": None,
        "error": None,
    }
    if isinstance(state, SetupState):
        payload["config"] = serialize_config(state.draft)
        payload["error"] = state.error
        return payload

    payload["sessionId"] = state.session_id
    payload["config"] = serialize_config(state.config)

    if isinstance(state, StudyingState):
        payload["remainingSeconds"] = state.remaining_seconds
        payload["countdown"] = format_countdown(state.remaining_seconds)
        payload["acquiring"] = state.acquiring
        payload["startedAt"] = state.started_at.isoformat()
    elif isinstance(state, QuizState):
        payload["questions"] = _serialize_questions(state.questions, reveal=False)
        payload["answers"] = dict(state.answers)
        payload["answeredCount"] = state.answered_count
        payload["canSubmit"] = state.all_answered
    elif isinstance(state, ResultsState):
        payload["questions"] = _serialize_questions(state.questions, reveal=True)
        payload["answers"] = dict(state.answers)
        payload["answeredCount"] = _count_answered(state.questions, state.answers)
        payload["results"] = serialize_results(state.results)
    return payload


def _count_answered(questions: Iterable[Question], answers: Mapping[str, str]) -> int:
    return sum(1 for question in questions if question.id in answers)
