"""Study session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_session_runner
from api.models import AnswerRequest, SessionStateResponse, StartStudyRequest
from models import QuizState, SessionConfig, Stage
from serialization import serialize_state
from session_runner import SessionRunner

router = APIRouter(prefix="/api/session", tags=["session"])

RunnerDep = Annotated[SessionRunner, Depends(get_session_runner)]


def _state_payload(runner: SessionRunner) -> dict[str, object]:
    return serialize_state(runner.controller.state)


@router.get("", response_model=SessionStateResponse)
def get_session(runner: RunnerDep) -> dict[str, object]:
    """Get the current session state."""
    return _state_payload(runner)


@router.post("/start", response_model=SessionStateResponse)
def start_study(payload: StartStudyRequest, runner: RunnerDep) -> dict[str, object]:
    """Validate the configuration and start the study countdown."""
    controller = runner.controller
    if controller.stage is not Stage.SETUP:
        raise HTTPException(status_code=409, detail="A session is already running")

    config = SessionConfig(
        subject=payload.subject.strip(),
        content=payload.content.strip(),
        question_count=payload.questionCount,
        study_minutes=payload.studyMinutes,
    )
    errors = controller.validate(config)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    if not runner.start_study(config):
        raise HTTPException(status_code=409, detail="A session is already running")
    return _state_payload(runner)


@router.post("/skip", response_model=SessionStateResponse)
def skip_countdown(runner: RunnerDep) -> dict[str, object]:
    """Stop the countdown and go to the questions."""
    if not runner.skip():
        raise HTTPException(status_code=409, detail="Countdown is not running")
    return _state_payload(runner)


@router.put("/answers/{question_id}", response_model=SessionStateResponse)
def record_answer(
    question_id: str,
    payload: AnswerRequest,
    runner: RunnerDep,
) -> dict[str, object]:
    """Select an alternative for a question, replacing any earlier choice."""
    controller = runner.controller
    state = controller.state
    if not isinstance(state, QuizState):
        raise HTTPException(status_code=409, detail="No quiz in progress")

    question = state.find_question(question_id)
    if question is None:
        raise HTTPException(status_code=404, detail="Question not found")
    alternative_id = str(payload.alternativeId)
    if question.find_alternative(alternative_id) is None:
        raise HTTPException(status_code=404, detail="Alternative not found")

    if not controller.record_answer(question_id, alternative_id):
        raise HTTPException(status_code=409, detail="No quiz in progress")
    return _state_payload(runner)


@router.post("/submit", response_model=SessionStateResponse)
def submit_answers(runner: RunnerDep) -> dict[str, object]:
    """Score the quiz once every question has an answer."""
    controller = runner.controller
    state = controller.state
    if not isinstance(state, QuizState):
        raise HTTPException(status_code=409, detail="No quiz in progress")
    if controller.submit() is None:
        raise HTTPException(
            status_code=409,
            detail=(
                "Answer all questions before submitting "
                f"({state.answered_count}/{len(state.questions)})"
            ),
        )
    return _state_payload(runner)


@router.post("/restart", response_model=SessionStateResponse)
def restart_session(runner: RunnerDep) -> dict[str, object]:
    """Discard the session and return to the setup form."""
    runner.restart()
    return _state_payload(runner)
