"""Session controller: the study → quiz → results state machine.

One controller owns one session at a time. Every transition runs under a
single lock, so countdown ticks, skip requests, acquisition results and
learner input never interleave mid-update. The question source is called
outside the lock; its result is applied only if the acquisition ticket is
still current (a restart or a new session invalidates it).
"""
from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone

from models import (
    AcquisitionTicket,
    Question,
    QuizState,
    Results,
    ResultsState,
    SessionConfig,
    SessionState,
    SetupState,
    Stage,
    StudyingState,
)
from question_source import QuestionGenerationError
from scoring import score_answers

log = logging.getLogger(__name__)


class SessionController:
    def __init__(self, source) -> None:
        self.source = source
        self._lock = threading.RLock()
        self._state: SessionState = SetupState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stage(self) -> Stage:
        return self._state.stage

    @property
    def requires_topic(self) -> bool:
        return bool(getattr(self.source, "requires_topic", True))

    def validate(self, config: SessionConfig) -> list[str]:
        return config.validation_errors(require_topic=self.requires_topic)

    def is_counting(self, session_id: str | None = None) -> bool:
        """True while the countdown for ``session_id`` may still tick."""
        state = self._state
        if not isinstance(state, StudyingState) or state.acquiring:
            return False
        return session_id is None or state.session_id == session_id

    def start_study(self, config: SessionConfig) -> bool:
        with self._lock:
            if not isinstance(self._state, SetupState):
                log.debug("start_study ignored in stage %s", self.stage.value)
                return False
            errors = self.validate(config)
            if errors:
                log.debug("start_study refused: %s", "; ".join(errors))
                return False
            if not self.requires_topic:
                # the fixed bank decides how many questions there are
                count = getattr(self.source, "question_count", config.question_count)
                config = SessionConfig(
                    subject=config.subject,
                    content=config.content,
                    question_count=count,
                    study_minutes=config.study_minutes,
                )
            self._state = StudyingState(
                session_id=uuid.uuid4().hex,
                config=config,
                remaining_seconds=config.duration_seconds,
                started_at=datetime.now(timezone.utc),
            )
            log.info(
                "Study session %s started: %s minutes",
                self._state.session_id,
                config.study_minutes,
            )
            return True

    def tick(self, session_id: str | None = None) -> AcquisitionTicket | None:
        """
        Advance the countdown by one second.

        Returns a ticket when this tick expired the countdown and a remote
        acquisition must now be run; the caller owns running it.
        """
        with self._lock:
            state = self._state
            if not self.is_counting(session_id):
                return None
            if state.remaining_seconds > 1:
                self._state = StudyingState(
                    session_id=state.session_id,
                    config=state.config,
                    remaining_seconds=state.remaining_seconds - 1,
                    started_at=state.started_at,
                )
                return None
            log.info("Countdown finished for session %s", state.session_id)
            return self._request_acquisition()

    def skip(self) -> AcquisitionTicket | None:
        with self._lock:
            if not self.is_counting():
                log.debug("skip ignored in stage %s", self.stage.value)
                return None
            log.info("Countdown skipped for session %s", self._state.session_id)
            return self._request_acquisition()

    def _request_acquisition(self) -> AcquisitionTicket | None:
        # Caller holds the lock and has checked the countdown is live. Expiry and
        # skip both leave the counting sub-state here, so only one of them fires.
        state = self._state
        if not self.source.is_remote:
            self._enter_quiz(state, self.source.fetch(state.config))
            return None
        self._state = StudyingState(
            session_id=state.session_id,
            config=state.config,
            remaining_seconds=0,
            started_at=state.started_at,
            acquiring=True,
        )
        return AcquisitionTicket(session_id=state.session_id, config=state.config)

    def _enter_quiz(self, state: StudyingState, questions: list[Question]) -> None:
        self._state = QuizState(
            session_id=state.session_id,
            config=state.config,
            questions=tuple(questions),
        )
        log.info(
            "Session %s entered quiz with %s questions",
            state.session_id,
            len(questions),
        )

    def _is_pending(self, ticket: AcquisitionTicket) -> bool:
        state = self._state
        return (
            isinstance(state, StudyingState)
            and state.acquiring
            and state.session_id == ticket.session_id
        )

    def complete_acquisition(
        self, ticket: AcquisitionTicket, questions: list[Question]
    ) -> bool:
        with self._lock:
            if not self._is_pending(ticket):
                log.info("Dropping stale questions for session %s", ticket.session_id)
                return False
            if not questions:
                self._fail(ticket, "The server returned no questions")
                return False
            self._enter_quiz(self._state, questions)
            return True

    def fail_acquisition(self, ticket: AcquisitionTicket, message: str) -> bool:
        with self._lock:
            if not self._is_pending(ticket):
                log.info("Dropping stale failure for session %s", ticket.session_id)
                return False
            self._fail(ticket, message)
            return True

    def _fail(self, ticket: AcquisitionTicket, message: str) -> None:
        log.warning("Question generation failed: %s", message)
        self._state = SetupState(draft=ticket.config, error=message)

    def run_acquisition(self, ticket: AcquisitionTicket) -> bool:
        """Fetch questions for ``ticket`` and apply the outcome.

        Blocks for the duration of the source call; run it on a worker thread
        when the caller must stay responsive.
        """
        try:
            questions = self.source.fetch(ticket.config)
        except QuestionGenerationError as exc:
            self.fail_acquisition(ticket, exc.message)
            return False
        except Exception as exc:
            log.exception("Unexpected error while generating questions")
            self.fail_acquisition(ticket, str(exc) or "Unknown error")
            return False
        return self.complete_acquisition(ticket, questions)

    def record_answer(self, question_id: str, alternative_id: str) -> bool:
        with self._lock:
            state = self._state
            if not isinstance(state, QuizState):
                log.debug("record_answer ignored in stage %s", self.stage.value)
                return False
            question_id = str(question_id)
            alternative_id = str(alternative_id)
            question = state.find_question(question_id)
            if question is None or question.find_alternative(alternative_id) is None:
                log.debug(
                    "record_answer ignored for unknown choice %s/%s",
                    question_id,
                    alternative_id,
                )
                return False
            answers = dict(state.answers)
            answers[question_id] = alternative_id
            self._state = QuizState(
                session_id=state.session_id,
                config=state.config,
                questions=state.questions,
                answers=answers,
            )
            return True

    @property
    def can_submit(self) -> bool:
        state = self._state
        return isinstance(state, QuizState) and state.all_answered

    def submit(self) -> Results | None:
        with self._lock:
            state = self._state
            if not isinstance(state, QuizState):
                log.debug("submit ignored in stage %s", self.stage.value)
                return None
            if not state.all_answered:
                log.warning(
                    "submit rejected: %s of %s questions answered",
                    state.answered_count,
                    len(state.questions),
                )
                return None
            answers = dict(state.answers)
            results = score_answers(state.questions, answers)
            self._state = ResultsState(
                session_id=state.session_id,
                config=state.config,
                questions=state.questions,
                answers=answers,
                results=results,
            )
            log.info(
                "Session %s scored: %s correct, %s incorrect",
                state.session_id,
                results.correct,
                results.incorrect,
            )
            return results

    def restart(self) -> None:
        with self._lock:
            if not isinstance(self._state, (ResultsState, SetupState)):
                log.info("Abandoning session in stage %s", self.stage.value)
            self._state = SetupState()
