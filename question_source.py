from __future__ import annotations

import logging

import requests

from core.config import (
    QUESTION_API_BASE_URL,
    QUESTION_API_PATH,
    QUESTION_API_TIMEOUT_SECONDS,
    QUESTION_SOURCE,
    SOURCE_REMOTE,
    SOURCE_STATIC,
)
from models import Question, SessionConfig
from question_bank import load_static_questions
from serialization import parse_question_records

log = logging.getLogger(__name__)


class QuestionGenerationError(Exception):
    """The generation service did not deliver a usable question set."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StaticQuestionSource:
    """Fixed local bank; no I/O and no failure mode."""

    is_remote = False
    requires_topic = False

    def __init__(self, questions: list[Question] | None = None):
        self._questions = list(questions) if questions is not None else load_static_questions()

    @property
    def question_count(self) -> int:
        return len(self._questions)

    def fetch(self, config: SessionConfig) -> list[Question]:
        return list(self._questions)


class RemoteQuestionSource:
    """Questions generated by the external service, one POST per session."""

    is_remote = True
    requires_topic = True

    def __init__(
        self,
        base_url: str = QUESTION_API_BASE_URL,
        timeout: float = QUESTION_API_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    @property
    def url(self) -> str:
        return f"{self.base_url}{QUESTION_API_PATH}"

    def fetch(self, config: SessionConfig) -> list[Question]:
        body = {
            "subject": config.subject,
            "content": config.content,
            "quantity": config.question_count,
        }
        log.info("Calling question API: %s", self.url)
        log.debug("Request body: %s", body)

        session = self._session or requests.Session()
        try:
            response = session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("Question API transport failure: %s", exc)
            raise QuestionGenerationError(f"Could not reach the question service: {exc}") from exc
        finally:
            if self._session is None:
                session.close()

        log.info("Question API response status: %s", response.status_code)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type.lower():
            log.error("Expected JSON but got: %s", response.text[:200])
            raise QuestionGenerationError(
                "The server did not return JSON. Check that the API URL is correct.",
                status_code=response.status_code,
            )

        if not 200 <= response.status_code < 300:
            message = _error_message(response)
            log.error("Question API error response: %s", message)
            raise QuestionGenerationError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise QuestionGenerationError(
                "The server returned malformed JSON", status_code=response.status_code
            ) from exc

        try:
            questions = parse_question_records(payload)
        except ValueError as exc:
            raise QuestionGenerationError(
                f"Invalid question data: {exc}", status_code=response.status_code
            ) from exc

        if not questions:
            raise QuestionGenerationError(
                "The server returned no questions", status_code=response.status_code
            )
        if len(questions) != config.question_count:
            log.warning(
                "Requested %s questions, received %s",
                config.question_count,
                len(questions),
            )
        log.info("Questions received: %s", len(questions))
        return questions


def _error_message(response: requests.Response) -> str:
    fallback = f"HTTP error: {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


def make_question_source(
    kind: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
) -> StaticQuestionSource | RemoteQuestionSource:
    kind = (kind or QUESTION_SOURCE).strip().lower()
    if kind == SOURCE_STATIC:
        return StaticQuestionSource()
    if kind != SOURCE_REMOTE:
        log.warning("Unsupported question source '%s', using '%s'", kind, SOURCE_REMOTE)
    return RemoteQuestionSource(
        base_url=base_url or QUESTION_API_BASE_URL,
        timeout=timeout if timeout is not None else QUESTION_API_TIMEOUT_SECONDS,
    )
