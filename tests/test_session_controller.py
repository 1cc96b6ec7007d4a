import pytest

from models import (
    Alternative,
    Question,
    QuizState,
    Results,
    ResultsState,
    SessionConfig,
    SetupState,
    Stage,
    StudyingState,
)
from question_bank import STATIC_BANK
from question_source import QuestionGenerationError, StaticQuestionSource
from session_controller import SessionController


def _question(question_id: str) -> Question:
    return Question(
        id=question_id,
        statement=f"Question {question_id}",
        alternatives=(
            Alternative("right", "Right", is_correct=True, order=1),
            Alternative("wrong", "Wrong", order=2),
        ),
    )


class FakeRemoteSource:
    is_remote = True
    requires_topic = True

    def __init__(self, questions=None, error=None):
        self.questions = questions if questions is not None else [_question("1"), _question("2")]
        self.error = error
        self.calls = 0

    def fetch(self, config):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.questions)


def _config(minutes: int = 1, count: int = 2) -> SessionConfig:
    return SessionConfig("History", "Cold War", count, minutes)


def _studying(source=None, minutes: int = 1) -> SessionController:
    controller = SessionController(source or FakeRemoteSource())
    assert controller.start_study(_config(minutes))
    return controller


def _quiz(questions) -> SessionController:
    controller = _studying(FakeRemoteSource(questions))
    controller.run_acquisition(controller.skip())
    assert controller.stage is Stage.QUIZ
    return controller


@pytest.mark.parametrize("minutes", [1, 45, 120])
def test_start_study_sets_countdown(minutes: int) -> None:
    controller = _studying(minutes=minutes)
    state = controller.state
    assert isinstance(state, StudyingState)
    assert state.remaining_seconds == minutes * 60
    assert not state.acquiring


@pytest.mark.parametrize(
    "config",
    [
        SessionConfig("History", "Cold War", 10, 0),
        SessionConfig("History", "Cold War", 10, 121),
        SessionConfig("", "Cold War", 10, 10),
        SessionConfig("History", " ", 10, 10),
        SessionConfig("History", "Cold War", 0, 10),
        SessionConfig("History", "Cold War", 51, 10),
    ],
)
def test_invalid_config_keeps_setup(config: SessionConfig) -> None:
    controller = SessionController(FakeRemoteSource())
    assert not controller.start_study(config)
    assert controller.state == SetupState()


def test_start_study_ignored_outside_setup() -> None:
    controller = _studying()
    session_id = controller.state.session_id
    assert not controller.start_study(_config(5))
    assert controller.state.session_id == session_id


def test_ticks_decrement_until_expiry() -> None:
    source = FakeRemoteSource()
    controller = _studying(source, minutes=1)
    tickets = []
    for expected in range(59, 0, -1):
        assert controller.tick() is None
        assert controller.state.remaining_seconds == expected
    tickets.append(controller.tick())
    assert tickets[0] is not None
    assert controller.state.acquiring
    assert controller.state.remaining_seconds == 0
    # further ticks and skips are ignored while acquiring
    assert controller.tick() is None
    assert controller.skip() is None

    controller.run_acquisition(tickets[0])
    assert controller.stage is Stage.QUIZ
    assert source.calls == 1


def test_skip_then_expiry_fires_acquisition_once() -> None:
    source = FakeRemoteSource()
    controller = _studying(source)
    first = controller.skip()
    assert first is not None
    assert all(controller.tick() is None for _ in range(100))
    assert controller.skip() is None
    controller.run_acquisition(first)
    assert source.calls == 1
    assert controller.stage is Stage.QUIZ


def test_tick_for_other_session_is_ignored() -> None:
    controller = _studying()
    assert controller.tick("another-session") is None
    assert controller.state.remaining_seconds == 60


def test_static_source_goes_straight_to_quiz() -> None:
    controller = SessionController(StaticQuestionSource())
    assert controller.start_study(SessionConfig("", "", 0, 1))
    assert controller.state.config.question_count == 10
    for _ in range(59):
        controller.tick()
    assert controller.tick() is None
    state = controller.state
    assert isinstance(state, QuizState)
    assert len(state.questions) == 10


def test_static_bank_all_correct_end_to_end() -> None:
    controller = SessionController(StaticQuestionSource())
    controller.start_study(SessionConfig("", "", 0, 1))
    assert controller.skip() is None
    questions = controller.state.questions
    for entry, question in zip(STATIC_BANK, questions):
        assert controller.record_answer(question.id, str(entry.correct_index))
    assert controller.submit() == Results(correct=10, incorrect=0)


def test_generation_failure_returns_to_setup() -> None:
    source = FakeRemoteSource(error=QuestionGenerationError("HTTP error: 500", status_code=500))
    controller = _studying(source)
    assert not controller.run_acquisition(controller.skip())
    state = controller.state
    assert isinstance(state, SetupState)
    assert state.error == "HTTP error: 500"
    assert state.draft == _config()
    assert source.calls == 1


def test_unexpected_source_error_returns_to_setup() -> None:
    controller = _studying(FakeRemoteSource(error=RuntimeError("boom")))
    controller.run_acquisition(controller.skip())
    assert controller.state.error == "boom"
    assert controller.stage is Stage.SETUP


def test_empty_question_set_is_failure() -> None:
    controller = _studying(FakeRemoteSource(questions=[]))
    controller.run_acquisition(controller.skip())
    assert controller.stage is Stage.SETUP
    assert controller.state.error


def test_result_after_restart_is_dropped() -> None:
    controller = _studying()
    ticket = controller.skip()
    controller.restart()
    assert not controller.complete_acquisition(ticket, [_question("1")])
    assert controller.state == SetupState()

    assert controller.start_study(_config())
    assert not controller.fail_acquisition(ticket, "late failure")
    assert controller.stage is Stage.STUDYING
    assert controller.state.session_id != ticket.session_id


def test_record_answer_overwrites() -> None:
    controller = _quiz([_question("1"), _question("2")])
    assert controller.record_answer("1", "wrong")
    assert controller.record_answer("1", "right")
    assert dict(controller.state.answers) == {"1": "right"}
    assert controller.state.answered_count == 1


def test_record_answer_rejects_unknown_choices() -> None:
    controller = _quiz([_question("1")])
    assert not controller.record_answer("99", "right")
    assert not controller.record_answer("1", "nope")
    assert dict(controller.state.answers) == {}


def test_record_answer_ignored_outside_quiz() -> None:
    controller = _studying()
    assert not controller.record_answer("1", "right")


def test_submit_requires_every_answer() -> None:
    controller = _quiz([_question("1"), _question("2")])
    controller.record_answer("1", "right")
    assert not controller.can_submit
    assert controller.submit() is None
    assert controller.stage is Stage.QUIZ

    controller.record_answer("2", "wrong")
    assert controller.can_submit
    assert controller.submit() == Results(correct=1, incorrect=1)
    assert controller.stage is Stage.RESULTS
    # scoring happens once; a second submit is a no-op
    assert controller.submit() is None


def test_three_correct_two_incorrect_end_to_end() -> None:
    controller = _quiz([_question(str(i)) for i in range(1, 6)])
    for question_id, choice in zip("12345", ["right", "right", "right", "wrong", "wrong"]):
        controller.record_answer(question_id, choice)
    results = controller.submit()
    assert results == Results(correct=3, incorrect=2)
    assert results.correct + results.incorrect == 5


def test_restart_clears_everything() -> None:
    controller = _quiz([_question("1")])
    controller.record_answer("1", "right")
    controller.submit()
    assert isinstance(controller.state, ResultsState)

    controller.restart()
    assert controller.state == SetupState()
    assert controller.state.draft is None
    assert not controller.is_counting()


def test_restart_during_countdown_abandons_session() -> None:
    controller = _studying()
    controller.tick()
    controller.restart()
    assert controller.stage is Stage.SETUP
    assert controller.tick() is None
    assert controller.skip() is None
