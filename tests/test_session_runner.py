import threading
import time

from models import Alternative, Question, SessionConfig, Stage
from question_source import StaticQuestionSource
from session_controller import SessionController
from session_runner import SessionRunner


def _question(question_id: str) -> Question:
    return Question(
        id=question_id,
        statement=f"Question {question_id}",
        alternatives=(Alternative("a", "A", is_correct=True),),
    )


class SlowRemoteSource:
    is_remote = True
    requires_topic = True

    def __init__(self):
        self.calls = 0
        self.release = threading.Event()

    def fetch(self, config):
        self.calls += 1
        self.release.wait(5)
        return [_question("1")]


CONFIG = SessionConfig("History", "Cold War", 1, 1)


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_foreground_runner_ticks_and_acquires_inline() -> None:
    source = SlowRemoteSource()
    source.release.set()
    runner = SessionRunner(SessionController(source), background=False)
    assert runner.start_study(CONFIG)
    for _ in range(60):
        runner.tick()
    assert runner.controller.stage is Stage.QUIZ
    assert source.calls == 1


def test_background_countdown_expires_once() -> None:
    source = SlowRemoteSource()
    source.release.set()
    runner = SessionRunner(SessionController(source), tick_interval=0.001)
    try:
        assert runner.start_study(CONFIG)
        assert _wait_for(lambda: runner.controller.stage is Stage.QUIZ)
        runner.wait_for_acquisition(timeout=5)
        assert source.calls == 1
    finally:
        runner.shutdown()


def test_skip_while_acquiring_is_ignored() -> None:
    source = SlowRemoteSource()
    runner = SessionRunner(SessionController(source), tick_interval=60)
    try:
        runner.start_study(CONFIG)
        assert runner.skip()
        assert _wait_for(lambda: source.calls == 1)
        assert runner.controller.state.acquiring
        assert not runner.skip()
        source.release.set()
        runner.wait_for_acquisition(timeout=5)
        assert runner.controller.stage is Stage.QUIZ
        assert source.calls == 1
    finally:
        source.release.set()
        runner.shutdown()


def test_restart_during_acquisition_drops_result() -> None:
    source = SlowRemoteSource()
    runner = SessionRunner(SessionController(source), tick_interval=60)
    try:
        runner.start_study(CONFIG)
        runner.skip()
        assert _wait_for(lambda: source.calls == 1)
        runner.restart()
        source.release.set()
        runner.wait_for_acquisition(timeout=5)
        assert runner.controller.stage is Stage.SETUP
        assert runner.controller.state.error is None
    finally:
        source.release.set()
        runner.shutdown()


def test_static_skip_loads_questions() -> None:
    runner = SessionRunner(SessionController(StaticQuestionSource()), tick_interval=60)
    try:
        runner.start_study(SessionConfig("", "", 0, 5))
        assert runner.skip()
        assert runner.controller.stage is Stage.QUIZ
        assert not runner.skip()
    finally:
        runner.shutdown()
