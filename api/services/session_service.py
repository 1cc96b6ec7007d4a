"""Service layer holding the process-wide study session."""
import logging
import threading

from core.config import TICK_INTERVAL_SECONDS
from question_source import make_question_source
from session_controller import SessionController
from session_runner import SessionRunner

log = logging.getLogger(__name__)

_runner: SessionRunner | None = None
_runner_lock = threading.Lock()


def create_runner(
    source_kind: str | None = None,
    base_url: str | None = None,
    tick_interval: float = TICK_INTERVAL_SECONDS,
) -> SessionRunner:
    """Build a runner for a fresh controller and the configured source."""
    source = make_question_source(source_kind, base_url)
    log.info(
        "Question source: %s", "remote " + source.url if source.is_remote else "static bank"
    )
    return SessionRunner(SessionController(source), tick_interval=tick_interval)


def get_runner() -> SessionRunner:
    """Get the single session runner, creating it on first use."""
    global _runner
    with _runner_lock:
        if _runner is None:
            _runner = create_runner()
        return _runner


def set_runner(runner: SessionRunner | None) -> None:
    """Replace the session runner (used by the server entry point)."""
    global _runner
    with _runner_lock:
        if _runner is not None and _runner is not runner:
            _runner.shutdown()
        _runner = runner


def shutdown_runner() -> None:
    set_runner(None)
