"""Background countdown and acquisition driver for a SessionController."""
from __future__ import annotations

import logging
import threading

from core.config import TICK_INTERVAL_SECONDS
from models import AcquisitionTicket, SessionConfig
from session_controller import SessionController

log = logging.getLogger(__name__)


class SessionRunner:
    """
    Drives one controller from worker threads.

    A daemon ticker thread ticks the countdown once per interval while the
    session is studying, and remote acquisitions run on their own daemon
    thread. With ``background`` off nothing is threaded: ticks come only from
    explicit ``tick()`` calls and acquisitions run inline.
    """

    def __init__(
        self,
        controller: SessionController,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        background: bool = True,
    ) -> None:
        self.controller = controller
        self.tick_interval = tick_interval
        self.background = background
        self._stop = threading.Event()
        self._ticker: threading.Thread | None = None
        self._acquisitions: list[threading.Thread] = []

    def start_study(self, config: SessionConfig) -> bool:
        if not self.controller.start_study(config):
            return False
        if self.background:
            self._start_ticker(self.controller.state.session_id)
        return True

    def tick(self) -> None:
        ticket = self.controller.tick()
        if ticket:
            self._dispatch(ticket)

    def skip(self) -> bool:
        if not self.controller.is_counting():
            return False
        ticket = self.controller.skip()
        if ticket:
            self._dispatch(ticket)
        return True

    def restart(self) -> None:
        self._stop_ticker()
        self.controller.restart()

    def shutdown(self) -> None:
        self._stop_ticker()

    def wait_for_acquisition(self, timeout: float | None = None) -> None:
        for thread in list(self._acquisitions):
            thread.join(timeout)

    def _start_ticker(self, session_id: str) -> None:
        self._stop_ticker()
        stop = threading.Event()
        self._stop = stop

        def _worker() -> None:
            while not stop.wait(self.tick_interval):
                ticket = self.controller.tick(session_id)
                if ticket:
                    self._dispatch(ticket)
                if not self.controller.is_counting(session_id):
                    break

        thread = threading.Thread(
            target=_worker,
            name=f"countdown-{session_id[:8]}",
            daemon=True,
        )
        self._ticker = thread
        thread.start()

    def _stop_ticker(self) -> None:
        self._stop.set()
        thread = self._ticker
        self._ticker = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.tick_interval + 1)

    def _dispatch(self, ticket: AcquisitionTicket) -> None:
        if not self.background:
            self.controller.run_acquisition(ticket)
            return
        self._acquisitions = [t for t in self._acquisitions if t.is_alive()]
        thread = threading.Thread(
            target=self.controller.run_acquisition,
            args=(ticket,),
            name=f"acquisition-{ticket.session_id[:8]}",
            daemon=True,
        )
        self._acquisitions.append(thread)
        thread.start()
        log.debug("Acquisition dispatched for session %s", ticket.session_id)
