"""
Owned, cancellable repeating timer used to drive session polling.
The session holds the handle and cancels it on teardown.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls *callback* every *interval* seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="market-data-poller", daemon=True)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self._callback()
            except Exception:
                # One failed tick must not stop future polls
                logger.exception("Polling callback failed")
