"""
Poll Timer

Fixed-interval background timer. Drives the poll trigger path of the
change notifier so a lost OS event delays an update by at most one
interval.
"""

import logging
import threading
from typing import Callable, Optional

from config.settings import POLL_INTERVAL, THREAD_JOIN_TIMEOUT


class PollTimer:
    """
    Repeating timer running a callback every `interval` seconds.

    Usage:
        timer = PollTimer(lambda: print("tick"), 3.0)
        timer.start()
        ...
        timer.stop()
    """

    def __init__(self, callback: Callable[[], None], interval: float = POLL_INTERVAL):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")

        self.logger = logging.getLogger(__name__)
        self.callback = callback
        self.interval = interval

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.tick_count = 0

    def start(self) -> None:
        """
        Start ticking.

        A running timer is stopped first - never two timers at once.
        """
        self.stop()

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._timer_worker,
            args=(self._stop_event,),
            daemon=True,
            name="PollTimer",
        )
        self._thread.start()
        self.logger.debug(f"Poll timer started (interval: {self.interval}s)")

    def stop(self) -> None:
        """Stop ticking (no-op if not running)"""
        thread = self._thread
        if thread is None:
            return

        self._stop_event.set()
        if thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=THREAD_JOIN_TIMEOUT)

        self._thread = None
        self.logger.debug("Poll timer stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _timer_worker(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            self.tick_count += 1
            try:
                self.callback()
            except Exception as e:
                self.logger.error(f"Error in poll callback: {e}")
