"""
Lifecycle Manager

Starts and stops the OS monitor, the poll timer and the change notifier
in lockstep with the (single) subscription.

Guarantees:
- Exactly one OS monitor and at most one poll timer alive at any time,
  however many subscribe/unsubscribe cycles happen
- Teardown is idempotent and also runs at process exit
- A monitor that cannot start surfaces once, at subscribe time
"""

import atexit
import logging
from typing import Any, Dict, Optional

from config.settings import POLL_INTERVAL
from connectivity.constants import ERROR_CODE_UNAVAILABLE, ERROR_MESSAGE_UNAVAILABLE
from connectivity.controllers.change_notifier import (
    ChangeNotifier,
    StatusListener,
    Subscription,
)
from connectivity.controllers.poll_timer import PollTimer
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.interfaces.reachability_interface import (
    MonitoringUnavailableError,
    SourceUnavailableError,
)


class LifecycleManager:
    """
    Manages subscribe/unsubscribe of the single active listener.

    Usage:
        manager = LifecycleManager(source, poll_interval=3.0)
        manager.subscribe(lambda status: print(status))
        ...
        manager.unsubscribe()
    """

    def __init__(
        self,
        source: SignalSourceAdapter,
        notifier: Optional[ChangeNotifier] = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        """
        Initialize lifecycle manager.

        Args:
            source: Signal source whose OS monitor this manager owns
            notifier: Change notifier, or None to create one for source
            poll_interval: Seconds between poll triggers
        """
        self.logger = logging.getLogger(__name__)
        self.source = source
        self.notifier = notifier or ChangeNotifier(source)
        self.poll_timer = PollTimer(self.notifier.on_poll_tick, poll_interval)

        # Shared with the notifier so a listener may unsubscribe re-entrantly
        self._lock = self.notifier.lock
        self._atexit_registered = False

        self.subscribe_count = 0

        self.logger.info(f"Lifecycle Manager initialized (poll interval: {poll_interval}s)")

    # =========================================================================
    # SUBSCRIBE / UNSUBSCRIBE
    # =========================================================================

    def subscribe(self, listener: StatusListener) -> Subscription:
        """
        Begin monitoring and deliver statuses to listener.

        Any previous subscription is torn down first. On success the
        current status has already been delivered when this returns.

        Args:
            listener: Receives each Status

        Returns:
            The live Subscription

        Raises:
            MonitoringUnavailableError: If the OS monitor cannot start
                (nothing is left running, no value is delivered)
        """
        previous = None
        try:
            with self._lock:
                previous = self.notifier.subscription
                if self._teardown():
                    self.logger.info("Cleared previous subscription before subscribing")

                try:
                    self.source.start(self.notifier.on_source_change)
                except SourceUnavailableError as e:
                    self.logger.error(f"Failed to initialize network monitoring: {e}")
                    raise MonitoringUnavailableError(
                        code=ERROR_CODE_UNAVAILABLE,
                        message=ERROR_MESSAGE_UNAVAILABLE,
                        details=f"Failed to initialize network monitoring: {e}",
                    ) from e

                subscription = self.notifier.open(listener)
                self.subscribe_count += 1

            # The first classification may query the modem, so it runs
            # unlocked; a concurrent unsubscribe just ends the subscription
            self.notifier.start(subscription)

            with self._lock:
                # The listener (or another thread) may have unsubscribed meanwhile
                if subscription.active:
                    self.poll_timer.start()
                    self._register_atexit()
        finally:
            self.notifier.join_worker(previous)

        self.logger.info(f"Subscribed (subscription #{subscription.id})")
        return subscription

    def unsubscribe(self) -> bool:
        """
        Stop monitoring.

        Safe to call any number of times, from any thread, including
        from inside the listener.

        Returns:
            True if something was torn down, False if already idle
        """
        with self._lock:
            subscription = self.notifier.subscription
            torn_down = self._teardown()

        self.notifier.join_worker(subscription)

        if torn_down:
            self.logger.info("Unsubscribed")
        return torn_down

    def _teardown(self) -> bool:
        """
        Stop notifier, poll timer and OS monitor (caller holds the lock).

        Returns:
            True if any of them was running
        """
        was_active = self.notifier.deactivate(wait=False)

        was_polling = self.poll_timer.is_running()
        self.poll_timer.stop()

        was_started = self.source.is_started()
        self.source.stop()

        return was_active or was_polling or was_started

    def is_active(self) -> bool:
        return self.notifier.is_active()

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def _register_atexit(self) -> None:
        if not self._atexit_registered:
            atexit.register(self.shutdown)
            self._atexit_registered = True

    def shutdown(self) -> None:
        """
        Tear everything down for process exit.

        Always call this when done with the manager!
        """
        self.unsubscribe()

        if self._atexit_registered:
            atexit.unregister(self.shutdown)
            self._atexit_registered = False

    def __del__(self):
        """Destructor - ensure cleanup"""
        self.shutdown()

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def get_status(self) -> Dict[str, Any]:
        """
        Get lifecycle diagnostics.

        Returns:
            Dictionary with status information
        """
        return {
            "active": self.is_active(),
            "source_started": self.source.is_started(),
            "poll_timer_running": self.poll_timer.is_running(),
            "poll_interval": self.poll_timer.interval,
            "subscribe_count": self.subscribe_count,
            "notifier": self.notifier.get_status(),
        }
