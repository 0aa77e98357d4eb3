"""
Mock Reachability Implementation

Simulated reachability source for testing without real network hardware.

This is a "Fake" (test double) - it has working logic (notifier state,
callbacks) but the connection kind is whatever the test sets.
"""

import logging
import threading
from typing import Optional

from connectivity.constants import ConnectionKind
from connectivity.interfaces.reachability_interface import (
    ChangeCallback,
    ReachabilityInterface,
    SourceUnavailableError,
)


class MockReachability(ReachabilityInterface):
    """
    Mock reachability source for testing.

    Notifications are delivered synchronously on the thread that calls
    set_connection_kind(), like an OS callback arriving on its own thread.

    Usage:
        reachability = MockReachability(ConnectionKind.WIFI)
        reachability.start_notifier(on_change)
        reachability.set_connection_kind(ConnectionKind.CELLULAR)  # fires on_change
    """

    def __init__(self, initial_kind: ConnectionKind = ConnectionKind.WIFI):
        """
        Initialize mock reachability.

        Args:
            initial_kind: Connection kind reported until changed
        """
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()

        self._kind = initial_kind
        self._on_change: Optional[ChangeCallback] = None
        self._last_callback: Optional[ChangeCallback] = None
        self._notifying = False

        # Counters for leak checks
        self.start_count = 0
        self.stop_count = 0

        # Configuration for test scenarios
        self._should_fail_start = False
        self._should_fail_read = False
        self._notifications_suppressed = False

        self.logger.info(f"Mock Reachability initialized (kind: {initial_kind.value})")

    # =========================================================================
    # ReachabilityInterface
    # =========================================================================

    def start_notifier(self, on_change: ChangeCallback) -> None:
        """Simulate starting the OS notifier"""
        if self._should_fail_start:
            self.logger.error("[MOCK] Simulated notifier start failure")
            raise SourceUnavailableError("Simulated reachability failure")

        if self._notifying:
            self.logger.debug("[MOCK] Notifier already running, restarting")
            self.stop_notifier()

        with self._lock:
            self._on_change = on_change
            self._last_callback = on_change
            self._notifying = True
            self.start_count += 1

        self.logger.info("[MOCK] Notifier started")

    def stop_notifier(self) -> None:
        """Simulate stopping the OS notifier"""
        with self._lock:
            if not self._notifying:
                return
            self._notifying = False
            self._on_change = None
            self.stop_count += 1

        self.logger.info("[MOCK] Notifier stopped")

    def is_notifying(self) -> bool:
        return self._notifying

    def current_connection_kind(self) -> ConnectionKind:
        if self._should_fail_read:
            raise SourceUnavailableError("Simulated reachability read failure")

        with self._lock:
            return self._kind

    def is_available(self) -> bool:
        """Mock reachability is always available"""
        return True

    def cleanup(self) -> None:
        """Stop notifier"""
        self.logger.debug("[MOCK] Cleanup")
        self.stop_notifier()

    # =========================================================================
    # TESTING HELPER METHODS (not part of ReachabilityInterface)
    # =========================================================================

    @property
    def active_notifiers(self) -> int:
        """Number of notifiers currently running (0 or 1 if nothing leaks)"""
        return self.start_count - self.stop_count

    def set_connection_kind(self, kind: ConnectionKind, notify: bool = True) -> None:
        """
        Change the reported connection kind.

        Args:
            kind: New connection kind
            notify: If True (and not suppressed), fire the change callback

        Example:
            mock.set_connection_kind(ConnectionKind.NONE)
        """
        with self._lock:
            self._kind = kind
            callback = self._on_change

        self.logger.debug(f"[MOCK] Connection kind set to {kind.value}")

        if notify and callback is not None and not self._notifications_suppressed:
            callback()

    def notify_change(self) -> None:
        """Fire the change callback without changing anything"""
        callback = self._on_change
        if callback is not None:
            callback()

    def deliver_stale_notification(self) -> None:
        """
        Fire the most recent callback even if the notifier was stopped.

        Simulates an OS notification that was queued before stop_notifier()
        and delivered afterwards.
        """
        callback = self._last_callback
        if callback is not None:
            callback()

    def simulate_start_failure(self) -> None:
        """
        Configure mock to fail on next start_notifier() call.

        Example:
            mock.simulate_start_failure()
            with pytest.raises(SourceUnavailableError):
                mock.start_notifier(lambda: None)
        """
        self._should_fail_start = True
        self.logger.debug("[MOCK] Configured to fail on start")

    def simulate_read_failure(self, enabled: bool = True) -> None:
        """Configure current_connection_kind() to raise"""
        self._should_fail_read = enabled
        self.logger.debug(f"[MOCK] Read failure: {enabled}")

    def suppress_notifications(self, enabled: bool = True) -> None:
        """
        Stop set_connection_kind() from firing callbacks.

        Simulates lost/never-delivered OS events (exercises polling).
        """
        self._notifications_suppressed = enabled
        self.logger.debug(f"[MOCK] Notifications suppressed: {enabled}")

    def reset_test_config(self) -> None:
        """Reset test configuration to normal operation"""
        self._should_fail_start = False
        self._should_fail_read = False
        self._notifications_suppressed = False
        self.logger.debug("[MOCK] Test configuration reset")
