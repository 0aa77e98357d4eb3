"""
Connectivity Monitor

High-level entry point: on-demand status query plus the live,
deduplicated status stream.

This is what services and scripts use; the lower-level controllers
(SignalSourceAdapter, ChangeNotifier, LifecycleManager) stay internal.
"""

import logging
from typing import Any, Callable, Dict, Optional

from config.settings import POLL_INTERVAL
from connectivity.classifier import classify_snapshot
from connectivity.constants import Status
from connectivity.controllers.lifecycle_manager import LifecycleManager
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.controllers.status_stream import StatusStream
from connectivity.factory import create_signal_source
from connectivity.interfaces.reachability_interface import SourceError
from connectivity.utils.wire_format import to_wire


class ConnectivityMonitor:
    """
    Reports connectivity status on demand and as a change stream.

    Usage:
        monitor = ConnectivityMonitor()
        print(to_wire(monitor.get_status()))

        stream = monitor.subscribe()
        for status in stream:
            print(to_wire(status))
            if done:
                monitor.unsubscribe()   # ends the iteration

        monitor.shutdown()
    """

    def __init__(
        self,
        source: Optional[SignalSourceAdapter] = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        """
        Initialize connectivity monitor.

        Args:
            source: Signal source, or None to auto-create
            poll_interval: Seconds between poll triggers

        Example:
            # Normal usage - auto-detects sources
            monitor = ConnectivityMonitor()

            # Testing with mocks
            source = SignalSourceAdapter(MockReachability(), MockRadioInfo())
            monitor = ConnectivityMonitor(source=source, poll_interval=0.05)
        """
        self.logger = logging.getLogger(__name__)
        self.source = source or create_signal_source()
        self.lifecycle = LifecycleManager(self.source, poll_interval=poll_interval)

        self._stream: Optional[StatusStream] = None

        self.logger.info(
            f"Connectivity Monitor initialized "
            f"(source available: {self.source.is_available()})",
        )

    # =========================================================================
    # QUERY
    # =========================================================================

    def get_status(self) -> Status:
        """
        Classify current connectivity.

        Works without a subscription: reads the sources ad hoc without
        starting a monitor. Any failure reports UNREACHABLE.

        Returns:
            Current Status
        """
        if self.lifecycle.is_active():
            return self.lifecycle.notifier.current_status()

        try:
            snapshot = self.source.snapshot()
        except SourceError as e:
            self.logger.warning(f"Ad-hoc connectivity check failed: {e}")
            return Status.UNREACHABLE

        status = classify_snapshot(snapshot)
        self.logger.debug(f"Ad-hoc connectivity check: {to_wire(status)}")
        return status

    # =========================================================================
    # STREAM
    # =========================================================================

    def subscribe(
        self,
        listener: Optional[Callable[[Status], None]] = None,
    ) -> StatusStream:
        """
        Start the status stream.

        The current status is always the first value. A previous stream
        is closed and replaced.

        Args:
            listener: Optional callback for each status (notifier thread)

        Returns:
            StatusStream yielding Status values

        Raises:
            MonitoringUnavailableError: If monitoring cannot start
                (code "UNAVAILABLE"); no values are produced
        """
        self._close_stream()

        stream = StatusStream(on_status=listener)
        self._stream = stream
        try:
            self.lifecycle.subscribe(stream.push)
        except Exception:
            self._close_stream()
            raise

        return stream

    def unsubscribe(self) -> bool:
        """
        Stop the status stream.

        Idempotent.

        Returns:
            True if a subscription was torn down
        """
        torn_down = self.lifecycle.unsubscribe()
        self._close_stream()
        return torn_down

    def is_subscribed(self) -> bool:
        return self.lifecycle.is_active()

    def _close_stream(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is not None:
            stream.close()

    # =========================================================================
    # STATUS AND CLEANUP
    # =========================================================================

    def get_status_info(self) -> Dict[str, Any]:
        """
        Get monitor diagnostics.

        Returns:
            Dictionary with status information
        """
        info = self.lifecycle.get_status()
        info["current_status"] = to_wire(self.get_status())
        info["source_available"] = self.source.is_available()
        return info

    def shutdown(self) -> None:
        """
        Stop streaming and release sources.

        Always call this when done with the monitor!
        """
        self.logger.info("Shutting down Connectivity Monitor")
        self.lifecycle.shutdown()
        self._close_stream()
        self.source.cleanup()
