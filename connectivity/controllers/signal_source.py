"""
Signal Source Adapter

Combines the reachability source and the radio technology provider into
one snapshot-able signal source, and owns the OS notifier lifecycle.

SOLID Principles:
- Single Responsibility: Only wraps the two OS-level sources
- Dependency Inversion: Depends on ReachabilityInterface / RadioInfoInterface
"""

import logging
import threading
from typing import Optional

from connectivity.constants import ConnectionKind, RadioTechnologySet, SignalSnapshot
from connectivity.interfaces.radio_info_interface import RadioInfoInterface
from connectivity.interfaces.reachability_interface import (
    ChangeCallback,
    ReachabilityInterface,
    SourceUnavailableError,
)


class SignalSourceAdapter:
    """
    Wraps the OS reachability primitive and the radio info provider.

    Usage:
        source = SignalSourceAdapter(SysfsReachability(), ModemManagerRadioInfo())
        source.start(on_change=lambda: print("changed"))
        snapshot = source.snapshot()
        source.stop()
    """

    def __init__(
        self,
        reachability: ReachabilityInterface,
        radio_info: RadioInfoInterface,
    ):
        """
        Initialize adapter.

        Args:
            reachability: OS reachability source
            radio_info: Radio technology provider
        """
        self.logger = logging.getLogger(__name__)
        self.reachability = reachability
        self.radio_info = radio_info

        self._lock = threading.Lock()
        self._started = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self, on_change: ChangeCallback) -> None:
        """
        Start the OS notifier.

        If already started, the running notifier is stopped first so that
        exactly one monitor is alive afterwards.

        Args:
            on_change: Called when the OS reports a connectivity change

        Raises:
            SourceUnavailableError: If the notifier cannot be started
        """
        with self._lock:
            if self._started:
                self.logger.debug("Signal source already started, restarting")
                self._stop_locked()

            try:
                self.reachability.start_notifier(on_change)
            except SourceUnavailableError:
                raise
            except Exception as e:
                raise SourceUnavailableError(f"Failed to start notifier: {e}") from e

            self._started = True

        self.logger.info("Signal source started")

    def stop(self) -> None:
        """Stop the OS notifier (no-op if not started)"""
        with self._lock:
            if not self._started:
                return
            self._stop_locked()

        self.logger.info("Signal source stopped")

    def _stop_locked(self) -> None:
        try:
            self.reachability.stop_notifier()
        except Exception as e:
            self.logger.error(f"Error stopping reachability notifier: {e}")
        self._started = False

    def is_started(self) -> bool:
        return self._started

    # =========================================================================
    # READING
    # =========================================================================

    def current_connection_kind(self) -> ConnectionKind:
        """
        Raises:
            SourceUnavailableError: If reachability cannot be read
        """
        return self.reachability.current_connection_kind()

    def current_radio_technologies(self) -> RadioTechnologySet:
        """
        Get radio technologies - empty unless currently on cellular.

        Raises:
            SourceUnavailableError: If reachability cannot be read
        """
        return self._radios_for(self.current_connection_kind())

    def snapshot(self) -> SignalSnapshot:
        """
        Read connection kind and (for cellular) radios together.

        Raises:
            SourceUnavailableError: If reachability cannot be read
        """
        kind = self.current_connection_kind()
        return SignalSnapshot(kind=kind, radios=self._radios_for(kind))

    def _radios_for(self, kind: Optional[ConnectionKind]) -> RadioTechnologySet:
        if kind != ConnectionKind.CELLULAR:
            return {}

        try:
            return self.radio_info.current_radio_technologies()
        except Exception as e:
            # Providers should not raise; treat as "no info yet"
            self.logger.warning(f"Radio technology query failed: {e}")
            return {}

    # =========================================================================
    # AVAILABILITY / CLEANUP
    # =========================================================================

    def is_available(self) -> bool:
        return self.reachability.is_available()

    def cleanup(self) -> None:
        """Stop notifier and release sources"""
        self.logger.debug("Signal source cleanup")
        self.stop()
        self.reachability.cleanup()
