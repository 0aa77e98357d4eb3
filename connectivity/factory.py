"""
Connectivity Factory

Factory pattern for creating signal source implementations.
Selects real (Linux) or mock sources. Mocks are only created on request.

Single place to decide implementation.
"""

import logging
from typing import Literal

from config.settings import SOURCE_MODE
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.implementations.mock_radio_info import MockRadioInfo
from connectivity.implementations.mock_reachability import MockReachability
from connectivity.implementations.modemmanager_radio_info import ModemManagerRadioInfo
from connectivity.implementations.sysfs_reachability import SysfsReachability
from connectivity.interfaces.radio_info_interface import RadioInfoInterface
from connectivity.interfaces.reachability_interface import ReachabilityInterface

# Type alias for better type hints
SourceMode = Literal["auto", "real", "mock"]


class ConnectivityFactory:
    """
    Factory for creating signal sources.

    Usage:
        # Auto-detect (real sources; unavailable platform reports unreachable)
        source = ConnectivityFactory.create_signal_source()

        # Force mock mode (useful for testing)
        source = ConnectivityFactory.create_signal_source(mode="mock")

        # Force real sources (raises error if not available)
        source = ConnectivityFactory.create_signal_source(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_reachability(cls, mode: SourceMode = "auto") -> ReachabilityInterface:
        """
        Create a reachability source.

        Args:
            mode: "auto" (sysfs, even if unavailable), "real" (sysfs, must be
                  available), "mock" (force mock)

        Returns:
            ReachabilityInterface implementation

        Raises:
            RuntimeError: If mode="real" but sysfs/procfs are not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Reachability")
            return MockReachability()

        reachability = SysfsReachability()
        if reachability.is_available():
            cls._logger.info(f"Creating Sysfs Reachability ({mode})")
            return reachability

        if mode == "real":
            raise RuntimeError(
                "Real reachability requested but /proc/net/route or "
                "/sys/class/net is not available",
            )

        # Reads and notifier start raise SourceUnavailableError, so the
        # monitor reports unreachable and subscribe fails as UNAVAILABLE
        cls._logger.warning(
            "Sysfs reachability not available, monitoring will report unreachable",
        )
        return reachability

    @classmethod
    def create_radio_info(cls, mode: SourceMode = "auto") -> RadioInfoInterface:
        """
        Create a radio technology provider.

        Args:
            mode: "auto" (detect), "real" (force ModemManager), "mock" (force mock)

        Returns:
            RadioInfoInterface implementation

        Raises:
            RuntimeError: If mode="real" but mmcli is not installed
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Radio Info")
            return MockRadioInfo()

        radio_info = ModemManagerRadioInfo()
        if radio_info.is_available():
            cls._logger.info(f"Creating ModemManager Radio Info ({mode})")
            return radio_info

        if mode == "real":
            raise RuntimeError("Real radio info requested but mmcli is not installed")

        # Hosts without a modem simply never report radio technologies
        cls._logger.info("ModemManager not available, using empty Mock Radio Info")
        return MockRadioInfo()

    @classmethod
    def create_signal_source(cls, mode: SourceMode = SOURCE_MODE) -> SignalSourceAdapter:
        """
        Create a signal source adapter with both sources.

        Args:
            mode: "auto", "real" or "mock"

        Returns:
            SignalSourceAdapter

        Example:
            source = ConnectivityFactory.create_signal_source(mode="mock")
        """
        if mode not in ("auto", "real", "mock"):
            raise ValueError(f"Unknown source mode: {mode!r}")

        return SignalSourceAdapter(
            reachability=cls.create_reachability(mode),
            radio_info=cls.create_radio_info(mode),
        )

    @classmethod
    def is_real_source_available(cls) -> dict[str, bool]:
        """
        Check which real sources are available.

        Useful for diagnostics and configuration display.

        Returns:
            Dictionary with availability status:
            {
                'reachability': True/False,
                'radio_info': True/False
            }
        """
        return {
            "reachability": SysfsReachability().is_available(),
            "radio_info": ModemManagerRadioInfo().is_available(),
        }


# Convenience functions for quick creation

def create_signal_source(force_mock: bool = False) -> SignalSourceAdapter:
    """
    Quick signal source creation.

    Args:
        force_mock: If True, always use mocks

    Returns:
        Signal source adapter

    Example:
        source = create_signal_source(force_mock=True)
    """
    mode = "mock" if force_mock else SOURCE_MODE
    return ConnectivityFactory.create_signal_source(mode=mode)
