"""
Reachability Interface

Abstract interface for OS-level reachability primitives.
Defines the contract that any reachability source must follow.

High-level code (SignalSourceAdapter) depends on this abstraction,
not on sysfs/procfs directly, so tests can swap in MockReachability.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from connectivity.constants import ConnectionKind

ChangeCallback = Callable[[], None]


class ReachabilityInterface(ABC):
    """
    Abstract base class for reachability sources.

    A source reports how (if at all) the device can reach the network,
    and can push a notification whenever that may have changed.
    """

    @abstractmethod
    def start_notifier(self, on_change: ChangeCallback) -> None:
        """
        Start delivering change notifications.

        Notifications are asynchronous and carry no payload - receivers
        re-read current_connection_kind() themselves.

        Args:
            on_change: Called (from any thread) when connectivity may have changed

        Raises:
            SourceUnavailableError: If the monitor cannot be constructed
        """
        pass

    @abstractmethod
    def stop_notifier(self) -> None:
        """
        Stop delivering change notifications.

        Safe to call when not started.
        """
        pass

    @abstractmethod
    def is_notifying(self) -> bool:
        """Check if the notifier is running"""
        pass

    @abstractmethod
    def current_connection_kind(self) -> ConnectionKind:
        """
        Read the current connection kind.

        Does not require the notifier to be running.

        Returns:
            ConnectionKind.NONE, WIFI or CELLULAR

        Raises:
            SourceUnavailableError: If platform state cannot be read
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this source can be used on the current host.

        Returns:
            True if the platform facilities exist, False otherwise
        """
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """
        Stop the notifier and release resources.

        This should never raise exceptions.
        """
        pass


class SourceError(Exception):
    """
    Exception raised for signal source errors.

    Examples:
    - Monitor could not be constructed
    - Platform state could not be read
    """

    pass


class SourceUnavailableError(SourceError):
    """Signal source could not be started or read"""

    pass


class MonitoringUnavailableError(Exception):
    """
    Raised once, at subscribe time, when monitoring cannot begin.

    Attributes:
        code: Stable error code for consumers ("UNAVAILABLE")
        message: Human-readable summary
        details: Underlying cause, if known
    """

    def __init__(self, code: str, message: str, details: Optional[str] = None):
        super().__init__(f"{code}: {message}" + (f" ({details})" if details else ""))
        self.code = code
        self.message = message
        self.details = details
