"""
Connectivity Interfaces Package

Exposes abstract interfaces for signal sources.
"""

from connectivity.interfaces.radio_info_interface import RadioInfoInterface
from connectivity.interfaces.reachability_interface import (
    ChangeCallback,
    MonitoringUnavailableError,
    ReachabilityInterface,
    SourceError,
    SourceUnavailableError,
)

# Public API
__all__ = [
    "ChangeCallback",
    # Exceptions
    "MonitoringUnavailableError",
    # Interfaces
    "RadioInfoInterface",
    "ReachabilityInterface",
    "SourceError",
    "SourceUnavailableError",
]
