"""
Connectivity Module

Network connectivity classification and change notification.

Reports the device's connectivity class (unreachable, Wi-Fi, 2G/3G/4G/5G
cellular, or unclassified cellular) on demand and as a deduplicated
change stream backed by both OS events and periodic polling.

Provides automatic detection and graceful fallback between real Linux
sources (sysfs/procfs, ModemManager) and mock implementations for testing.

Public API:
    - ConnectivityMonitor: On-demand status and status stream
    - ConnectivityFactory: Factory for creating signal sources
    - create_signal_source: Quick source creation with auto-detection
    - classify: Pure status classifier
    - Status / ConnectionKind: Enumerations
    - to_wire / from_wire: Status wire strings
    - MonitoringUnavailableError: Raised when monitoring cannot start

Usage:
    from connectivity import ConnectivityMonitor, to_wire

    monitor = ConnectivityMonitor()
    print(to_wire(monitor.get_status()))   # e.g. "wifi"

    for status in monitor.subscribe():
        print(to_wire(status))
"""

from connectivity.classifier import classify
from connectivity.constants import ConnectionKind, Status
from connectivity.controllers.connectivity_monitor import ConnectivityMonitor
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.controllers.status_stream import StatusStream
from connectivity.factory import ConnectivityFactory, create_signal_source
from connectivity.interfaces.reachability_interface import (
    MonitoringUnavailableError,
    SourceError,
    SourceUnavailableError,
)
from connectivity.utils.wire_format import from_wire, to_wire

__all__ = [
    "ConnectionKind",
    "ConnectivityFactory",
    "ConnectivityMonitor",
    "MonitoringUnavailableError",
    "SignalSourceAdapter",
    "SourceError",
    "SourceUnavailableError",
    "Status",
    "StatusStream",
    "classify",
    "create_signal_source",
    "from_wire",
    "to_wire",
]
