"""
Connectivity Controllers Package

Exposes the controllers that turn signal sources into a status stream.
"""

from connectivity.controllers.change_notifier import ChangeNotifier, Subscription
from connectivity.controllers.connectivity_monitor import ConnectivityMonitor
from connectivity.controllers.lifecycle_manager import LifecycleManager
from connectivity.controllers.poll_timer import PollTimer
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.controllers.status_stream import StatusStream

__all__ = [
    "ChangeNotifier",
    "ConnectivityMonitor",
    "LifecycleManager",
    "PollTimer",
    "SignalSourceAdapter",
    "StatusStream",
    "Subscription",
]
