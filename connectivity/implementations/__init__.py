"""
Connectivity Implementations Package

Exposes concrete implementations of the signal source interfaces.
"""

from connectivity.implementations.mock_radio_info import MockRadioInfo
from connectivity.implementations.mock_reachability import MockReachability
from connectivity.implementations.modemmanager_radio_info import (
    ModemManagerRadioInfo,
)
from connectivity.implementations.sysfs_reachability import SysfsReachability

# Public API
__all__ = [
    "MockRadioInfo",
    "MockReachability",
    "ModemManagerRadioInfo",
    "SysfsReachability",
]
