"""
Core utilities shared by the signal sources.

Public API:
    - check_internet_connectivity: TCP probe used by SysfsReachability
      when CONNECTIVITY_INTERNET_PROBE is enabled
"""

from core.network import check_internet_connectivity

__all__ = [
    "check_internet_connectivity",
]
