"""
Connectivity Utilities Package

Helper functions shared by the connectivity monitor.
"""

from connectivity.utils.wire_format import (
    STATUS_TO_WIRE,
    WIRE_VALUES,
    from_wire,
    to_wire,
)

__all__ = [
    "STATUS_TO_WIRE",
    "WIRE_VALUES",
    "from_wire",
    "to_wire",
]
