"""
Status Wire Format

Serialization table between Status and the strings existing consumers
expect. These strings are a compatibility contract - never change them.

Kept apart from the Status enum so renaming/reordering the enum can
never alter what goes over the wire.
"""

from typing import Dict

from connectivity.constants import Status

STATUS_TO_WIRE: Dict[Status, str] = {
    Status.UNREACHABLE: "unreach",
    Status.WIFI: "wifi",
    Status.MOBILE_2G: "mobile2G",
    Status.MOBILE_3G: "mobile3G",
    Status.MOBILE_4G: "mobile4G",
    Status.MOBILE_5G: "mobile5G",
    Status.MOBILE_OTHER: "mobileOther",
}

WIRE_TO_STATUS: Dict[str, Status] = {
    wire: status for status, wire in STATUS_TO_WIRE.items()
}

WIRE_VALUES = tuple(STATUS_TO_WIRE.values())


def to_wire(status: Status) -> str:
    """
    Convert Status to its wire string.

    Example:
        to_wire(Status.MOBILE_4G) -> "mobile4G"
    """
    return STATUS_TO_WIRE[status]


def from_wire(value: str) -> Status:
    """
    Parse a wire string into Status.

    Raises:
        ValueError: If value is not a known wire string

    Example:
        from_wire("unreach") -> Status.UNREACHABLE
    """
    try:
        return WIRE_TO_STATUS[value]
    except KeyError:
        raise ValueError(
            f"Unknown status wire value: {value!r} "
            f"(expected one of {', '.join(WIRE_VALUES)})",
        ) from None
