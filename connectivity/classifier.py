"""
Status Classifier

Maps a signal source reading onto one canonical Status.

Pure and deterministic - no state, no I/O, safe to call from any thread.

Precedence (first match wins):
    1. Wi-Fi                    -> WIFI
    2. No connection            -> UNREACHABLE
    3. Cellular, best radio present:
         NR / NR-NSA            -> MOBILE_5G
         LTE                    -> MOBILE_4G
         HSPA / WCDMA / EV-DO   -> MOBILE_3G
         EDGE / GPRS / 1xRTT    -> MOBILE_2G
         unrecognized or empty  -> MOBILE_OTHER
    4. Anything else            -> UNREACHABLE

Multi-SIM and dual-connectivity devices report several radios at once;
the highest generation present wins.
"""

from typing import Iterable, Optional

from connectivity.constants import (
    TECHNOLOGIES_2G,
    TECHNOLOGIES_3G,
    TECHNOLOGIES_4G,
    TECHNOLOGIES_5G,
    ConnectionKind,
    RadioTechnologySet,
    SignalSnapshot,
    Status,
)

# Checked in order, highest generation first
_CELLULAR_PRECEDENCE = (
    (TECHNOLOGIES_5G, Status.MOBILE_5G),
    (TECHNOLOGIES_4G, Status.MOBILE_4G),
    (TECHNOLOGIES_3G, Status.MOBILE_3G),
    (TECHNOLOGIES_2G, Status.MOBILE_2G),
)


def classify(
    kind: Optional[ConnectionKind],
    radios: Optional[RadioTechnologySet] = None,
) -> Status:
    """
    Classify a connection kind and radio set into a Status.

    Args:
        kind: Connection kind from the reachability source
              (None is treated as an unavailable source)
        radios: Bearer id -> technology label, only consulted for CELLULAR

    Returns:
        Canonical Status

    Example:
        classify(ConnectionKind.CELLULAR, {"a": "NR", "b": "LTE"})
        # -> Status.MOBILE_5G
    """
    if kind == ConnectionKind.WIFI:
        return Status.WIFI

    if kind is None or kind == ConnectionKind.NONE:
        return Status.UNREACHABLE

    if kind == ConnectionKind.CELLULAR:
        return classify_cellular((radios or {}).values())

    return Status.UNREACHABLE


def classify_cellular(technologies: Iterable[str]) -> Status:
    """
    Pick the best cellular Status for a collection of technology labels.

    Unrecognized labels and an empty collection both give MOBILE_OTHER.
    """
    present = set(technologies)

    for group, status in _CELLULAR_PRECEDENCE:
        if present & group:
            return status

    return Status.MOBILE_OTHER


def classify_snapshot(snapshot: SignalSnapshot) -> Status:
    """Classify a SignalSnapshot"""
    return classify(snapshot.kind, snapshot.radios)
