"""
Connectivity Constants

Enums and technology vocabularies for the connectivity monitor.

Note: Tunable values (poll interval, paths, timeouts) live in
config/settings.py. This file only holds types and fixed vocabularies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

# =============================================================================
# STATUS
# =============================================================================


class Status(Enum):
    """
    Canonical connectivity classification reported to callers.

    Values are internal names only. Wire strings live in
    connectivity.utils.wire_format and must be converted explicitly.
    """

    UNREACHABLE = "unreachable"
    WIFI = "wifi"
    MOBILE_2G = "mobile_2g"
    MOBILE_3G = "mobile_3g"
    MOBILE_4G = "mobile_4g"
    MOBILE_5G = "mobile_5g"
    MOBILE_OTHER = "mobile_other"


class ConnectionKind(Enum):
    """
    Coarse connection kind reported by the reachability source.

    CELLULAR needs radio technology info to become a Status.
    """

    NONE = "none"
    WIFI = "wifi"
    CELLULAR = "cellular"


# =============================================================================
# RADIO TECHNOLOGY LABELS
# =============================================================================

RAT_NR = "NR"
RAT_NRNSA = "NRNSA"
RAT_NRNSA_LEGACY = "NRNSAMode"  # Older single-technology APIs
RAT_LTE = "LTE"
RAT_HSDPA = "HSDPA"
RAT_WCDMA = "WCDMA"
RAT_HSUPA = "HSUPA"
RAT_EVDO_REV0 = "EVDORev0"
RAT_EVDO_REVA = "EVDORevA"
RAT_EVDO_REVB = "EVDORevB"
RAT_EHRPD = "eHRPD"
RAT_EDGE = "Edge"
RAT_GPRS = "GPRS"
RAT_CDMA1X = "CDMA1x"

TECHNOLOGIES_5G = frozenset({RAT_NR, RAT_NRNSA, RAT_NRNSA_LEGACY})
TECHNOLOGIES_4G = frozenset({RAT_LTE})
TECHNOLOGIES_3G = frozenset(
    {
        RAT_HSDPA,
        RAT_WCDMA,
        RAT_HSUPA,
        RAT_EVDO_REV0,
        RAT_EVDO_REVA,
        RAT_EVDO_REVB,
        RAT_EHRPD,
    },
)
TECHNOLOGIES_2G = frozenset({RAT_EDGE, RAT_GPRS, RAT_CDMA1X})

KNOWN_TECHNOLOGIES = (
    TECHNOLOGIES_5G | TECHNOLOGIES_4G | TECHNOLOGIES_3G | TECHNOLOGIES_2G
)

# Bearer id used when a source can only report a single technology
DEFAULT_BEARER_ID = "default"

# Bearer id -> technology label
RadioTechnologySet = Dict[str, str]


@dataclass(frozen=True)
class SignalSnapshot:
    """One consistent read of the signal sources."""

    kind: ConnectionKind
    radios: RadioTechnologySet = field(default_factory=dict)


# =============================================================================
# CHANGE NOTIFIER
# =============================================================================


class NotifierState(Enum):
    """
    Change notifier lifecycle.

    Lifecycle: IDLE -> ACTIVE -> IDLE
    """

    IDLE = "idle"  # No subscription
    ACTIVE = "active"  # Subscription live, last status set


class TriggerSource(Enum):
    """Where a re-classification request came from."""

    SUBSCRIBE = "subscribe"
    EVENT = "event"
    POLL = "poll"


# =============================================================================
# ERROR CODES
# =============================================================================

ERROR_CODE_UNAVAILABLE = "UNAVAILABLE"
ERROR_MESSAGE_UNAVAILABLE = "Network monitoring unavailable"
