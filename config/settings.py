"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Machine-specific overrides belong in .env, NOT here
- Import these settings in modules: from config.settings import POLL_INTERVAL
- Keep values generic and platform-agnostic where possible
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# CHANGE NOTIFICATION
# =============================================================================

# Poll interval bounds worst-case staleness of the status stream
POLL_INTERVAL = float(os.getenv("CONNECTIVITY_POLL_INTERVAL", "3.0"))  # seconds

# Pending triggers per subscription (extra triggers are dropped, not queued)
TRIGGER_QUEUE_SIZE = 8

# How long the notifier worker waits on an empty queue before re-checking stop
WORKER_IDLE_TIMEOUT = 0.5  # seconds

# Thread join timeout used when tearing down workers/timers/notifiers
THREAD_JOIN_TIMEOUT = 2.0  # seconds

# Unsubscribe waits at most this long for a notifier worker; a worker still
# inside a slow classification exits on its own without emitting
WORKER_JOIN_TIMEOUT = 0.2  # seconds

# =============================================================================
# SIGNAL SOURCES
# =============================================================================

# auto (detect), real (force Linux sources), mock (force mocks)
SOURCE_MODE = os.getenv("CONNECTIVITY_SOURCE_MODE", "auto")

# Reachability (Linux sysfs/procfs)
SYSFS_NET_PATH = os.getenv("CONNECTIVITY_SYSFS_NET_PATH", "/sys/class/net")
PROC_ROUTE_PATH = os.getenv("CONNECTIVITY_PROC_ROUTE_PATH", "/proc/net/route")
NOTIFIER_CHECK_INTERVAL = float(
    os.getenv("CONNECTIVITY_NOTIFIER_INTERVAL", "0.5"),
)  # seconds

# Interface name prefixes used by cellular modems
CELLULAR_INTERFACE_PREFIXES = ("wwan", "rmnet", "ccmni", "wwp", "mhi")

# Radio technology (ModemManager)
MMCLI_BINARY = os.getenv("CONNECTIVITY_MMCLI_BINARY", "mmcli")
MMCLI_TIMEOUT = float(os.getenv("CONNECTIVITY_MMCLI_TIMEOUT", "5"))  # seconds

# Internet probe - downgrades "reachable" to "none" when the probe fails
INTERNET_PROBE_ENABLED = _env_bool("CONNECTIVITY_INTERNET_PROBE", "false")
NETWORK_CHECK_TIMEOUT = 3  # Timeout for connectivity check (seconds)
NETWORK_CHECK_HOST = "8.8.8.8"  # Google DNS - reliable external host
NETWORK_CHECK_PORT = 53  # DNS port

# =============================================================================
# LOGGING
# =============================================================================

LOG_DIR = os.getenv("CONNECTIVITY_LOG_DIR", "/var/log/connectivity")
LOG_SERVICE_FILE = "service.log"
LOG_FALLBACK_DIR = "logs"
LOG_LEVEL = os.getenv("CONNECTIVITY_LOG_LEVEL", "INFO")
LOG_BACKUP_COUNT = 7  # Days of rotated logs to keep
