"""
Internet Probe

Optional last step of SysfsReachability: a default route only counts as
reachable when a TCP connection to a well-known host succeeds. Enabled
with CONNECTIVITY_INTERNET_PROBE (off by default). Each probe may take up to
NETWORK_CHECK_TIMEOUT.
"""

import logging
import socket

from config.settings import (
    NETWORK_CHECK_HOST,
    NETWORK_CHECK_PORT,
    NETWORK_CHECK_TIMEOUT,
)

logger = logging.getLogger(__name__)


def check_internet_connectivity(
    host: str = NETWORK_CHECK_HOST,
    port: int = NETWORK_CHECK_PORT,
    timeout: float = NETWORK_CHECK_TIMEOUT,
) -> bool:
    """
    Probe whether the active route reaches the internet.

    Args:
        host: Probe target (public DNS resolver by default)
        port: TCP port on host
        timeout: Connect timeout in seconds

    Returns:
        True if the host accepted the connection
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        # socket.timeout is an OSError too
        logger.debug(f"Internet probe to {host}:{port} failed: {e}")
        return False
