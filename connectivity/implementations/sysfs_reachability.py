"""
Sysfs Reachability Implementation

Real reachability source for Linux using procfs/sysfs.

How the connection kind is derived:
1. Default IPv4 routes are read from /proc/net/route (lowest metric first)
2. The first route whose interface is not "down" is the active path
3. The interface is classified from /sys/class/net/<iface>:
   - wireless/ or phy80211 present       -> WIFI
   - DEVTYPE=wwan or cellular name prefix -> CELLULAR
   - anything else (wired Ethernet)      -> WIFI ("reachable via non-WWAN")
4. No usable default route -> NONE

Change notifications come from a background thread that re-reads the
kind every NOTIFIER_CHECK_INTERVAL seconds and fires on_change when it
differs from the previous reading.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from config.settings import (
    CELLULAR_INTERFACE_PREFIXES,
    INTERNET_PROBE_ENABLED,
    NOTIFIER_CHECK_INTERVAL,
    PROC_ROUTE_PATH,
    SYSFS_NET_PATH,
    THREAD_JOIN_TIMEOUT,
)
from connectivity.constants import ConnectionKind
from connectivity.interfaces.reachability_interface import (
    ChangeCallback,
    ReachabilityInterface,
    SourceUnavailableError,
)
from core.network import check_internet_connectivity

# /proc/net/route flag for a usable route
RTF_UP = 0x0001
DEFAULT_DESTINATION = "00000000"


class SysfsReachability(ReachabilityInterface):
    """
    Reachability source backed by /proc/net/route and /sys/class/net.

    Usage:
        reachability = SysfsReachability()
        reachability.start_notifier(lambda: print("changed"))
        print(reachability.current_connection_kind())
        reachability.stop_notifier()
    """

    def __init__(
        self,
        sysfs_net_path: str = SYSFS_NET_PATH,
        proc_route_path: str = PROC_ROUTE_PATH,
        check_interval: float = NOTIFIER_CHECK_INTERVAL,
        cellular_prefixes: Sequence[str] = CELLULAR_INTERFACE_PREFIXES,
        internet_probe: bool = INTERNET_PROBE_ENABLED,
    ):
        """
        Initialize sysfs reachability.

        Args:
            sysfs_net_path: Directory with one entry per network interface
            proc_route_path: Kernel IPv4 routing table
            check_interval: Notifier sampling period in seconds
            cellular_prefixes: Interface name prefixes treated as cellular
            internet_probe: If True, a failed internet probe reports NONE
        """
        self.logger = logging.getLogger(__name__)

        self.sysfs_net_path = Path(sysfs_net_path)
        self.proc_route_path = Path(proc_route_path)
        self.check_interval = check_interval
        self.cellular_prefixes = tuple(cellular_prefixes)
        self.internet_probe = internet_probe

        # Notifier thread
        self._notifier_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._on_change: Optional[ChangeCallback] = None
        self._last_kind: Optional[ConnectionKind] = None

        self.logger.info(
            f"Sysfs Reachability initialized "
            f"(routes: {self.proc_route_path}, interfaces: {self.sysfs_net_path})",
        )

    # =========================================================================
    # NOTIFIER
    # =========================================================================

    def start_notifier(self, on_change: ChangeCallback) -> None:
        """
        Start the sampling thread.

        Restarts cleanly if already running.
        """
        if self.is_notifying():
            self.logger.debug("Notifier already running, restarting")
            self.stop_notifier()

        if not self.is_available():
            raise SourceUnavailableError(
                f"Cannot read routing table: {self.proc_route_path}",
            )

        self._on_change = on_change
        self._last_kind = self._read_kind_or_none()
        # Fresh event per thread: a worker that outlived its join stays stopped
        self._stop_event = threading.Event()
        self._notifier_thread = threading.Thread(
            target=self._notifier_worker,
            args=(self._stop_event, on_change, self._last_kind),
            daemon=True,
            name="SysfsReachability-Notifier",
        )
        self._notifier_thread.start()

        self.logger.info(
            f"Reachability notifier started (initial: {self._last_kind.value})",
        )

    def stop_notifier(self) -> None:
        """Stop the sampling thread"""
        thread = self._notifier_thread
        if thread is None:
            return

        self._stop_event.set()
        if thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=THREAD_JOIN_TIMEOUT)
            if thread.is_alive():
                self.logger.warning(
                    f"Reachability notifier did not stop within "
                    f"{THREAD_JOIN_TIMEOUT}s, it exits after its current read",
                )

        self._notifier_thread = None
        self._on_change = None
        self.logger.info("Reachability notifier stopped")

    def is_notifying(self) -> bool:
        """Check if the sampling thread is running"""
        return self._notifier_thread is not None and self._notifier_thread.is_alive()

    def _notifier_worker(
        self,
        stop_event: threading.Event,
        on_change: ChangeCallback,
        last_kind: ConnectionKind,
    ) -> None:
        """
        Background thread that detects connection kind changes.

        Fires on_change once per observed change. Only ever looks at its
        own stop_event, so a later start cannot revive it.
        """
        while not stop_event.wait(self.check_interval):
            kind = self._read_kind_or_none()
            if kind == last_kind:
                continue

            if stop_event.is_set():
                break

            self.logger.debug(
                f"Connection kind changed: {last_kind.value} -> {kind.value}",
            )
            last_kind = kind
            self._last_kind = kind

            try:
                on_change()
            except Exception as e:
                self.logger.error(f"Error in reachability change callback: {e}")

    # =========================================================================
    # READING STATE
    # =========================================================================

    def current_connection_kind(self) -> ConnectionKind:
        """
        Read the connection kind of the active default route.

        Raises:
            SourceUnavailableError: If the routing table cannot be read
        """
        for iface in self._default_route_interfaces():
            if not self._is_interface_usable(iface):
                continue

            kind = self._classify_interface(iface)
            if self.internet_probe and not check_internet_connectivity():
                self.logger.debug(f"Route via {iface} but internet probe failed")
                return ConnectionKind.NONE
            return kind

        return ConnectionKind.NONE

    def _read_kind_or_none(self) -> ConnectionKind:
        try:
            return self.current_connection_kind()
        except SourceUnavailableError as e:
            self.logger.warning(f"Reachability read failed: {e}")
            return ConnectionKind.NONE

    def _default_route_interfaces(self) -> List[str]:
        """
        Get interfaces carrying a default route, best metric first.

        Raises:
            SourceUnavailableError: If the routing table cannot be read
        """
        try:
            lines = self.proc_route_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise SourceUnavailableError(
                f"Cannot read routing table {self.proc_route_path}: {e}",
            ) from e

        routes: List[Tuple[int, str]] = []
        for line in lines[1:]:  # First line is the header
            fields = line.split()
            if len(fields) < 8:
                continue

            iface, destination, flags, metric, mask = (
                fields[0],
                fields[1],
                fields[3],
                fields[6],
                fields[7],
            )
            if destination != DEFAULT_DESTINATION or mask != DEFAULT_DESTINATION:
                continue

            try:
                if not int(flags, 16) & RTF_UP:
                    continue
                routes.append((int(metric), iface))
            except ValueError:
                self.logger.debug(f"Skipping malformed route line: {line!r}")

        routes.sort()
        return [iface for _, iface in routes]

    def _is_interface_usable(self, iface: str) -> bool:
        """Interfaces reporting operstate "down" carry no traffic"""
        operstate = self._read_attribute(iface, "operstate")
        return operstate != "down"

    def _classify_interface(self, iface: str) -> ConnectionKind:
        iface_dir = self.sysfs_net_path / iface

        if (iface_dir / "wireless").exists() or (iface_dir / "phy80211").exists():
            return ConnectionKind.WIFI

        uevent = self._read_attribute(iface, "uevent") or ""
        if "DEVTYPE=wwan" in uevent.splitlines():
            return ConnectionKind.CELLULAR

        if iface.startswith(self.cellular_prefixes):
            return ConnectionKind.CELLULAR

        # Wired and other non-WWAN paths count as Wi-Fi class
        return ConnectionKind.WIFI

    def _read_attribute(self, iface: str, name: str) -> Optional[str]:
        try:
            return (self.sysfs_net_path / iface / name).read_text(
                encoding="utf-8",
            ).strip()
        except OSError:
            return None

    # =========================================================================
    # AVAILABILITY / CLEANUP
    # =========================================================================

    def is_available(self) -> bool:
        """Routing table and interface directory must both exist"""
        return self.proc_route_path.is_file() and self.sysfs_net_path.is_dir()

    def cleanup(self) -> None:
        """Stop notifier"""
        self.logger.debug("Sysfs Reachability cleanup")
        try:
            self.stop_notifier()
        except Exception as e:
            self.logger.error(f"Error during reachability cleanup: {e}")

    def __del__(self):
        """Destructor - ensure cleanup"""
        self.cleanup()
