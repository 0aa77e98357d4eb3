"""
Connectivity Test Configuration and Fixtures

Shared fixtures for connectivity module tests.
"""

import threading
import time
from pathlib import Path

import pytest

from connectivity.constants import ConnectionKind
from connectivity.controllers.change_notifier import ChangeNotifier
from connectivity.controllers.connectivity_monitor import ConnectivityMonitor
from connectivity.controllers.lifecycle_manager import LifecycleManager
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.implementations.mock_radio_info import MockRadioInfo
from connectivity.implementations.mock_reachability import MockReachability

# Short enough that poll-path tests finish quickly
FAST_POLL_INTERVAL = 0.05

# Long enough that the poll path never fires during a test
SLOW_POLL_INTERVAL = 60.0

ROUTE_HEADER = (
    "Iface\tDestination\tGateway \tFlags\tRefCnt\tUse\tMetric\tMask"
    "\t\tMTU\tWindow\tIRTT"
)

# =============================================================================
# SOURCE FIXTURES
# =============================================================================


@pytest.fixture
def mock_reachability():
    """
    Provide MockReachability reporting Wi-Fi.

    Usage:
        def test_change(mock_reachability):
            mock_reachability.set_connection_kind(ConnectionKind.CELLULAR)
    """
    reachability = MockReachability(ConnectionKind.WIFI)
    yield reachability
    reachability.cleanup()


@pytest.fixture
def mock_radio_info():
    """Provide MockRadioInfo with no radios"""
    return MockRadioInfo()


@pytest.fixture
def signal_source(mock_reachability, mock_radio_info):
    """
    Provide SignalSourceAdapter over the mock sources.

    Usage:
        def test_snapshot(signal_source):
            snapshot = signal_source.snapshot()
    """
    source = SignalSourceAdapter(mock_reachability, mock_radio_info)
    yield source
    source.cleanup()


# =============================================================================
# CONTROLLER FIXTURES
# =============================================================================


@pytest.fixture
def change_notifier(signal_source):
    """Provide ChangeNotifier over the mock signal source"""
    notifier = ChangeNotifier(signal_source)
    yield notifier
    notifier.deactivate()


@pytest.fixture
def lifecycle_manager(signal_source):
    """
    Provide LifecycleManager with a fast poll timer.

    Usage:
        def test_subscribe(lifecycle_manager, status_recorder):
            lifecycle_manager.subscribe(status_recorder.track)
    """
    manager = LifecycleManager(signal_source, poll_interval=FAST_POLL_INTERVAL)
    yield manager
    manager.shutdown()


@pytest.fixture
def event_only_lifecycle_manager(signal_source):
    """
    Provide LifecycleManager whose poll timer never fires during a test.

    For tests that must see only event-path emissions.
    """
    manager = LifecycleManager(signal_source, poll_interval=SLOW_POLL_INTERVAL)
    yield manager
    manager.shutdown()


@pytest.fixture
def connectivity_monitor(signal_source):
    """Provide ConnectivityMonitor over the mock signal source"""
    monitor = ConnectivityMonitor(source=signal_source, poll_interval=FAST_POLL_INTERVAL)
    yield monitor
    monitor.shutdown()


# =============================================================================
# CALLBACK TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def status_recorder():
    """
    Provide helper recording emitted statuses.

    Emissions arrive on notifier threads, so waits poll with a deadline.

    Usage:
        def test_emit(lifecycle_manager, status_recorder):
            lifecycle_manager.subscribe(status_recorder.track)
            assert status_recorder.wait_for_count(1)
    """

    class StatusRecorder:
        def __init__(self):
            self._lock = threading.Lock()
            self.statuses = []

        def track(self, status):
            """Record an emitted status"""
            with self._lock:
                self.statuses.append(status)

        def get_call_count(self) -> int:
            with self._lock:
                return len(self.statuses)

        def get_all(self):
            with self._lock:
                return list(self.statuses)

        def get_last(self):
            with self._lock:
                return self.statuses[-1] if self.statuses else None

        def wait_for_count(self, count: int, timeout: float = 2.0) -> bool:
            """Wait until at least `count` statuses were recorded"""
            deadline = time.monotonic() + timeout
            while time.monotonic() < deadline:
                if self.get_call_count() >= count:
                    return True
                time.sleep(0.01)
            return self.get_call_count() >= count

        def wait_for_status(self, status, timeout: float = 2.0) -> bool:
            """Wait until `status` was recorded"""
            deadline = time.monotonic() + timeout
            while time.monotonic() < deadline:
                if status in self.get_all():
                    return True
                time.sleep(0.01)
            return status in self.get_all()

        def reset(self):
            with self._lock:
                self.statuses.clear()

    return StatusRecorder()


# =============================================================================
# FAKE PROCFS / SYSFS FIXTURES
# =============================================================================


class FakeNetFs:
    """
    Minimal /proc/net/route and /sys/class/net tree under a temp directory.

    Usage:
        fake_net_fs.add_interface("wlan0", wireless=True)
        fake_net_fs.set_default_routes(("wlan0", 600))
    """

    def __init__(self, root: Path):
        self.sys_path = root / "sys" / "class" / "net"
        self.route_path = root / "proc" / "net" / "route"
        self.sys_path.mkdir(parents=True)
        self.route_path.parent.mkdir(parents=True)
        self.set_default_routes()

    def add_interface(
        self,
        name: str,
        wireless: bool = False,
        devtype: str = None,
        operstate: str = "up",
    ) -> Path:
        iface_dir = self.sys_path / name
        iface_dir.mkdir(exist_ok=True)
        (iface_dir / "operstate").write_text(operstate + "\n")

        uevent = [f"INTERFACE={name}", "IFINDEX=3"]
        if devtype:
            uevent.append(f"DEVTYPE={devtype}")
        (iface_dir / "uevent").write_text("\n".join(uevent) + "\n")

        if wireless:
            (iface_dir / "wireless").mkdir(exist_ok=True)
        return iface_dir

    def set_operstate(self, name: str, operstate: str) -> None:
        (self.sys_path / name / "operstate").write_text(operstate + "\n")

    def set_default_routes(self, *routes, extra_lines=()) -> None:
        """
        Rewrite the routing table.

        Args:
            routes: (iface, metric) pairs, each a default route
            extra_lines: Raw route lines appended as-is
        """
        lines = [ROUTE_HEADER]
        for iface, metric in routes:
            lines.append(
                f"{iface}\t00000000\t0102A8C0\t0003\t0\t0\t{metric}\t00000000\t0\t0\t0",
            )
        lines.extend(extra_lines)
        self.route_path.write_text("\n".join(lines) + "\n")


@pytest.fixture
def fake_net_fs(tmp_path):
    """
    Provide a fake procfs/sysfs tree with no routes and no interfaces.

    Usage:
        def test_wifi(fake_net_fs):
            fake_net_fs.add_interface("wlan0", wireless=True)
            fake_net_fs.set_default_routes(("wlan0", 600))
    """
    return FakeNetFs(tmp_path)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for connectivity tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
    config.addinivalue_line("markers", "requires_linux: Tests reading the real /proc and /sys")
