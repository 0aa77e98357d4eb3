"""
Connectivity Module Integration Tests

Tests cover:
1. On-demand status query without a subscription
2. Status stream through ConnectivityMonitor
3. Unavailable monitoring at subscribe time
4. Factory creates correct implementations
5. Service CLI output
"""

import io
import threading
import time
from unittest.mock import patch

import pytest

import connectivity_service
from config.settings import POLL_INTERVAL, SOURCE_MODE
from connectivity import (
    ConnectionKind,
    ConnectivityFactory,
    ConnectivityMonitor,
    MonitoringUnavailableError,
    Status,
    create_signal_source,
    to_wire,
)
from connectivity.implementations.mock_radio_info import MockRadioInfo
from connectivity.implementations.mock_reachability import MockReachability
from connectivity.implementations.sysfs_reachability import SysfsReachability
from connectivity_service import ConnectivityService, build_parser


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# =============================================================================
# ON-DEMAND QUERY TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_get_status_without_subscription(connectivity_monitor, mock_reachability):
    """Test get_status works without starting a monitor."""
    assert connectivity_monitor.get_status() == Status.WIFI

    assert mock_reachability.start_count == 0
    assert connectivity_monitor.is_subscribed() is False


@pytest.mark.unit_integration
def test_get_status_cellular(connectivity_monitor, mock_reachability, mock_radio_info):
    """Test get_status classifies cellular radios."""
    mock_reachability.set_connection_kind(ConnectionKind.CELLULAR)
    mock_radio_info.set_technologies({"sim1": "Edge", "sim2": "LTE"})

    assert connectivity_monitor.get_status() == Status.MOBILE_4G


@pytest.mark.unit_integration
def test_get_status_read_failure(connectivity_monitor, mock_reachability):
    """Test get_status reports UNREACHABLE instead of raising."""
    mock_reachability.simulate_read_failure()

    assert connectivity_monitor.get_status() == Status.UNREACHABLE


@pytest.mark.unit_integration
def test_get_status_while_subscribed(connectivity_monitor, mock_reachability):
    """Test get_status keeps working during a subscription."""
    connectivity_monitor.subscribe()
    mock_reachability.set_connection_kind(ConnectionKind.NONE)

    assert connectivity_monitor.get_status() == Status.UNREACHABLE


# =============================================================================
# STREAM TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_subscribe_stream(connectivity_monitor, mock_reachability, mock_radio_info):
    """Test the stream yields the current status, then each change."""
    stream = connectivity_monitor.subscribe()

    assert stream.get(timeout=1.0) == Status.WIFI

    mock_radio_info.set_technologies({"sim1": "NRNSA"})
    mock_reachability.set_connection_kind(ConnectionKind.CELLULAR)
    assert stream.get(timeout=1.0) == Status.MOBILE_5G

    mock_reachability.set_connection_kind(ConnectionKind.NONE)
    assert stream.get(timeout=1.0) == Status.UNREACHABLE

    assert stream.get(timeout=0.2) is None


@pytest.mark.unit_integration
def test_subscribe_listener_callback(connectivity_monitor, mock_reachability):
    """Test an optional listener sees the same statuses as the stream."""
    seen = []
    stream = connectivity_monitor.subscribe(listener=seen.append)

    mock_reachability.set_connection_kind(ConnectionKind.NONE)

    assert wait_until(lambda: len(seen) == 2)
    assert seen == [Status.WIFI, Status.UNREACHABLE]
    assert stream.drain() == seen


@pytest.mark.unit_integration
def test_unsubscribe_ends_iteration(connectivity_monitor, mock_reachability):
    """Test iterating a stream stops after unsubscribe."""
    stream = connectivity_monitor.subscribe()
    collected = []

    def consume():
        for status in stream:
            collected.append(status)

    consumer = threading.Thread(target=consume)
    consumer.start()

    assert wait_until(lambda: collected == [Status.WIFI])
    assert connectivity_monitor.unsubscribe() is True
    consumer.join(timeout=2.0)

    assert consumer.is_alive() is False
    assert stream.closed is True

    mock_reachability.set_connection_kind(ConnectionKind.NONE)
    time.sleep(0.1)

    assert collected == [Status.WIFI]
    assert connectivity_monitor.unsubscribe() is False


@pytest.mark.unit_integration
def test_resubscribe_closes_previous_stream(connectivity_monitor, mock_reachability):
    """Test a second subscribe replaces the first stream."""
    first = connectivity_monitor.subscribe()
    second = connectivity_monitor.subscribe()

    assert first.closed is True
    assert second.get(timeout=1.0) == Status.WIFI
    assert mock_reachability.active_notifiers == 1


@pytest.mark.unit_integration
def test_subscribe_unavailable(connectivity_monitor, mock_reachability):
    """Test monitor start failure raises and produces no values."""
    mock_reachability.simulate_start_failure()

    with pytest.raises(MonitoringUnavailableError) as exc_info:
        connectivity_monitor.subscribe()

    assert exc_info.value.code == "UNAVAILABLE"
    assert connectivity_monitor.is_subscribed() is False


@pytest.mark.unit_integration
def test_shutdown_releases_sources(connectivity_monitor, mock_reachability):
    """Test shutdown stops the monitor and closes the stream."""
    stream = connectivity_monitor.subscribe()

    connectivity_monitor.shutdown()

    assert stream.closed is True
    assert mock_reachability.active_notifiers == 0


@pytest.mark.unit_integration
def test_get_status_info(connectivity_monitor):
    """Test monitor diagnostics."""
    connectivity_monitor.subscribe()

    info = connectivity_monitor.get_status_info()

    assert info["active"] is True
    assert info["current_status"] == "wifi"
    assert info["source_available"] is True


# =============================================================================
# FACTORY TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_factory_mock_mode():
    """Test factory creates mock sources in mock mode."""
    source = ConnectivityFactory.create_signal_source(mode="mock")

    assert isinstance(source.reachability, MockReachability)
    assert isinstance(source.radio_info, MockRadioInfo)
    source.cleanup()


@pytest.mark.unit_integration
def test_factory_unknown_mode():
    """Test factory rejects unknown modes."""
    with pytest.raises(ValueError):
        ConnectivityFactory.create_signal_source(mode="bogus")


@pytest.mark.unit_integration
def test_factory_auto_unavailable_platform_reports_unreachable(tmp_path):
    """Test auto mode on a host without procfs/sysfs never invents a status."""
    missing = tmp_path / "missing"

    def unavailable_reachability():
        return SysfsReachability(
            sysfs_net_path=str(missing / "net"),
            proc_route_path=str(missing / "route"),
        )

    with patch(
        "connectivity.factory.SysfsReachability", side_effect=unavailable_reachability,
    ), patch(
        "connectivity.factory.ModemManagerRadioInfo.is_available", return_value=False,
    ):
        source = ConnectivityFactory.create_signal_source(mode="auto")

    assert isinstance(source.reachability, SysfsReachability)
    assert not isinstance(source.reachability, MockReachability)

    monitor = ConnectivityMonitor(source=source, poll_interval=60.0)
    try:
        assert monitor.get_status() == Status.UNREACHABLE

        with pytest.raises(MonitoringUnavailableError) as exc_info:
            monitor.subscribe()

        assert exc_info.value.code == "UNAVAILABLE"
        assert monitor.is_subscribed() is False
    finally:
        monitor.shutdown()


@pytest.mark.unit_integration
def test_factory_real_mode_unavailable():
    """Test real mode raises when real sources are unavailable."""
    with patch(
        "connectivity.factory.SysfsReachability.is_available", return_value=False,
    ):
        with pytest.raises(RuntimeError):
            ConnectivityFactory.create_reachability(mode="real")

    with patch(
        "connectivity.factory.ModemManagerRadioInfo.is_available", return_value=False,
    ):
        with pytest.raises(RuntimeError):
            ConnectivityFactory.create_radio_info(mode="real")


@pytest.mark.unit_integration
def test_create_signal_source_force_mock():
    """Test convenience function with force_mock."""
    source = create_signal_source(force_mock=True)

    assert isinstance(source.reachability, MockReachability)
    source.cleanup()


@pytest.mark.unit_integration
def test_is_real_source_available_keys():
    """Test availability report shape."""
    availability = ConnectivityFactory.is_real_source_available()

    assert set(availability) == {"reachability", "radio_info"}
    assert all(isinstance(value, bool) for value in availability.values())


# =============================================================================
# SERVICE TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_build_parser_defaults():
    """Test CLI defaults come from settings."""
    args = build_parser().parse_args([])

    assert args.once is False
    assert args.mode == SOURCE_MODE
    assert args.poll_interval == POLL_INTERVAL


@pytest.mark.unit_integration
def test_build_parser_options():
    """Test CLI options parse."""
    args = build_parser().parse_args(["--once", "--mode", "mock", "--poll-interval", "1.5"])

    assert args.once is True
    assert args.mode == "mock"
    assert args.poll_interval == 1.5


@pytest.mark.unit_integration
def test_service_print_once(connectivity_monitor, mock_reachability):
    """Test one-shot output is the wire string."""
    mock_reachability.set_connection_kind(ConnectionKind.NONE)
    output = io.StringIO()

    ConnectivityService(connectivity_monitor, output=output).print_once()

    assert output.getvalue() == "unreach\n"


@pytest.mark.unit_integration
def test_service_run_streams_wire_strings(connectivity_monitor, mock_reachability):
    """Test streaming mode prints one line per status until stopped."""
    output = io.StringIO()
    service = ConnectivityService(connectivity_monitor, output=output)

    runner = threading.Thread(target=service.run)
    runner.start()

    assert wait_until(lambda: "wifi" in output.getvalue())
    mock_reachability.set_connection_kind(ConnectionKind.NONE)
    assert wait_until(lambda: "unreach" in output.getvalue())

    service.running = False
    runner.join(timeout=2.0)

    assert runner.is_alive() is False
    assert output.getvalue().splitlines() == ["wifi", "unreach"]
    assert mock_reachability.active_notifiers == 0


@pytest.mark.unit_integration
def test_main_once(capsys):
    """Test `--once --mode mock` prints the status and exits 0."""
    with patch.object(connectivity_service, "setup_logging"):
        exit_code = connectivity_service.main(["--once", "--mode", "mock"])

    assert exit_code == 0
    assert capsys.readouterr().out == to_wire(Status.WIFI) + "\n"


@pytest.mark.unit_integration
def test_main_real_mode_unavailable():
    """Test unavailable real sources give a non-zero exit."""
    with patch.object(connectivity_service, "setup_logging"), patch(
        "connectivity.factory.SysfsReachability.is_available", return_value=False,
    ):
        assert connectivity_service.main(["--mode", "real"]) == 1


@pytest.mark.unit_integration
def test_main_monitoring_unavailable(signal_source, mock_reachability):
    """Test subscribe failure in streaming mode gives a non-zero exit."""
    mock_reachability.simulate_start_failure()

    with patch.object(connectivity_service, "setup_logging"), patch.object(
        ConnectivityFactory, "create_signal_source", return_value=signal_source,
    ), patch.object(ConnectivityService, "install_signal_handlers"):
        assert connectivity_service.main(["--mode", "mock"]) == 1
