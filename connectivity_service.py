"""
Connectivity Service

Command-line service around ConnectivityMonitor.

Modes:
- Stream (default): prints the current status, then one line per change,
  until SIGINT/SIGTERM
- Once (--once): prints the current status and exits

Each status is printed as its wire string (unreach, wifi, mobile2G,
mobile3G, mobile4G, mobile5G, mobileOther).
"""

import argparse
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from config.settings import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_FALLBACK_DIR,
    LOG_LEVEL,
    LOG_SERVICE_FILE,
    POLL_INTERVAL,
    SOURCE_MODE,
)
from connectivity import (
    ConnectivityFactory,
    ConnectivityMonitor,
    MonitoringUnavailableError,
    to_wire,
)

# Seconds between checks of the running flag while waiting for statuses
STREAM_WAIT_INTERVAL = 0.5


class ConnectivityService:
    """
    Runs a ConnectivityMonitor and writes statuses to an output stream.

    Usage:
        service = ConnectivityService(monitor)
        service.run()  # Blocks until shutdown
    """

    def __init__(self, monitor: ConnectivityMonitor, output: Optional[TextIO] = None):
        self.logger = logging.getLogger(__name__)
        self.monitor = monitor
        self.output = output or sys.stdout
        self.running = False

    def install_signal_handlers(self) -> None:
        """Register signal handlers for graceful shutdown"""
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def print_once(self) -> None:
        """Write the current status (on-demand query)"""
        self._write(to_wire(self.monitor.get_status()))

    def run(self) -> None:
        """
        Stream statuses until stopped.

        Raises:
            MonitoringUnavailableError: If monitoring cannot start
        """
        stream = self.monitor.subscribe()
        self.running = True
        self.logger.info("Connectivity stream started")

        try:
            while self.running:
                status = stream.get(timeout=STREAM_WAIT_INTERVAL)
                if status is not None:
                    self._write(to_wire(status))
                elif stream.closed:
                    break
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop streaming and release the monitor"""
        self.running = False
        self.monitor.shutdown()
        self.logger.info("Connectivity service stopped")

    def _write(self, line: str) -> None:
        self.output.write(line + "\n")
        self.output.flush()

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report network connectivity status (wifi, mobile4G, ...)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print the current status and exit",
    )
    parser.add_argument(
        "--mode",
        choices=["auto", "real", "mock"],
        default=SOURCE_MODE,
        help=f"Signal source selection (default: {SOURCE_MODE})",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL,
        metavar="SECONDS",
        help=f"Seconds between status polls (default: {POLL_INTERVAL})",
    )
    return parser


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Setup logging with rotation.

    Logs go to stderr (stdout carries statuses) and to a file:
    - Daily rotation
    - Keep LOG_BACKUP_COUNT days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    log_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if LOG_DIR not writable
        logs_dir = Path(LOG_FALLBACK_DIR)
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "connectivity-service.log"
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )

    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the service.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging()

    logger = logging.getLogger(__name__)

    try:
        source = ConnectivityFactory.create_signal_source(mode=args.mode)
    except RuntimeError as e:
        logger.error(str(e))
        return 1

    monitor = ConnectivityMonitor(source=source, poll_interval=args.poll_interval)
    service = ConnectivityService(monitor)

    if args.once:
        service.print_once()
        monitor.shutdown()
        return 0

    service.install_signal_handlers()
    try:
        service.run()
    except MonitoringUnavailableError as e:
        logger.error(f"{e.code}: {e.message} ({e.details})")
        monitor.shutdown()
        return 1
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
