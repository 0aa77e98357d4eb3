#!/usr/bin/env python3
"""
Quick Check Script - Connectivity Diagnostics

Prints what the connectivity monitor sees on this host:
1. Which real signal sources are available
2. Current connection kind (reachability)
3. Radio technologies per bearer (when on cellular)
4. Classified status and its wire string
5. Internet probe result

Usage:
    python scripts/quick_check.py
    # or force mocks
    CONNECTIVITY_SOURCE_MODE=mock python scripts/quick_check.py
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path to allow imports (MUST be before other imports)
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import SOURCE_MODE
from connectivity.classifier import classify_snapshot
from connectivity.factory import ConnectivityFactory
from connectivity.interfaces.reachability_interface import SourceError
from connectivity.utils.wire_format import to_wire
from core.network import check_internet_connectivity


def print_header(title: str) -> None:
    print()
    print("=" * 60)
    print(title)
    print("=" * 60)


def main() -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")

    print_header("SOURCE AVAILABILITY")
    availability = ConnectivityFactory.is_real_source_available()
    for name, available in availability.items():
        print(f"  {name:<14} {'yes' if available else 'no'}")

    source = ConnectivityFactory.create_signal_source(mode=SOURCE_MODE)

    print_header("SIGNALS")
    try:
        snapshot = source.snapshot()
    except SourceError as e:
        print(f"  Reachability read failed: {e}")
        return 1

    print(f"  Connection kind: {snapshot.kind.value}")
    if snapshot.radios:
        for bearer, technology in sorted(snapshot.radios.items()):
            print(f"  Radio {bearer}: {technology}")
    else:
        print("  Radios: (none reported)")

    print_header("STATUS")
    status = classify_snapshot(snapshot)
    print(f"  Status: {status.name} (wire: {to_wire(status)})")

    internet = check_internet_connectivity()
    print(f"  Internet probe: {'reachable' if internet else 'unreachable'}")

    source.cleanup()
    return 0


if __name__ == "__main__":
    sys.exit(main())
