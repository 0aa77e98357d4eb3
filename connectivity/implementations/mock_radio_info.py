"""
Mock Radio Info Implementation

Simulated radio technology provider for testing and for hosts without
ModemManager. Reports whatever technologies the test configures.
"""

import logging
import threading
from typing import Optional

from connectivity.constants import RadioTechnologySet
from connectivity.interfaces.radio_info_interface import RadioInfoInterface


class MockRadioInfo(RadioInfoInterface):
    """
    Mock radio technology provider.

    Usage:
        radio = MockRadioInfo({"sim1": "LTE"})
        radio.set_technologies({"sim1": "NR", "sim2": "LTE"})
    """

    def __init__(self, technologies: Optional[RadioTechnologySet] = None):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._technologies: RadioTechnologySet = dict(technologies or {})
        self.query_count = 0

        self.logger.info(f"Mock Radio Info initialized ({self._technologies})")

    def current_radio_technologies(self) -> RadioTechnologySet:
        with self._lock:
            self.query_count += 1
            return dict(self._technologies)

    def is_available(self) -> bool:
        """Mock provider is always available"""
        return True

    # =========================================================================
    # TESTING HELPER METHODS (not part of RadioInfoInterface)
    # =========================================================================

    def set_technologies(self, technologies: RadioTechnologySet) -> None:
        """Replace the reported bearer -> technology mapping"""
        with self._lock:
            self._technologies = dict(technologies)
        self.logger.debug(f"[MOCK] Technologies set to {technologies}")

    def clear(self) -> None:
        """Report no technology information"""
        self.set_technologies({})
