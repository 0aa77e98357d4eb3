"""
Radio Info Interface

Abstract interface for radio-technology info providers.

A provider reports, per active cellular bearer, which radio access
technology it is currently using. Absence of information is normal
(no modem, modem still attaching) and must not raise.
"""

from abc import ABC, abstractmethod

from connectivity.constants import RadioTechnologySet


class RadioInfoInterface(ABC):
    """
    Abstract base class for radio technology providers.
    """

    @abstractmethod
    def current_radio_technologies(self) -> RadioTechnologySet:
        """
        Get current radio technology per bearer.

        Returns:
            Mapping of bearer id -> technology label (e.g. {"0": "LTE"}).
            Empty dict when nothing is known. Never raises.

        Example:
            radios = provider.current_radio_technologies()
            # {"/org/freedesktop/ModemManager1/Modem/0": "NR"}
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this provider can be used on the current host.

        Returns:
            True if the backing service/tool exists, False otherwise
        """
        pass
