"""
ModemManager Radio Info Implementation

Real radio-technology provider using ModemManager's `mmcli` tool.

Each modem object path is used as the bearer id. ModemManager's
access-technology names are normalized into our label vocabulary
(e.g. "5gnr" -> "NR", "umts" -> "WCDMA").

Two query shapes are supported:
- Modem listing (`mmcli -L`): one entry per modem (multi-SIM aware)
- Single modem (`mmcli -m any`): used when listing is not supported,
  reported under DEFAULT_BEARER_ID
"""

import json
import logging
import shutil
import subprocess
from typing import Any, Dict, List, Optional

from config.settings import MMCLI_BINARY, MMCLI_TIMEOUT
from connectivity.constants import (
    DEFAULT_BEARER_ID,
    RAT_CDMA1X,
    RAT_EDGE,
    RAT_EVDO_REV0,
    RAT_EVDO_REVA,
    RAT_EVDO_REVB,
    RAT_GPRS,
    RAT_HSDPA,
    RAT_HSUPA,
    RAT_LTE,
    RAT_NR,
    RAT_WCDMA,
    TECHNOLOGIES_2G,
    TECHNOLOGIES_3G,
    TECHNOLOGIES_4G,
    TECHNOLOGIES_5G,
    RadioTechnologySet,
)
from connectivity.interfaces.radio_info_interface import RadioInfoInterface

# ModemManager access technology name -> our label
MM_TECHNOLOGY_LABELS: Dict[str, str] = {
    "5gnr": RAT_NR,
    "lte": RAT_LTE,
    "lte-cat-m": RAT_LTE,
    "lte-nb-iot": RAT_LTE,
    "hsdpa": RAT_HSDPA,
    "hspa": RAT_HSDPA,
    "hspa-plus": RAT_HSDPA,
    "hsupa": RAT_HSUPA,
    "umts": RAT_WCDMA,
    "evdo0": RAT_EVDO_REV0,
    "evdoa": RAT_EVDO_REVA,
    "evdob": RAT_EVDO_REVB,
    "edge": RAT_EDGE,
    "gprs": RAT_GPRS,
    "1xrtt": RAT_CDMA1X,
}

# Placeholder ModemManager prints for "no value"
MM_EMPTY_VALUE = "--"

_GENERATION_ORDER = (TECHNOLOGIES_5G, TECHNOLOGIES_4G, TECHNOLOGIES_3G, TECHNOLOGIES_2G)


def normalize_technology(name: str) -> str:
    """
    Map a ModemManager technology name onto our label vocabulary.

    Unknown names pass through unchanged so they classify as "other".

    Example:
        normalize_technology("5gnr") -> "NR"
    """
    key = name.strip().lower()
    return MM_TECHNOLOGY_LABELS.get(key, name.strip())


def best_technology(labels: List[str]) -> Optional[str]:
    """
    Pick the highest-generation label from a modem's technology list.

    Returns:
        Best known label, else the first label, else None if empty
    """
    for group in _GENERATION_ORDER:
        for label in labels:
            if label in group:
                return label
    return labels[0] if labels else None


class ModemManagerRadioInfo(RadioInfoInterface):
    """
    Radio technology provider backed by ModemManager.

    Usage:
        provider = ModemManagerRadioInfo()
        if provider.is_available():
            print(provider.current_radio_technologies())
    """

    def __init__(self, mmcli_binary: str = MMCLI_BINARY, timeout: float = MMCLI_TIMEOUT):
        """
        Initialize ModemManager provider.

        Args:
            mmcli_binary: Name or path of the mmcli executable
            timeout: Per-command timeout in seconds
        """
        self.logger = logging.getLogger(__name__)
        self.mmcli_binary = mmcli_binary
        self.timeout = timeout

        self.logger.info(f"ModemManager Radio Info initialized (binary: {mmcli_binary})")

    def is_available(self) -> bool:
        """mmcli must be on PATH"""
        return shutil.which(self.mmcli_binary) is not None

    def current_radio_technologies(self) -> RadioTechnologySet:
        """
        Query every modem's current access technology.

        Returns:
            Modem path -> label; empty dict on any failure
        """
        modem_paths = self._list_modems()

        if modem_paths is None:
            # Listing not supported - fall back to single modem query
            label = self._modem_technology("any")
            if label is None:
                self.logger.debug("No radio technology information available")
                return {}
            return {DEFAULT_BEARER_ID: label}

        radios: RadioTechnologySet = {}
        for path in modem_paths:
            label = self._modem_technology(path)
            if label is not None:
                radios[path] = label

        if not radios:
            self.logger.debug("No radio technology information available")

        return radios

    def _list_modems(self) -> Optional[List[str]]:
        """
        List modem object paths.

        Returns:
            List of paths (possibly empty), or None if listing failed
        """
        data = self._run_json(["-L"])
        if data is None:
            return None

        modems = data.get("modem-list")
        if not isinstance(modems, list):
            return None

        return [str(path) for path in modems]

    def _modem_technology(self, modem: str) -> Optional[str]:
        """Get the best technology label reported by one modem"""
        data = self._run_json(["-m", modem])
        if data is None:
            return None

        generic = data.get("modem", {}).get("generic", {})
        raw = generic.get("access-technologies")

        # Newer mmcli: JSON list; older mmcli: comma separated string
        if isinstance(raw, str):
            names = raw.split(",")
        elif isinstance(raw, list):
            names = [str(part) for part in raw]
        else:
            return None

        labels = [
            normalize_technology(name)
            for name in names
            if name.strip() and name.strip() != MM_EMPTY_VALUE
        ]
        return best_technology(labels)

    def _run_json(self, args: List[str]) -> Optional[Dict[str, Any]]:
        """
        Run mmcli with JSON output.

        Returns:
            Parsed JSON object, or None on any failure
        """
        command = [self.mmcli_binary, *args, "--output-json"]

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            self.logger.debug(f"{self.mmcli_binary} not found")
            return None
        except subprocess.TimeoutExpired:
            self.logger.warning(f"mmcli timed out after {self.timeout}s: {' '.join(args)}")
            return None
        except OSError as e:
            self.logger.warning(f"Failed to run mmcli: {e}")
            return None

        if result.returncode != 0:
            self.logger.debug(
                f"mmcli {' '.join(args)} exited with {result.returncode}: "
                f"{result.stderr.strip()}",
            )
            return None

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            self.logger.warning(f"Malformed mmcli output: {e}")
            return None

        return data if isinstance(data, dict) else None
