"""TEMPer sensor facade.

Owns the transport for one run and wires identification and the query
engine together, exposing a simple open / identify / read / close
interface to the command line layer.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..config import RuntimeOptions
from ..models import DeviceProfile, SensorReadings
from ..transport.base import Transport
from ..transport.usbhid import HidTransport
from .finder import SensorInfo
from .identification import DeviceIdentifier, Identification
from .query import QueryEngine

logger = logging.getLogger(__name__)


class TemperSensor:
    """High-level interface to one TEMPer sensor.

    This class acts as a facade, managing:
    1. The device handle (Transport)
    2. Identification of the device variant (DeviceIdentifier)
    3. Reading values (QueryEngine)

    The transport is opened once and closed once, also on failure paths
    when used as a context manager.

    Example:
        >>> info = find_single_sensor()
        >>> with TemperSensor(info) as sensor:
        ...     readings = sensor.read()
        ...     options = sensor.options
    """

    def __init__(
        self,
        info: SensorInfo,
        options: Optional[RuntimeOptions] = None,
        transport: Optional[Transport] = None,
    ):
        """Initialize the sensor.

        Args:
            info: Sensor found by the finder
            options: Runtime options (default: RuntimeOptions())
            transport: Existing transport, or None to open info.path via hidapi
        """
        self._info = info
        self._options = options or RuntimeOptions()
        self._transport = transport or HidTransport(info.path)
        self._identification: Optional[Identification] = None

    @property
    def info(self) -> SensorInfo:
        return self._info

    @property
    def options(self) -> RuntimeOptions:
        """Runtime options, with in/out slots filled once identified."""
        return self._options

    @property
    def profile(self) -> Optional[DeviceProfile]:
        return self._identification.profile if self._identification else None

    @property
    def firmware(self) -> Optional[str]:
        return self._identification.firmware if self._identification else None

    def open(self) -> None:
        """Open the device handle."""
        if not self._transport.is_open():
            self._transport.open()

    def close(self) -> None:
        """Close the device handle. Safe to call multiple times."""
        self._transport.close()

    def identify(self) -> Identification:
        """Resolve the device profile; runs at most once per sensor.

        Raises:
            TemperError: on transport failure or unsupported device
        """
        if self._identification is not None:
            return self._identification

        identifier = DeviceIdentifier(
            self._transport,
            self._info.vendor_id,
            self._info.product_id,
            conversion_rule=self._options.conversion_rule,
            timeout=self._options.timeout,
        )
        self._identification = identifier.run()
        self._options = self._options.with_profile_defaults(self._identification.profile)
        return self._identification

    def read(self) -> SensorReadings:
        """Query all sensor values, identifying the device first if needed.

        Raises:
            TemperError: on transport failure or unsupported device
        """
        identification = self.identify()
        engine = QueryEngine(
            self._transport,
            identification.profile,
            attempts=self._options.attempts,
            timeout=self._options.timeout,
        )
        readings = engine.query()
        logger.debug(f"Read {readings.as_dict()} in {engine.attempts_made} attempt(s)")
        return readings

    def __enter__(self) -> TemperSensor:
        """Context manager support - open on enter."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
