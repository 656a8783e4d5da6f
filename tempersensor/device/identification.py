"""Device identification.

Asks the sensor for its firmware string and resolves the DeviceProfile
that describes how to query it. Runs once per process, single pass; the
first failure is terminal and nothing is retried at this stage.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..errors import TemperError, TransportError
from ..models import ConversionRule, DeviceProfile
from ..protocol.commands import (
    FIRMWARE_FRAMES,
    QUERY_FIRMWARE,
    QUERY_FIRMWARE_NAME,
    firmware_from_frames,
)
from ..protocol.profiles import DEFAULT_TABLE, ProfileTable
from ..transport.base import READ_TIMEOUT, Transport

logger = logging.getLogger(__name__)


class IdentificationState(Enum):
    """Progress of a DeviceIdentifier."""
    IDLE = "idle"
    FIRMWARE_REQUESTED = "firmware_requested"
    FIRMWARE_RECEIVED = "firmware_received"
    PROFILE_RESOLVED = "profile_resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class Identification:
    """Result of a successful identification.

    Attributes:
        profile: Resolved device profile
        firmware: Firmware string reported by the device
    """
    profile: DeviceProfile
    firmware: str


class DeviceIdentifier:
    """Single-pass state machine resolving a device profile.

    IDLE -> FIRMWARE_REQUESTED -> FIRMWARE_RECEIVED -> PROFILE_RESOLVED,
    or FAILED on the first error.
    """

    def __init__(
        self,
        transport: Transport,
        vendor_id: int,
        product_id: int,
        conversion_rule: Optional[ConversionRule] = None,
        table: ProfileTable = DEFAULT_TABLE,
        timeout: float = READ_TIMEOUT,
    ):
        self._transport = transport
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._conversion_rule = conversion_rule
        self._table = table
        self._timeout = timeout

        self.state = IdentificationState.IDLE
        self.firmware: Optional[str] = None
        self.failure_reason: Optional[str] = None

    def run(self) -> Identification:
        """Identify the device.

        Returns:
            Identification with the resolved profile

        Raises:
            TransportSendError: firmware query could not be sent
            TransportReadError: a firmware frame could not be read
            TransportTimeout: a firmware frame did not arrive in time
            UnsupportedDeviceError: no profile matches the device
        """
        if self.state is not IdentificationState.IDLE:
            raise RuntimeError(f"identification already ran (state: {self.state.value})")

        try:
            self._request_firmware()
            self._receive_firmware()
            profile = self._resolve_profile()
        except TemperError as e:
            self.state = IdentificationState.FAILED
            self.failure_reason = e.reason
            raise

        return Identification(profile=profile, firmware=self.firmware)

    def _request_firmware(self) -> None:
        try:
            self._transport.send(QUERY_FIRMWARE)
        except TransportError as e:
            raise e.with_context(f"Error sending command '{QUERY_FIRMWARE_NAME}'") from e
        self.state = IdentificationState.FIRMWARE_REQUESTED

    def _receive_firmware(self) -> None:
        frames: List[bytes] = []
        for _ in range(FIRMWARE_FRAMES):
            try:
                frames.append(self._transport.receive_frame(self._timeout))
            except TransportError as e:
                raise e.with_context(f"Error reading response to '{QUERY_FIRMWARE_NAME}'") from e
        self.firmware = firmware_from_frames(frames)
        self.state = IdentificationState.FIRMWARE_RECEIVED
        logger.debug(f"Found firmware: '{self.firmware}'")

    def _resolve_profile(self) -> DeviceProfile:
        profile = self._table.lookup(
            self._vendor_id,
            self._product_id,
            self.firmware,
            conversion_rule=self._conversion_rule,
        )
        self.state = IdentificationState.PROFILE_RESOLVED
        return profile


def identify_device(
    transport: Transport,
    vendor_id: int,
    product_id: int,
    conversion_rule: Optional[ConversionRule] = None,
    timeout: float = READ_TIMEOUT,
) -> Identification:
    """Identify the device behind ``transport``. See DeviceIdentifier.run."""
    identifier = DeviceIdentifier(
        transport,
        vendor_id,
        product_id,
        conversion_rule=conversion_rule,
        timeout=timeout,
    )
    return identifier.run()
