"""Query engine.

Sends the value query, reads the frames the profile expects and decodes
them into SensorReadings. The whole request/response exchange is retried
on transport failures. Invalid decoded values are not retried; they are
legitimate results (e.g. an unplugged external probe).
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..config import QUERY_ATTEMPTS
from ..errors import TransportError, TransportReadError
from ..models import DeviceProfile, INVALID_VALUE, SLOT_COUNT, SensorReadings
from ..protocol.commands import (
    FRAME_SIZE,
    QUERY_VALUES,
    QUERY_VALUES_NAME,
    VALUE_OFFSETS,
    format_bytes,
)
from ..protocol.decoder import decode_frame_value
from ..transport.base import READ_TIMEOUT, Transport

logger = logging.getLogger(__name__)


class QueryEngine:
    """Bounded-retry value query for one identified device."""

    def __init__(
        self,
        transport: Transport,
        profile: DeviceProfile,
        attempts: int = QUERY_ATTEMPTS,
        timeout: float = READ_TIMEOUT,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        self._transport = transport
        self._profile = profile
        self._attempts = attempts
        self._timeout = timeout
        self.attempts_made = 0

    def query(self) -> SensorReadings:
        """Read all sensor values.

        Returns:
            SensorReadings with every slot of the profile decoded

        Raises:
            TransportError: the last transport failure, once all attempts
                are used up
        """
        last_error: Optional[TransportError] = None
        self.attempts_made = 0

        for attempt in range(1, self._attempts + 1):
            self.attempts_made = attempt
            try:
                return self._exchange()
            except TransportError as e:
                last_error = e
                if attempt < self._attempts:
                    logger.debug(f"{e.reason}, retry {attempt}/{self._attempts}")
                else:
                    logger.debug(f"{e.reason} on try {attempt}/{self._attempts}")

        raise last_error

    def _exchange(self) -> SensorReadings:
        """One complete request/response cycle; partial results are dropped."""
        values: List[float] = [INVALID_VALUE] * SLOT_COUNT

        try:
            self._transport.send(QUERY_VALUES)
        except TransportError as e:
            raise e.with_context(f"Error sending command '{QUERY_VALUES_NAME}'") from e

        for layout in self._profile.layout:
            frame = self._receive_frame()
            for slot, offset in zip(layout, VALUE_OFFSETS):
                if slot is None:
                    continue
                values[slot] = decode_frame_value(frame, offset, self._profile.conversion_rule)

        return SensorReadings(tuple(values))

    def _receive_frame(self) -> bytes:
        context = f"Error reading response to '{QUERY_VALUES_NAME}'"
        try:
            frame = self._transport.receive_frame(self._timeout)
        except TransportError as e:
            raise e.with_context(context) from e

        if len(frame) < FRAME_SIZE:
            raise TransportReadError(
                f"{context}: short frame ({len(frame)}/{FRAME_SIZE} bytes): {format_bytes(frame)}"
            )
        return frame


def query_values(
    profile: DeviceProfile,
    transport: Transport,
    attempts: int = QUERY_ATTEMPTS,
    timeout: float = READ_TIMEOUT,
) -> SensorReadings:
    """Query a device once. See QueryEngine.query."""
    return QueryEngine(transport, profile, attempts=attempts, timeout=timeout).query()
