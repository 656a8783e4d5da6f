"""Exceptions raised by the protocol and device layers.

Every fatal condition carries a human readable ``reason``. Invalid sensor
values are not errors; they are reported as INVALID_VALUE in the readings.
"""
from __future__ import annotations

from typing import Optional


class TemperError(Exception):
    """Base class for all sensor communication failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TransportError(TemperError):
    """Raised when the byte transport fails."""

    def with_context(self, context: str) -> TransportError:
        """Same kind of error with ``context`` prefixed to the reason."""
        return type(self)(f"{context}: {self.reason}")


class TransportOpenError(TransportError):
    """Raised when the device node cannot be opened."""
    pass


class TransportSendError(TransportError):
    """Raised when a command could not be written to the device."""
    pass


class TransportReadError(TransportError):
    """Raised when a response frame could not be read."""
    pass


class TransportTimeout(TransportReadError):
    """Raised when no response frame arrived within the read timeout."""
    pass


class UnsupportedDeviceError(TemperError):
    """Raised when vendor/product or firmware is not in the profile table."""

    def __init__(
        self,
        reason: str,
        vendor_id: Optional[int] = None,
        product_id: Optional[int] = None,
        firmware: Optional[str] = None,
    ):
        super().__init__(reason)
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.firmware = firmware
