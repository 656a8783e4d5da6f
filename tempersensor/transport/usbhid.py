"""USB-HID transport for TEMPer sensors, backed by hidapi.

TEMPer devices do not use numbered reports, so every write is prefixed
with report id 0x00 and every read returns the bare 8-byte frame.

This module handles:
- Opening a device by its hidapi path
- Writing command payloads
- Reading frames with a timeout, telling timeouts apart from I/O errors
"""
from __future__ import annotations

import logging
from typing import Optional, Union

import hid

from ..errors import TransportOpenError, TransportReadError, TransportSendError, TransportTimeout
from ..protocol.commands import FRAME_SIZE, format_bytes
from .base import READ_TIMEOUT, Transport

logger = logging.getLogger(__name__)

REPORT_ID = b"\x00"


class HidTransport(Transport):
    """Transport over a hidapi device handle.

    Example:
        >>> transport = HidTransport(b"/dev/hidraw1")
        >>> with transport:
        ...     transport.send(QUERY_FIRMWARE)
        ...     frame = transport.receive_frame(timeout=1.0)
    """

    def __init__(self, path: Union[bytes, str], frame_size: int = FRAME_SIZE):
        """Initialize the transport.

        Args:
            path: hidapi device path (as returned by hid.enumerate())
            frame_size: Bytes per response frame
        """
        self._path = path.encode() if isinstance(path, str) else path
        self.frame_size = frame_size
        self._device: Optional[hid.device] = None

    @property
    def path(self) -> bytes:
        return self._path

    def open(self) -> None:
        if self._device is not None:
            logger.warning("Already open")
            return

        device = hid.device()
        try:
            device.open_path(self._path)
        except (OSError, ValueError) as e:
            raise TransportOpenError(
                f"Error opening device {self._path.decode(errors='replace')}: {e}"
            ) from e

        self._device = device
        logger.debug(f"Opened {self._path.decode(errors='replace')}")

    def close(self) -> None:
        if self._device is None:
            return
        try:
            self._device.close()
        except (OSError, ValueError) as e:
            logger.error(f"Error closing device: {e}")
        finally:
            self._device = None
        logger.debug("Closed device")

    def is_open(self) -> bool:
        return self._device is not None

    def send(self, data: bytes) -> None:
        if self._device is None:
            raise TransportSendError("Cannot send, device not open")

        logger.debug(f"{format_bytes(data)} (sent)")
        payload = REPORT_ID + bytes(data)
        try:
            written = self._device.write(payload)
        except (OSError, ValueError) as e:
            raise TransportSendError(f"Send error: {e}") from e

        if written is not None and written < 0:
            raise TransportSendError("Send error: write failed")

    def receive_frame(self, timeout: float = READ_TIMEOUT) -> bytes:
        if self._device is None:
            raise TransportReadError("Cannot read, device not open")

        try:
            data = self._device.read(self.frame_size, int(timeout * 1000))
        except (OSError, ValueError) as e:
            raise TransportReadError(f"Read error: {e}") from e

        if not data:
            raise TransportTimeout("Timeout")

        frame = bytes(data)
        if len(frame) < self.frame_size:
            raise TransportReadError(
                f"Short frame ({len(frame)}/{self.frame_size} bytes): {format_bytes(frame)}"
            )

        logger.debug(f"{format_bytes(frame)} (received)")
        return frame[:self.frame_size]
