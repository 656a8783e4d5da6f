"""Abstract base class for the sensor byte transport.

The Transport interface is the only thing the protocol engine needs from
the outside world: write an 8-byte command and read an 8-byte frame with
a bounded wait. Implementations can use hidapi, a raw hidraw node, or a
scripted fake in tests.

Key principles:
- Exclusive ownership (one transport per run, opened once, closed once)
- Blocking, bounded reads (no threads, no callbacks)
- Failures are raised as TransportError subclasses
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..protocol.commands import FRAME_SIZE

READ_TIMEOUT = 1.0  # seconds


class Transport(ABC):
    """Abstract transport interface for TEMPer sensor communication.

    Transports are responsible for:
    1. Managing the device handle lifecycle
    2. Writing command payloads
    3. Reading fixed-size response frames with a timeout

    Transports should NOT interpret frames. Decoding belongs to the
    protocol layer.
    """

    frame_size = FRAME_SIZE

    @abstractmethod
    def open(self) -> None:
        """Open the device handle.

        Raises:
            TransportOpenError: if the device cannot be opened
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the device handle.

        Should be safe to call multiple times.
        """
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if the handle is currently open."""
        pass

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Write a command payload to the device.

        Args:
            data: Command bytes (8 bytes for TEMPer commands)

        Raises:
            TransportSendError: if the write fails
        """
        pass

    @abstractmethod
    def receive_frame(self, timeout: float = READ_TIMEOUT) -> bytes:
        """Read one response frame.

        Args:
            timeout: Maximum wait in seconds

        Returns:
            Exactly ``frame_size`` bytes

        Raises:
            TransportTimeout: if nothing arrived within ``timeout``
            TransportReadError: if the read failed
        """
        pass

    def __enter__(self) -> Transport:
        """Context manager support - open on enter."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
