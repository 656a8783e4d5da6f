"""Transport layer for TEMPer sensor communication."""

from .base import READ_TIMEOUT, Transport
from .usbhid import HidTransport

__all__ = ["READ_TIMEOUT", "Transport", "HidTransport"]
