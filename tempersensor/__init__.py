"""tempersensor - read TEMPer USB-HID sensors and report values for MRTG."""

__version__ = "0.1.8"

from .config import RuntimeOptions
from .errors import (
    TemperError,
    TransportError,
    TransportOpenError,
    TransportReadError,
    TransportSendError,
    TransportTimeout,
    UnsupportedDeviceError,
)
from .models import (
    INVALID_VALUE,
    ConversionRule,
    DeviceProfile,
    SensorReadings,
    SensorSlot,
)
from .transport import HidTransport, Transport

__all__ = [
    "__version__",
    "RuntimeOptions",
    "TemperError",
    "TransportError",
    "TransportOpenError",
    "TransportReadError",
    "TransportSendError",
    "TransportTimeout",
    "UnsupportedDeviceError",
    "INVALID_VALUE",
    "ConversionRule",
    "DeviceProfile",
    "SensorReadings",
    "SensorSlot",
    "HidTransport",
    "Transport",
]
