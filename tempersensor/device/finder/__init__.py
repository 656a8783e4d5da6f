from .core import (
    SensorInfo,
    drop_keyboard_interfaces,
    find_sensors,
    find_single_sensor,
    is_matching_sensor,
    select_sensor,
)
from .errors import SensorNotFoundError

__all__ = [
    "SensorInfo",
    "drop_keyboard_interfaces",
    "find_sensors",
    "find_single_sensor",
    "is_matching_sensor",
    "select_sensor",
    "SensorNotFoundError",
]
