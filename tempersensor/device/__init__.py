"""Device layer for TEMPer USB-HID sensors.

This module provides:
- Sensor discovery (find_sensors, find_single_sensor, select_sensor)
- Firmware based identification (DeviceIdentifier, identify_device)
- Value queries with bounded retries (QueryEngine, query_values)
- A facade owning the transport for one run (TemperSensor)
"""

from .finder import (
    SensorInfo,
    SensorNotFoundError,
    find_sensors,
    find_single_sensor,
    is_matching_sensor,
    select_sensor,
)
from .identification import DeviceIdentifier, Identification, IdentificationState, identify_device
from .manager import TemperSensor
from .query import QueryEngine, query_values

__all__ = [
    # Finder
    'SensorInfo',
    'SensorNotFoundError',
    'find_sensors',
    'find_single_sensor',
    'is_matching_sensor',
    'select_sensor',

    # Identification
    'DeviceIdentifier',
    'Identification',
    'IdentificationState',
    'identify_device',

    # Query
    'QueryEngine',
    'query_values',

    # Facade
    'TemperSensor',
]
