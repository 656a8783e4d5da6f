#!/usr/bin/env python3
"""
Interactive Sensor Test Script.

This script demonstrates the high-level TemperSensor API.
Run it to find a sensor, identify it, and print a few readings.
"""

import sys
import time
import logging
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tempersensor import TemperError
from tempersensor.device import SensorNotFoundError, TemperSensor, find_sensors, find_single_sensor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)


def main():
    print("Scanning for supported sensors...")
    for info in find_sensors():
        print(f"  {info.device_id} at {info.path.decode(errors='replace')} "
              f"({info.product or 'unknown product'})")

    try:
        info = find_single_sensor()
    except SensorNotFoundError as e:
        print(f"{e}. Is the sensor plugged in?")
        return

    print(f"\nUsing {info.device_id} at {info.path.decode(errors='replace')}")

    try:
        with TemperSensor(info) as sensor:
            identification = sensor.identify()
            print(f"Firmware: {identification.firmware}")
            print(f"Profile:  {identification.profile.name}"
                  f"{'' if identification.profile.tested else ' (untested)'}")

            print("\nReading values 5 times (Ctrl+C to stop)...")
            for i in range(5):
                readings = sensor.read()
                values = ", ".join(
                    f"{slot.code}={readings[slot]:.2f}"
                    for slot in identification.profile.slots
                    if readings.is_valid(slot)
                )
                print(f"[{i+1}/5] {values or 'no valid readings'}")
                time.sleep(1)
    except TemperError as e:
        print(f"Sensor error: {e.reason}")
    except KeyboardInterrupt:
        print("\nInterrupted by user.")


if __name__ == "__main__":
    main()
