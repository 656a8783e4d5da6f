"""Runtime options for one measurement run."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional

from .models import ConversionRule, DeviceProfile, SensorSlot
from .transport.base import READ_TIMEOUT

QUERY_ATTEMPTS = 10


@dataclass(frozen=True)
class RuntimeOptions:
    """User settings for calibration, output and device interaction.

    Attributes:
        precision: Decimal places in the output
        fahrenheit: Report temperatures in Fahrenheit
        in_sensor: Slot reported as "in", None for the device default
        out_sensor: Slot reported as "out", None for the device default
        calibration_in: Offset added to the "in" value
        calibration_out: Offset added to the "out" value
        conversion_rule: Overrides the profile's conversion rule
        debug: Show debug output
        timeout: Seconds to wait for each response frame
        attempts: Maximum number of value query attempts
    """
    precision: int = 0
    fahrenheit: bool = False
    in_sensor: Optional[SensorSlot] = None
    out_sensor: Optional[SensorSlot] = None
    calibration_in: float = 0.0
    calibration_out: float = 0.0
    conversion_rule: Optional[ConversionRule] = None
    debug: bool = False
    timeout: float = READ_TIMEOUT
    attempts: int = QUERY_ATTEMPTS

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

    def with_profile_defaults(self, profile: DeviceProfile) -> RuntimeOptions:
        """Fill in/out slots the user did not choose from the profile."""
        return dataclasses.replace(
            self,
            in_sensor=self.in_sensor if self.in_sensor is not None else profile.default_in,
            out_sensor=self.out_sensor if self.out_sensor is not None else profile.default_out,
        )
