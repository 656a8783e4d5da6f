"""Immutable data models for TEMPer sensor profiles and readings.

All models are frozen dataclasses or enums. They are the contract between
the protocol layer, the device layer and the presentation layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

# Reserved value meaning "no valid reading for this slot"
INVALID_VALUE = -999.0


class ConversionRule(Enum):
    """Numeric decoding scheme for a raw 2-byte sensor field.

    The values are the method numbers accepted on the command line.
    """
    TWOS_COMPLEMENT_FRACTION = 1
    TWOS_COMPLEMENT_SCALED_100 = 2


class SensorSlot(IntEnum):
    """Logical measurement channel; the value is the index in SensorReadings."""
    INTERNAL_TEMPERATURE = 0
    INTERNAL_HUMIDITY = 1
    EXTERNAL_TEMPERATURE = 2
    EXTERNAL_HUMIDITY = 3

    @property
    def code(self) -> str:
        """Short code used on the command line (it, ih, et, eh)."""
        return _SLOT_CODES[self]

    @property
    def is_temperature(self) -> bool:
        return self in (SensorSlot.INTERNAL_TEMPERATURE, SensorSlot.EXTERNAL_TEMPERATURE)

    @classmethod
    def from_code(cls, code: str) -> SensorSlot:
        """Look up a slot by its short code.

        Raises:
            ValueError: if the code is unknown
        """
        for slot, slot_code in _SLOT_CODES.items():
            if slot_code == code:
                return slot
        raise ValueError(f"Unknown sensor code '{code}'")


_SLOT_CODES = {
    SensorSlot.INTERNAL_TEMPERATURE: "it",
    SensorSlot.INTERNAL_HUMIDITY: "ih",
    SensorSlot.EXTERNAL_TEMPERATURE: "et",
    SensorSlot.EXTERNAL_HUMIDITY: "eh",
}

SLOT_COUNT = len(SensorSlot)

# One frame carries up to two values; None marks an unused position
FrameLayout = Tuple[Optional[SensorSlot], Optional[SensorSlot]]


@dataclass(frozen=True)
class DeviceProfile:
    """How to talk to one identified device variant.

    Attributes:
        name: Firmware label of the variant (e.g. 'TEMPer1F_V1.3')
        response_count: Number of 8-byte frames answering one value query
        conversion_rule: How raw fields are turned into floats
        layout: One FrameLayout per frame, mapping value positions to slots
        default_in: Slot reported as MRTG "in" unless chosen by the user
        default_out: Slot reported as MRTG "out" unless chosen by the user
        tested: False for variants only known from third-party reports
    """
    name: str
    response_count: int
    conversion_rule: ConversionRule
    layout: Tuple[FrameLayout, ...]
    default_in: SensorSlot
    default_out: SensorSlot
    tested: bool = True

    def __post_init__(self) -> None:
        if self.response_count < 1:
            raise ValueError(f"response_count must be >= 1, got {self.response_count}")
        if len(self.layout) != self.response_count:
            raise ValueError(
                f"layout has {len(self.layout)} entries, expected {self.response_count}"
            )
        for entry in self.layout:
            if len(entry) != 2:
                raise ValueError(f"layout entry must have 2 positions, got {entry!r}")

    @property
    def slots(self) -> Tuple[SensorSlot, ...]:
        """All slots this profile populates, in frame order."""
        return tuple(slot for entry in self.layout for slot in entry if slot is not None)


@dataclass(frozen=True)
class SensorReadings:
    """Snapshot of the four sensor slots after one query cycle.

    Each value is either a measurement or INVALID_VALUE.
    """
    values: Tuple[float, float, float, float] = (INVALID_VALUE,) * SLOT_COUNT

    def __post_init__(self) -> None:
        if len(self.values) != SLOT_COUNT:
            raise ValueError(f"expected {SLOT_COUNT} values, got {len(self.values)}")

    @classmethod
    def empty(cls) -> SensorReadings:
        return cls()

    def __getitem__(self, slot: SensorSlot) -> float:
        return self.values[slot]

    def is_valid(self, slot: SensorSlot) -> bool:
        return self.values[slot] > INVALID_VALUE

    def as_dict(self) -> Dict[str, float]:
        """Map slot codes to values, e.g. {'it': 21.5, ...}."""
        return {slot.code: self.values[slot] for slot in SensorSlot}
