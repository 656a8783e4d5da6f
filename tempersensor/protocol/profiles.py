"""Device profile table.

Maps (vendor id, product id, firmware prefix) to a DeviceProfile. The
entries are collected from tested devices and from reports for devices
nobody could test yet (``tested=False``).
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..errors import UnsupportedDeviceError
from ..models import ConversionRule, DeviceProfile, SensorSlot

logger = logging.getLogger(__name__)

IT = SensorSlot.INTERNAL_TEMPERATURE
IH = SensorSlot.INTERNAL_HUMIDITY
ET = SensorSlot.EXTERNAL_TEMPERATURE
EH = SensorSlot.EXTERNAL_HUMIDITY

FRACTION = ConversionRule.TWOS_COMPLEMENT_FRACTION
SCALED_100 = ConversionRule.TWOS_COMPLEMENT_SCALED_100


@dataclass(frozen=True)
class ProfileEntry:
    """One row of the profile table.

    Attributes:
        vendor_id: USB vendor id
        product_id: USB product id
        firmware_prefix: Expected firmware string, or None to match any
        compare_length: Number of leading characters compared
        profile: Profile selected on match
    """
    vendor_id: int
    product_id: int
    firmware_prefix: Optional[str]
    compare_length: int
    profile: DeviceProfile

    def matches(self, vendor_id: int, product_id: int, firmware: str) -> bool:
        if (vendor_id, product_id) != (self.vendor_id, self.product_id):
            return False
        if self.firmware_prefix is None:
            return True
        n = self.compare_length
        return firmware[:n] == self.firmware_prefix[:n]


@dataclass(frozen=True)
class RejectedDevice:
    """A vendor/product pair that is known but cannot be supported."""
    vendor_id: int
    product_id: int
    reason: str


DEFAULT_ENTRIES: Tuple[ProfileEntry, ...] = (
    ProfileEntry(
        0x0C45, 0x7401, "TEMPer1F_V1.3r1F", 13,
        DeviceProfile(
            name="TEMPer1F_V1.3",
            response_count=1,
            conversion_rule=FRACTION,
            layout=((None, ET),),
            default_in=ET,
            default_out=ET,
        ),
    ),
    ProfileEntry(
        0x0C45, 0x7401, "TEMPerF1.4", 10,
        DeviceProfile(
            name="TEMPerF1.4",
            response_count=1,
            conversion_rule=FRACTION,
            layout=((IT, None),),
            default_in=IT,
            default_out=IT,
        ),
    ),
    # Tenx Technology foot pedal/thermometer; does not need a firmware match
    ProfileEntry(
        0x1130, 0x660C, None, 0,
        DeviceProfile(
            name="Tenx Technology Foot Pedal/Thermometer",
            response_count=1,
            conversion_rule=FRACTION,
            layout=((None, IT),),
            default_in=IT,
            default_out=IT,
            tested=False,
        ),
    ),
    ProfileEntry(
        0x413D, 0x2107, "TEMPerGold_V3.1", 15,
        DeviceProfile(
            name="TEMPerGold_V3.1",
            response_count=1,
            conversion_rule=SCALED_100,
            layout=((IT, None),),
            default_in=IT,
            default_out=IT,
            tested=False,
        ),
    ),
    ProfileEntry(
        0x413D, 0x2107, "TEMPerX_V3.1", 12,
        DeviceProfile(
            name="TEMPerX_V3.1",
            response_count=2,
            conversion_rule=SCALED_100,
            layout=((IT, IH), (ET, EH)),
            default_in=IH,
            default_out=IT,
            tested=False,
        ),
    ),
    ProfileEntry(
        0x413D, 0x2107, "TEMPerX_V3.3", 12,
        DeviceProfile(
            name="TEMPerX_V3.3",
            response_count=1,
            conversion_rule=SCALED_100,
            layout=((IT, IH),),
            default_in=IH,
            default_out=IT,
        ),
    ),
    ProfileEntry(
        0x1A86, 0xE025, "TEMPerHUM_V3.9", 14,
        DeviceProfile(
            name="TEMPerHUM_V3.9",
            response_count=1,
            conversion_rule=SCALED_100,
            layout=((IT, IH),),
            default_in=IH,
            default_out=IT,
        ),
    ),
)

DEFAULT_REJECTED: Tuple[RejectedDevice, ...] = (
    RejectedDevice(
        0x1A86, 0x5523,
        "TEMPerX232 / TEMPerX232_V2.0 (1a86:5523) detected - unsupported yet",
    ),
)


class ProfileTable:
    """Lookup of device profiles by vendor, product and firmware string.

    Entries are tried in order; the first match wins.
    """

    def __init__(
        self,
        entries: Iterable[ProfileEntry] = DEFAULT_ENTRIES,
        rejected: Iterable[RejectedDevice] = DEFAULT_REJECTED,
    ):
        self._entries = tuple(entries)
        self._rejected = tuple(rejected)

    @property
    def entries(self) -> Tuple[ProfileEntry, ...]:
        return self._entries

    def is_supported_id(self, vendor_id: int, product_id: int) -> bool:
        """Check whether a vendor/product pair appears in the table.

        Rejected pairs count as known so callers can report why they
        cannot be used.
        """
        ids = (vendor_id, product_id)
        return (
            any((e.vendor_id, e.product_id) == ids for e in self._entries)
            or any((r.vendor_id, r.product_id) == ids for r in self._rejected)
        )

    def lookup(
        self,
        vendor_id: int,
        product_id: int,
        firmware: str,
        conversion_rule: Optional[ConversionRule] = None,
    ) -> DeviceProfile:
        """Select the profile for a device.

        Args:
            vendor_id: USB vendor id
            product_id: USB product id
            firmware: Firmware string reported by the device
            conversion_rule: Overrides the profile's rule if given

        Returns:
            Matching DeviceProfile

        Raises:
            UnsupportedDeviceError: if the device is rejected or unknown
        """
        for rejected in self._rejected:
            if (vendor_id, product_id) == (rejected.vendor_id, rejected.product_id):
                raise UnsupportedDeviceError(
                    rejected.reason,
                    vendor_id=vendor_id,
                    product_id=product_id,
                    firmware=firmware,
                )

        for entry in self._entries:
            if entry.matches(vendor_id, product_id, firmware):
                profile = entry.profile
                note = "" if profile.tested else " (untested!)"
                logger.debug(f"Detected {profile.name}{note}")
                if conversion_rule is not None and conversion_rule is not profile.conversion_rule:
                    profile = dataclasses.replace(profile, conversion_rule=conversion_rule)
                return profile

        logger.debug(f"Unknown firmware '{firmware}'")
        known_ids = any(
            (e.vendor_id, e.product_id) == (vendor_id, product_id) for e in self._entries
        )
        if known_ids:
            reason = f"Unknown {vendor_id:04x}:{product_id:04x} device"
        else:
            reason = "Unknown device"
        raise UnsupportedDeviceError(
            reason, vendor_id=vendor_id, product_id=product_id, firmware=firmware
        )


DEFAULT_TABLE = ProfileTable()


def lookup(
    vendor_id: int,
    product_id: int,
    firmware: str,
    conversion_rule: Optional[ConversionRule] = None,
) -> DeviceProfile:
    """Look up a profile in the default table. See ProfileTable.lookup."""
    return DEFAULT_TABLE.lookup(vendor_id, product_id, firmware, conversion_rule)


def is_supported_id(vendor_id: int, product_id: int) -> bool:
    """Check a vendor/product pair against the default table."""
    return DEFAULT_TABLE.is_supported_id(vendor_id, product_id)
