from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional

import hid

from ...protocol.profiles import is_supported_id
from .errors import SensorNotFoundError

logger = logging.getLogger(__name__)

# Two-interface sensors expose a keyboard on interface 0 and the data
# channel on interface 1
KEYBOARD_INTERFACE = 0
DATA_INTERFACE = 1


@dataclass(frozen=True)
class SensorInfo:
    """
    Representation of one HID interface as seen by hidapi.

    Attributes:
        path: Path to open with hidapi (e.g. b'/dev/hidraw3').
        vendor_id: USB Vendor ID.
        product_id: USB Product ID.
        manufacturer: USB manufacturer string, if available.
        product: USB product string, if available.
        serial_number: USB serial string, if available.
        interface_number: USB interface number, -1 if unknown.
    """
    path: bytes
    vendor_id: int
    product_id: int
    manufacturer: Optional[str] = None
    product: Optional[str] = None
    serial_number: Optional[str] = None
    interface_number: int = -1

    @property
    def device_id(self) -> str:
        """vendor:product in lowercase hex, e.g. '0c45:7401'."""
        return f"{self.vendor_id:04x}:{self.product_id:04x}"


def _entry_to_info(entry: Mapping[str, Any]) -> SensorInfo:
    """Convert a hid.enumerate() dictionary to SensorInfo."""
    path = entry.get("path", b"")
    if isinstance(path, str):
        path = path.encode()
    return SensorInfo(
        path=path,
        vendor_id=entry.get("vendor_id", 0),
        product_id=entry.get("product_id", 0),
        manufacturer=entry.get("manufacturer_string") or None,
        product=entry.get("product_string") or None,
        serial_number=entry.get("serial_number") or None,
        interface_number=entry.get("interface_number", -1),
    )


def is_matching_sensor(
    info: SensorInfo,
    *,
    vendor_id: Optional[int] = None,
    product_id: Optional[int] = None,
    interface_number: Optional[int] = None,
) -> bool:
    """
    Decide whether a given SensorInfo describes a sensor we can talk to.

    The vendor/product pair must be in the profile table. Additional
    criteria are AND-combined; a criterion that is None is ignored.
    """
    if not is_supported_id(info.vendor_id, info.product_id):
        return False

    if vendor_id is not None and info.vendor_id != vendor_id:
        return False

    if product_id is not None and info.product_id != product_id:
        return False

    if interface_number is not None and info.interface_number != interface_number:
        return False

    return True


def find_sensors(
    *,
    matcher: Optional[Callable[[SensorInfo], bool]] = None,
    vendor_id: Optional[int] = None,
    product_id: Optional[int] = None,
    interface_number: Optional[int] = None,
) -> List[SensorInfo]:
    """
    Find all supported sensors connected to this machine.

    You can either pass a custom `matcher(info) -> bool` or use the
    built-in criteria (vendor_id / product_id / interface_number).

    Returns:
        List of SensorInfo objects in enumeration order.
    """
    logger.debug("Scanning for hid devices")
    results: List[SensorInfo] = []

    for entry in hid.enumerate():
        info = _entry_to_info(entry)
        logger.debug(
            f"VendorId: {info.vendor_id:04x} / ProductId: {info.product_id:04x} / "
            f"Device: '{info.path.decode(errors='replace')}'"
        )
        if matcher is not None:
            if matcher(info):
                results.append(info)
        elif is_matching_sensor(
            info,
            vendor_id=vendor_id,
            product_id=product_id,
            interface_number=interface_number,
        ):
            logger.debug(f"Device {info.device_id} found")
            results.append(info)

    return results


def select_sensor(candidates: Iterable[SensorInfo]) -> Optional[SensorInfo]:
    """
    Pick the sensor to use from a list of supported candidates.

    The first candidate fixes the vendor id. Among candidates with that
    vendor id the lexicographically smallest path wins; candidates from
    other vendors are ignored. This mirrors the behaviour of earlier
    releases and has no deeper meaning.

    Returns:
        The selected SensorInfo, or None if there are no candidates.
    """
    selected: Optional[SensorInfo] = None

    for info in candidates:
        if selected is None:
            selected = info
            logger.debug(f"storing {info.path.decode(errors='replace')} as devpath")
        elif info.vendor_id == selected.vendor_id:
            if info.path < selected.path:
                logger.debug(
                    f"Switching devpath from {selected.path.decode(errors='replace')} "
                    f"to {info.path.decode(errors='replace')}"
                )
                selected = info
            else:
                logger.debug(
                    f"Not switching devpath from {selected.path.decode(errors='replace')} "
                    f"to {info.path.decode(errors='replace')}"
                )
        else:
            logger.debug(
                f"Found two supported devices, sticking to {selected.device_id} "
                f"and ignoring {info.device_id}"
            )

    return selected


def drop_keyboard_interfaces(candidates: Iterable[SensorInfo]) -> List[SensorInfo]:
    """
    Remove keyboard interfaces of sensors that also expose a data interface.

    Interfaces belong to the same sensor when vendor id, product id and
    serial number agree. Sensors with a single interface are kept as they are.
    """
    candidates = list(candidates)
    with_data = {
        (info.vendor_id, info.product_id, info.serial_number)
        for info in candidates
        if info.interface_number == DATA_INTERFACE
    }

    kept: List[SensorInfo] = []
    for info in candidates:
        key = (info.vendor_id, info.product_id, info.serial_number)
        if info.interface_number == KEYBOARD_INTERFACE and key in with_data:
            logger.debug(f"Skipping keyboard interface {info.path.decode(errors='replace')}")
            continue
        kept.append(info)
    return kept


def find_single_sensor(
    *,
    matcher: Optional[Callable[[SensorInfo], bool]] = None,
    vendor_id: Optional[int] = None,
    product_id: Optional[int] = None,
    interface_number: Optional[int] = None,
) -> SensorInfo:
    """
    Find the one sensor this run will use.

    Behaviour:
        - 0 matches  -> SensorNotFoundError
        - 1 match    -> return it
        - >1 matches -> drop keyboard interfaces, then apply select_sensor()

    This is the function you typically call before opening a HidTransport.
    """
    matches = find_sensors(
        matcher=matcher,
        vendor_id=vendor_id,
        product_id=product_id,
        interface_number=interface_number,
    )

    selected = select_sensor(drop_keyboard_interfaces(matches))
    if selected is None:
        raise SensorNotFoundError("No supported device found")

    logger.debug(f"Will use '{selected.path.decode(errors='replace')}'")
    return selected
