"""Protocol layer: wire constants, value decoding and device profiles."""

from .commands import (
    FRAME_SIZE,
    QUERY_FIRMWARE,
    QUERY_VALUES,
    VALUE_OFFSETS,
    firmware_from_frames,
    format_bytes,
)
from .decoder import decode, decode_frame_value
from .profiles import ProfileEntry, ProfileTable, RejectedDevice, is_supported_id, lookup

__all__ = [
    "FRAME_SIZE",
    "QUERY_FIRMWARE",
    "QUERY_VALUES",
    "VALUE_OFFSETS",
    "firmware_from_frames",
    "format_bytes",
    "decode",
    "decode_frame_value",
    "ProfileEntry",
    "ProfileTable",
    "RejectedDevice",
    "is_supported_id",
    "lookup",
]
