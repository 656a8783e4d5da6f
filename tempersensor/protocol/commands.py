"""Wire constants for the TEMPer USB-HID frame exchange.

Every command is a fixed 8-byte payload and every response is an 8-byte
frame. Pure helpers only; no I/O.
"""
from __future__ import annotations

from typing import Iterable

FRAME_SIZE = 8

QUERY_FIRMWARE = bytes((0x01, 0x86, 0xFF, 0x01, 0x00, 0x00, 0x00, 0x00))
QUERY_VALUES = bytes((0x01, 0x80, 0x33, 0x01, 0x00, 0x00, 0x00, 0x00))

# Command names used in error reasons
QUERY_FIRMWARE_NAME = "query firmware"
QUERY_VALUES_NAME = "query values"

# Number of frames answering QUERY_FIRMWARE
FIRMWARE_FRAMES = 2
FIRMWARE_MAX_LENGTH = FIRMWARE_FRAMES * FRAME_SIZE

# Byte offsets of the first and second value inside a response frame
VALUE_OFFSETS = (2, 4)


def format_bytes(data: bytes) -> str:
    """Render bytes as space separated hex, e.g. '01 86 ff 01'."""
    return " ".join(f"{b:02x}" for b in data)


def firmware_from_frames(frames: Iterable[bytes]) -> str:
    """Assemble the firmware string from the frames answering QUERY_FIRMWARE.

    Each frame contributes its bytes up to the first NUL. The result is
    capped at FIRMWARE_MAX_LENGTH characters.

    Example:
        >>> firmware_from_frames([b"TEMPer1F", b"_V1.3r1F"])
        'TEMPer1F_V1.3r1F'
    """
    raw = b""
    for frame in frames:
        raw += bytes(frame[:FRAME_SIZE]).split(b"\x00", 1)[0]
    return raw[:FIRMWARE_MAX_LENGTH].decode("ascii", errors="replace")
