"""Value decoder for raw TEMPer sensor fields.

Turns a 2-byte big-endian field into a float according to a conversion
rule. Pure functions with no side effects.

The field is stored in two's complement. The sign is handled manually
(subtract one, invert, negate) instead of relying on a signed integer
type, so the result only depends on the bytes.
"""
from __future__ import annotations

import logging

from ..models import ConversionRule, INVALID_VALUE

logger = logging.getLogger(__name__)

FIELD_SIZE = 2


def decode(raw: bytes, rule: ConversionRule) -> float:
    """Decode a raw 2-byte field.

    Args:
        raw: Two bytes, big-endian, sign in bit 15
        rule: Conversion rule of the device profile

    Returns:
        Calibrated value, or INVALID_VALUE if the device flagged an error
        or the rule is unknown

    Raises:
        ValueError: if raw is not exactly two bytes

    Examples:
        >>> decode(bytes([0x1a, 0x10]), ConversionRule.TWOS_COMPLEMENT_FRACTION)
        26.0625
        >>> decode(bytes([0xf6, 0x9a]), ConversionRule.TWOS_COMPLEMENT_SCALED_100)
        -24.06
    """
    if len(raw) != FIELD_SIZE:
        raise ValueError(f"expected {FIELD_SIZE} bytes, got {len(raw)}")

    high, low = raw[0], raw[1]
    field = (high << 8) + low
    negative = (high & 0x80) != 0

    if rule is ConversionRule.TWOS_COMPLEMENT_FRACTION:
        # Fraction lives in the upper nibble of the low byte; a non-zero
        # lower nibble is the device's error marker.
        if low & 0x0F:
            logger.debug("invalid result received")
            return INVALID_VALUE
        shifted = field >> 4
        if negative:
            return -((shifted - 1) ^ 0xFFF) / 16.0
        return shifted / 16.0

    if rule is ConversionRule.TWOS_COMPLEMENT_SCALED_100:
        if negative:
            return -((field - 1) ^ 0xFFFF) / 100.0
        return field / 100.0

    return INVALID_VALUE


def decode_frame_value(frame: bytes, offset: int, rule: ConversionRule) -> float:
    """Decode the field starting at ``offset`` inside a response frame."""
    return decode(bytes(frame[offset:offset + FIELD_SIZE]), rule)
