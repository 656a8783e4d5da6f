"""Decoder self-check run by ``tempersensor --test``.

Known frames with the values they should decode to, collected while
reverse engineering TEMPer1F_V1.3, TEMPerF1.4 and TEMPerX devices.
"""
from __future__ import annotations

import logging
from typing import List, NamedTuple

from .models import ConversionRule, INVALID_VALUE
from .mrtg import fahrenheit
from .protocol.commands import format_bytes
from .protocol.decoder import decode_frame_value

logger = logging.getLogger(__name__)

FRACTION = ConversionRule.TWOS_COMPLEMENT_FRACTION
SCALED_100 = ConversionRule.TWOS_COMPLEMENT_SCALED_100


class Fixture(NamedTuple):
    frame: bytes
    offset: int
    rule: ConversionRule
    expected: float
    in_fahrenheit: bool = False


FIXTURES = (
    Fixture(bytes.fromhex("80040000ffff0000"), 4, FRACTION, INVALID_VALUE),
    Fixture(bytes.fromhex("8004ffff00000000"), 2, FRACTION, INVALID_VALUE),
    Fixture(bytes.fromhex("80041a1a1a100000"), 4, FRACTION, 26.0625),
    Fixture(bytes.fromhex("8004141414d00000"), 4, FRACTION, 20.8125),
    Fixture(bytes.fromhex("8004010101600000"), 4, FRACTION, 1.375),
    Fixture(bytes.fromhex("8004000000600000"), 4, FRACTION, 0.375),
    Fixture(bytes.fromhex("8004000000100000"), 4, FRACTION, 0.0625),
    Fixture(bytes.fromhex("8004000000000000"), 4, FRACTION, 0.0),
    Fixture(bytes.fromhex("80040000fff00000"), 4, FRACTION, -0.0625),
    Fixture(bytes.fromhex("8004ffffff400000"), 4, FRACTION, -0.75),
    Fixture(bytes.fromhex("8004ffffff000000"), 4, FRACTION, -1.0),
    Fixture(bytes.fromhex("8004fefefef00000"), 4, FRACTION, -1.0625),
    Fixture(bytes.fromhex("8004fefefe000000"), 4, FRACTION, -2.0),
    Fixture(bytes.fromhex("8004fdfdfdf00000"), 4, FRACTION, -2.0625),
    Fixture(bytes.fromhex("8004fefe01000000"), 4, FRACTION, 1.0),
    Fixture(bytes.fromhex("8004fefeff000000"), 4, FRACTION, -1.0),
    Fixture(bytes.fromhex("8004fefefd000000"), 4, FRACTION, -3.0),
    Fixture(bytes.fromhex("8004fefe00000000"), 4, FRACTION, 32.0, True),
    Fixture(bytes.fromhex("8004eeeeee400000"), 4, FRACTION, 0.05, True),
    Fixture(bytes.fromhex("8004eeeeee300000"), 4, FRACTION, -0.0625, True),
    Fixture(bytes.fromhex("8004232323900000"), 4, FRACTION, 96.0125, True),
    Fixture(bytes.fromhex("8004096600000000"), 2, SCALED_100, 24.06),
    Fixture(bytes.fromhex("8004f69a00000000"), 2, SCALED_100, -24.06),
    Fixture(bytes.fromhex("8004059000000000"), 2, SCALED_100, 14.24),
    Fixture(bytes.fromhex("8004fa7000000000"), 2, SCALED_100, -14.24),
    Fixture(bytes.fromhex("80021a9065724631"), 2, FRACTION, 26.5625),
)


def evaluate(fixture: Fixture) -> float:
    value = decode_frame_value(fixture.frame, fixture.offset, fixture.rule)
    if fixture.in_fahrenheit and value > INVALID_VALUE:
        value = fahrenheit(value)
    return value


def run_self_test() -> List[Fixture]:
    """Decode every fixture and log the result.

    Returns:
        Fixtures whose decoded value differs from the expected one
    """
    failures: List[Fixture] = []
    for fixture in FIXTURES:
        value = evaluate(fixture)
        ok = abs(value - fixture.expected) < 1e-6
        logger.info(
            f"{format_bytes(fixture.frame)} @{fixture.offset}: temp: {value:.4f} / "
            f"expected: {fixture.expected:.4f}{'' if ok else ' MISMATCH'}"
        )
        if not ok:
            failures.append(fixture)
    return failures
