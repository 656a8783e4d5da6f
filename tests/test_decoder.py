"""Unit tests for the value decoder.

Tests verify:
- Fixed-point two's complement (4 fraction bits) decoding
- Scaled-by-100 two's complement decoding
- Error flag in the low nibble
- Unknown rules and malformed input
"""
import unittest

from tempersensor.models import ConversionRule, INVALID_VALUE
from tempersensor.protocol.decoder import decode, decode_frame_value
from tempersensor.selftest import FIXTURES, evaluate, run_self_test

FRACTION = ConversionRule.TWOS_COMPLEMENT_FRACTION
SCALED_100 = ConversionRule.TWOS_COMPLEMENT_SCALED_100


class TestFractionRule(unittest.TestCase):
    """Tests for TWOS_COMPLEMENT_FRACTION."""

    def test_positive_values(self):
        self.assertEqual(decode(bytes([0x1a, 0x10]), FRACTION), 26.0625)
        self.assertEqual(decode(bytes([0x14, 0xd0]), FRACTION), 20.8125)
        self.assertEqual(decode(bytes([0x01, 0x60]), FRACTION), 1.375)
        self.assertEqual(decode(bytes([0x00, 0x10]), FRACTION), 0.0625)

    def test_zero(self):
        self.assertEqual(decode(bytes([0x00, 0x00]), FRACTION), 0.0)

    def test_negative_values(self):
        self.assertEqual(decode(bytes([0xfe, 0xf0]), FRACTION), -1.0625)
        self.assertEqual(decode(bytes([0xff, 0xf0]), FRACTION), -0.0625)
        self.assertEqual(decode(bytes([0xff, 0x40]), FRACTION), -0.75)
        self.assertEqual(decode(bytes([0xfd, 0x00]), FRACTION), -3.0)

    def test_most_negative_value(self):
        self.assertEqual(decode(bytes([0x80, 0x00]), FRACTION), -128.0)

    def test_nonzero_low_nibble_is_invalid(self):
        """Every field with a set bit in the low nibble is rejected."""
        for high in (0x00, 0x1a, 0x7f, 0x80, 0xfe, 0xff):
            for low in range(256):
                if low & 0x0F == 0:
                    continue
                with self.subTest(high=high, low=low):
                    self.assertEqual(decode(bytes([high, low]), FRACTION), INVALID_VALUE)

    def test_error_marker_from_device(self):
        self.assertEqual(decode(bytes([0xff, 0xff]), FRACTION), INVALID_VALUE)


class TestScaledRule(unittest.TestCase):
    """Tests for TWOS_COMPLEMENT_SCALED_100."""

    def test_positive(self):
        self.assertEqual(decode(bytes([0x09, 0x66]), SCALED_100), 24.06)
        self.assertEqual(decode(bytes([0x05, 0x90]), SCALED_100), 14.24)

    def test_negative(self):
        self.assertEqual(decode(bytes([0xf6, 0x9a]), SCALED_100), -24.06)
        self.assertEqual(decode(bytes([0xfa, 0x70]), SCALED_100), -14.24)

    def test_no_validity_check(self):
        """The low nibble carries data under this rule."""
        self.assertEqual(decode(bytes([0x00, 0x0f]), SCALED_100), 0.15)

    def test_extremes(self):
        self.assertEqual(decode(bytes([0x7f, 0xff]), SCALED_100), 327.67)
        self.assertEqual(decode(bytes([0xff, 0xff]), SCALED_100), -0.01)
        self.assertEqual(decode(bytes([0x80, 0x00]), SCALED_100), -327.68)


class TestDecoderEdgeCases(unittest.TestCase):
    """Tests for unknown rules, input validation and purity."""

    def test_unknown_rule_returns_sentinel(self):
        self.assertEqual(decode(bytes([0x09, 0x66]), None), INVALID_VALUE)
        self.assertEqual(decode(bytes([0x09, 0x66]), 3), INVALID_VALUE)

    def test_wrong_length_raises(self):
        with self.assertRaises(ValueError):
            decode(b"\x01", FRACTION)
        with self.assertRaises(ValueError):
            decode(b"\x01\x02\x03", SCALED_100)

    def test_accepts_bytearray(self):
        self.assertEqual(decode(bytearray([0x09, 0x66]), SCALED_100), 24.06)

    def test_decode_is_deterministic(self):
        raw = bytes([0xfe, 0xf0])
        self.assertEqual(decode(raw, FRACTION), decode(raw, FRACTION))

    def test_decode_frame_value_offsets(self):
        frame = bytes.fromhex("80041a1a1a100000")
        self.assertEqual(decode_frame_value(frame, 4, FRACTION), 26.0625)
        # Offset 2 holds 1a 1a, whose low nibble marks it invalid
        self.assertEqual(decode_frame_value(frame, 2, FRACTION), INVALID_VALUE)

    def test_temper_f14_frame(self):
        frame = bytes.fromhex("80021a9065724631")
        self.assertEqual(decode_frame_value(frame, 2, FRACTION), 26.5625)


class TestSelfTestFixtures(unittest.TestCase):
    """The --test fixtures must all decode to their expected values."""

    def test_all_fixtures_pass(self):
        for fixture in FIXTURES:
            with self.subTest(frame=fixture.frame.hex(), offset=fixture.offset):
                self.assertAlmostEqual(evaluate(fixture), fixture.expected, places=6)

    def test_run_self_test_reports_no_failures(self):
        self.assertEqual(run_self_test(), [])


if __name__ == '__main__':
    unittest.main()
