"""Tests for sensor discovery and device selection."""
import unittest
from unittest.mock import patch

from tempersensor.device.finder import (
    SensorInfo,
    SensorNotFoundError,
    drop_keyboard_interfaces,
    find_sensors,
    find_single_sensor,
    is_matching_sensor,
    select_sensor,
)


def hid_entry(path, vendor_id, product_id, interface_number=0, product=""):
    """Build a dictionary shaped like a hid.enumerate() entry."""
    return {
        "path": path,
        "vendor_id": vendor_id,
        "product_id": product_id,
        "serial_number": "",
        "release_number": 0x0001,
        "manufacturer_string": "RDing",
        "product_string": product,
        "usage_page": 0xFF00,
        "usage": 1,
        "interface_number": interface_number,
    }


class TestIsMatchingSensor(unittest.TestCase):
    """Tests for the match predicate."""

    def test_supported_pair(self):
        info = SensorInfo(b"/dev/hidraw0", 0x0C45, 0x7401)
        self.assertTrue(is_matching_sensor(info))

    def test_unsupported_pair(self):
        info = SensorInfo(b"/dev/hidraw0", 0x046D, 0xC52B)
        self.assertFalse(is_matching_sensor(info))

    def test_extra_criteria(self):
        info = SensorInfo(b"/dev/hidraw0", 0x413D, 0x2107, interface_number=1)
        self.assertTrue(is_matching_sensor(info, vendor_id=0x413D, interface_number=1))
        self.assertFalse(is_matching_sensor(info, interface_number=0))
        self.assertFalse(is_matching_sensor(info, product_id=0x7401))

    def test_device_id(self):
        self.assertEqual(SensorInfo(b"x", 0x0C45, 0x7401).device_id, "0c45:7401")


class TestSelectSensor(unittest.TestCase):
    """Tie-break between several supported devices."""

    def test_no_candidates(self):
        self.assertIsNone(select_sensor([]))

    def test_single_candidate(self):
        info = SensorInfo(b"/dev/hidraw3", 0x0C45, 0x7401)
        self.assertIs(select_sensor([info]), info)

    def test_smallest_path_wins_within_vendor(self):
        a = SensorInfo(b"/dev/hidraw5", 0x413D, 0x2107)
        b = SensorInfo(b"/dev/hidraw2", 0x413D, 0x2107)
        c = SensorInfo(b"/dev/hidraw4", 0x413D, 0x2107)
        self.assertIs(select_sensor([a, b, c]), b)

    def test_other_vendor_is_ignored(self):
        first = SensorInfo(b"/dev/hidraw7", 0x0C45, 0x7401)
        other = SensorInfo(b"/dev/hidraw1", 0x413D, 0x2107)
        self.assertIs(select_sensor([first, other]), first)


class TestFindSensors(unittest.TestCase):
    """Tests for enumeration via hidapi."""

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_filters_unsupported_devices(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw0", 0x046D, 0xC52B, product="USB Receiver"),
            hid_entry(b"/dev/hidraw1", 0x0C45, 0x7401, product="TEMPer1F_V1.3"),
            hid_entry(b"/dev/hidraw2", 0x0C45, 0x7401, interface_number=1),
        ]

        sensors = find_sensors()

        self.assertEqual([s.path for s in sensors], [b"/dev/hidraw1", b"/dev/hidraw2"])
        self.assertEqual(sensors[0].product, "TEMPer1F_V1.3")
        self.assertIsNone(sensors[0].serial_number)

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_interface_filter(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw1", 0x0C45, 0x7401, interface_number=0),
            hid_entry(b"/dev/hidraw2", 0x0C45, 0x7401, interface_number=1),
        ]
        sensors = find_sensors(interface_number=1)
        self.assertEqual([s.path for s in sensors], [b"/dev/hidraw2"])

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_custom_matcher(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw0", 0x046D, 0xC52B),
            hid_entry(b"/dev/hidraw1", 0x0C45, 0x7401),
        ]
        sensors = find_sensors(matcher=lambda info: info.vendor_id == 0x046D)
        self.assertEqual([s.path for s in sensors], [b"/dev/hidraw0"])

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_str_path_is_encoded(self, mock_enumerate):
        mock_enumerate.return_value = [hid_entry("/dev/hidraw1", 0x1A86, 0xE025)]
        self.assertEqual(find_sensors()[0].path, b"/dev/hidraw1")


class TestFindSingleSensor(unittest.TestCase):
    """Tests for picking the one sensor of this run."""

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_nothing_found(self, mock_enumerate):
        mock_enumerate.return_value = [hid_entry(b"/dev/hidraw0", 0x046D, 0xC52B)]
        with self.assertRaises(SensorNotFoundError) as ctx:
            find_single_sensor()
        self.assertEqual(str(ctx.exception), "No supported device found")

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_rejected_device_is_still_found(self, mock_enumerate):
        mock_enumerate.return_value = [hid_entry(b"/dev/hidraw0", 0x1A86, 0x5523)]
        self.assertEqual(find_single_sensor().device_id, "1a86:5523")

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_tie_break_applied(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw3", 0x413D, 0x2107),
            hid_entry(b"/dev/hidraw1", 0x0C45, 0x7401),
            hid_entry(b"/dev/hidraw2", 0x413D, 0x2107),
        ]
        self.assertEqual(find_single_sensor().path, b"/dev/hidraw2")

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_data_interface_of_two_interface_sensor(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw0", 0x0C45, 0x7401, interface_number=0),
            hid_entry(b"/dev/hidraw1", 0x0C45, 0x7401, interface_number=1),
        ]

        selected = find_single_sensor()

        self.assertEqual(selected.path, b"/dev/hidraw1")
        self.assertEqual(selected.interface_number, 1)

    @patch('tempersensor.device.finder.core.hid.enumerate')
    def test_smallest_data_interface_wins(self, mock_enumerate):
        mock_enumerate.return_value = [
            hid_entry(b"/dev/hidraw2", 0x413D, 0x2107, interface_number=0),
            hid_entry(b"/dev/hidraw3", 0x413D, 0x2107, interface_number=1),
            hid_entry(b"/dev/hidraw0", 0x413D, 0x2107, interface_number=0),
            hid_entry(b"/dev/hidraw1", 0x413D, 0x2107, interface_number=1),
        ]
        self.assertEqual(find_single_sensor().path, b"/dev/hidraw1")


class TestDropKeyboardInterfaces(unittest.TestCase):
    """Keyboard interfaces are only dropped when a data interface exists."""

    def test_keyboard_dropped_next_to_data(self):
        keyboard = SensorInfo(b"/dev/hidraw0", 0x0C45, 0x7401, interface_number=0)
        data = SensorInfo(b"/dev/hidraw1", 0x0C45, 0x7401, interface_number=1)
        self.assertEqual(drop_keyboard_interfaces([keyboard, data]), [data])

    def test_single_interface_sensor_kept(self):
        only = SensorInfo(b"/dev/hidraw0", 0x1A86, 0xE025, interface_number=0)
        self.assertEqual(drop_keyboard_interfaces([only]), [only])

    def test_other_sensor_is_not_affected(self):
        temperhum = SensorInfo(b"/dev/hidraw0", 0x1A86, 0xE025, interface_number=0)
        data = SensorInfo(b"/dev/hidraw2", 0x0C45, 0x7401, interface_number=1)
        self.assertEqual(drop_keyboard_interfaces([temperhum, data]), [temperhum, data])

    def test_serial_numbers_separate_sensors(self):
        keyboard = SensorInfo(b"/dev/hidraw0", 0x413D, 0x2107, serial_number="A", interface_number=0)
        data = SensorInfo(b"/dev/hidraw1", 0x413D, 0x2107, serial_number="B", interface_number=1)
        self.assertEqual(drop_keyboard_interfaces([keyboard, data]), [keyboard, data])


if __name__ == '__main__':
    unittest.main()
