import unittest

from harmonicexplorer.model.colors import (
    INFRARED_THRESHOLD_HZ, frequency_to_hex, frequency_to_rgb, rgb_to_hex, shift_to_visible, wavelength_to_rgb
)
from harmonicexplorer.model.exceptions import ValidationError


class TestShiftToVisible(unittest.TestCase):
    def test_doubles_past_threshold(self):
        shifted = shift_to_visible(1.0)
        self.assertEqual(shifted, 2.0 ** 49)
        self.assertGreaterEqual(shifted, INFRARED_THRESHOLD_HZ)
        self.assertLess(shifted / 2.0, INFRARED_THRESHOLD_HZ)

    def test_already_visible(self):
        self.assertEqual(shift_to_visible(5.0e14), 5.0e14)

    def test_non_positive(self):
        with self.assertRaises(ValidationError):
            shift_to_visible(0.0)


class TestWavelength(unittest.TestCase):
    def test_band_edges(self):
        self.assertEqual(wavelength_to_rgb(440.0), (0, 0, 255))
        self.assertEqual(wavelength_to_rgb(510.0), (0, 255, 0))
        self.assertEqual(wavelength_to_rgb(580.0), (255, 255, 0))
        self.assertEqual(wavelength_to_rgb(645.0), (255, 0, 0))

    def test_edge_roll_off(self):
        # 255 * 0.3 ** 0.8
        self.assertEqual(wavelength_to_rgb(380.0), (97, 0, 97))
        self.assertEqual(wavelength_to_rgb(780.0), (97, 0, 0))

    def test_invisible(self):
        self.assertEqual(wavelength_to_rgb(379.9), (0, 0, 0))
        self.assertEqual(wavelength_to_rgb(1000.0), (0, 0, 0))


class TestFrequencyColor(unittest.TestCase):
    def test_visible_input(self):
        self.assertNotEqual(frequency_to_rgb(0.5e15), (0, 0, 0))

    def test_octaves_share_color(self):
        self.assertEqual(frequency_to_hex(432.0), frequency_to_hex(864.0))

    def test_hex(self):
        self.assertEqual(rgb_to_hex((255, 10, 0)), "#FF0A00")


if __name__ == "__main__":
    unittest.main()
