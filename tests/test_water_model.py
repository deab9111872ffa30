"""
Tests for WaterModel.
"""

import unittest
import sys
from pathlib import Path

# Add root directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adcp_core.water_model import WaterModel

class TestWaterModel(unittest.TestCase):
    """Tests for the water model."""

    def test_sound_speed(self):
        """Sound speed in seawater at 15°C is about 1507 m/s."""
        c = WaterModel.calculate_sound_speed(15.0, 35.0, 10.0)

        self.assertGreater(c, 1500)
        self.assertLess(c, 1510)

    def test_sound_speed_increases_with_depth(self):
        shallow = WaterModel.calculate_sound_speed(10.0, 35.0, 0.0)
        deep = WaterModel.calculate_sound_speed(10.0, 35.0, 1000.0)

        self.assertGreater(deep, shallow)

    def test_fresh_water_is_slower(self):
        salt = WaterModel.calculate_sound_speed(10.0, 35.0, 5.0)
        fresh = WaterModel.calculate_sound_speed(10.0, 0.0, 5.0)

        self.assertLess(fresh, salt)

    def test_absorption_300khz(self):
        """Seawater absorption at 300 kHz is about 0.07 dB/m."""
        alpha = WaterModel.calculate_absorption(300000.0, 1490.0, 35.0, 10.0, 0.0)

        self.assertGreater(alpha, 0.06)
        self.assertLess(alpha, 0.09)

    def test_absorption_increases_with_frequency(self):
        low = WaterModel.calculate_absorption(75000.0, 1490.0, 35.0, 10.0, 0.0)
        high = WaterModel.calculate_absorption(1200000.0, 1490.0, 35.0, 10.0, 0.0)

        self.assertLess(low, high)
        self.assertGreater(high, 0.4)

    def test_absorption_decreases_with_depth(self):
        surface = WaterModel.calculate_absorption(300000.0, 1490.0, 35.0, 10.0, 0.0)
        deep = WaterModel.calculate_absorption(300000.0, 1490.0, 35.0, 10.0, 1000.0)

        self.assertLess(deep, surface)

    def test_absorption_degenerate_inputs(self):
        self.assertEqual(WaterModel.calculate_absorption(0.0, 1490.0, 35.0, 10.0, 0.0), 0.0)
        self.assertEqual(WaterModel.calculate_absorption(300000.0, 0.0, 35.0, 10.0, 0.0), 0.0)
        self.assertEqual(WaterModel.calculate_absorption(300000.0, 1490.0, 0.0, 10.0, 0.0), 0.0)
        self.assertEqual(WaterModel.calculate_absorption(300000.0, 1490.0, -1.0, 10.0, 0.0), 0.0)


if __name__ == '__main__':
    unittest.main()
