"""
Tests for the continuous mode AdcpPredictor.
"""

import unittest
import numpy as np
import sys
from pathlib import Path

# Add root directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adcp_data import DataProvider
from adcp_core.data_volume import DataVolumeModel
from adcp_core.dto import BottomTrackMode, DataSetsDTO, DeploymentConfiguration, TransmitPulseType
from adcp_core.predictor import AdcpPredictor, predict_continuous, resolve_configuration
from adcp_core.water_model import WaterModel


def _numbers(value):
    """Yields every number in a dumped model."""
    if isinstance(value, dict):
        for item in value.values():
            yield from _numbers(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _numbers(item)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        yield value


class PredictorTestCase(unittest.TestCase):

    def setUp(self):
        """Initialize tests."""
        self.predictor = AdcpPredictor(DataProvider())
        self.config = self.predictor.resolve('4')

    def configure(self, **sections):
        return self.predictor.resolver.with_overrides(self.config, sections)

    def assertAllFinite(self, result):
        for value in _numbers(result.model_dump()):
            self.assertTrue(np.isfinite(value), f"non finite value {value}")


class TestSampling(PredictorTestCase):
    """Tests for the receiver sampling geometry."""

    def test_default_sampling(self):
        sampling = self.predictor.sampling_geometry(self.config)

        self.assertAlmostEqual(sampling.sample_rate, 311281.25 / 12.0, places=6)
        self.assertEqual(sampling.bin_samples, 148)
        self.assertEqual(sampling.lag_samples, 18)
        self.assertEqual(sampling.code_repeats, 9)
        self.assertAlmostEqual(sampling.bin_time, 148 / sampling.sample_rate)

    def test_zero_frequency(self):
        """Zero frequency gives zero wavelength and DI instead of a log domain error."""
        config = self.configure(transducer={'frequency': 0.0})
        result = self.predictor.predict_continuous(config)

        self.assertEqual(result.wavelength, 0.0)
        self.assertEqual(result.directivity_index, 0.0)
        self.assertEqual(result.sampling.sample_rate, 0.0)
        self.assertEqual(result.profile_range, 0.0)
        self.assertEqual(result.bottom_track_range, 0.0)
        self.assertAllFinite(result)


class TestRange(PredictorTestCase):
    """Tests for the range prediction."""

    def test_reference_configuration_range(self):
        result = self.predictor.predict_continuous(self.config)
        reduction = 10.0 * np.log10(17.0 / 18.0) * 4.0 + 1.0

        self.assertAlmostEqual(result.range_reduction, reduction)
        self.assertAlmostEqual(result.profile_range, 100.0 + reduction)
        self.assertAlmostEqual(result.bottom_track_range, 200.0)
        self.assertEqual(result.selected_table_frequency, 275000.0)

    def test_narrowband_range(self):
        config = self.configure(water_profile={'transmit_pulse_type': TransmitPulseType.NARROWBAND})
        result = self.predictor.predict_continuous(config)

        self.assertAlmostEqual(result.profile_range, 181.0)

    def test_long_range_bottom_track(self):
        config = self.configure(bottom_track={'mode': BottomTrackMode.NARROWBAND_LONG_RANGE})
        result = self.predictor.predict_continuous(config)

        self.assertAlmostEqual(result.bottom_track_range, 320.0)

    def test_disabled_modes(self):
        config = self.configure(water_profile={'enabled': False}, bottom_track={'enabled': False})
        result = self.predictor.predict_continuous(config)

        self.assertAlmostEqual(result.profile_range, result.range_reduction)
        self.assertEqual(result.bottom_track_range, 0.0)

    def test_below_lowest_table(self):
        """No table is selected below 34375 Hz, ranges and table sums are 0."""
        config = self.configure(transducer={'frequency': 20000.0})
        result = self.predictor.predict_continuous(config)

        self.assertIsNone(result.selected_table_frequency)
        self.assertEqual(result.profile_range, 0.0)
        self.assertEqual(result.bottom_track_range, 0.0)
        self.assertEqual(result.range_reduction, 0.0)
        self.assertEqual(result.power.transmit, 0.0)
        self.assertEqual(result.power.capacitor_charge, 0.0)
        self.assertTrue(any('below' in w for w in result.warnings))

    def test_absorption_corrected_range(self):
        config = self.configure(water={'absorption_enabled': True, 'temperature': 10.0,
                                       'salinity': 35.0, 'depth': 0.0})
        base = self.predictor.predict_continuous(self.config)
        result = self.predictor.predict_continuous(config)
        alpha = WaterModel.calculate_absorption(311281.25, 1490.0, 35.0, 10.0, 0.0)

        self.assertAlmostEqual(result.absorption, alpha)
        self.assertAlmostEqual(result.profile_range - base.profile_range, (0.073 - alpha) * 100.0)
        self.assertAlmostEqual(result.bottom_track_range - base.bottom_track_range, 2.0 * (0.073 - alpha) * 100.0)

    def test_absorption_off_by_default(self):
        config = self.configure(water={'temperature': 25.0, 'salinity': 20.0})
        result = self.predictor.predict_continuous(config)

        self.assertEqual(result.absorption, 0.0)
        self.assertAlmostEqual(result.profile_range, self.predictor.predict_continuous(self.config).profile_range)

    def test_absorption_without_salinity(self):
        """Zero salinity gives zero absorption, the full table absorption scale is gained."""
        config = self.configure(water={'absorption_enabled': True, 'salinity': 0.0})
        base = self.predictor.predict_continuous(self.config)
        result = self.predictor.predict_continuous(config)

        self.assertEqual(result.absorption, 0.0)
        self.assertAlmostEqual(result.profile_range - base.profile_range, 7.3)
        self.assertTrue(any('Salinity' in w for w in result.warnings))

    def test_first_bin_position(self):
        result = self.predictor.predict_continuous(self.config)
        s = result.sampling
        expected = 0.4 + (s.lag_samples * (s.code_repeats - 1) * s.meters_per_sample + 2 * 4.0 + 0.5) / 2.0

        self.assertAlmostEqual(result.first_bin_position, expected)
        self.assertAlmostEqual(result.configured_profile_extent, 0.4 + 4.0 * 30)

        nb = self.predictor.predict_continuous(
            self.configure(water_profile={'transmit_pulse_type': TransmitPulseType.NARROWBAND}))
        self.assertAlmostEqual(nb.first_bin_position, 0.4 + (8.0 + 0.05) / 2.0)


class TestPrecision(PredictorTestCase):
    """Tests for the velocity precision."""

    def test_broadband_standard_deviation(self):
        result = self.predictor.predict_continuous(self.config)
        angle = np.deg2rad(20.0)
        rho = (8.0 / 9.0) / (1.0 + 10.0 ** -3.0)
        radial = 0.034 * (118.0 / 18) * np.sqrt(14.0 / 148) * (rho / 0.5) ** -2.0

        self.assertAlmostEqual(result.standard_deviation, radial / np.sqrt(2.0) / np.sin(angle))
        self.assertEqual(result.standard_deviation, result.broadband_standard_deviation)

    def test_narrowband_is_selected_for_narrowband(self):
        config = self.configure(water_profile={'transmit_pulse_type': TransmitPulseType.NARROWBAND})
        result = self.predictor.predict_continuous(config)

        self.assertGreater(result.narrowband_standard_deviation, 0.0)
        self.assertEqual(result.standard_deviation, result.narrowband_standard_deviation)

    def test_more_pings_improve_precision(self):
        one = self.predictor.predict_continuous(self.config)
        four = self.predictor.predict_continuous(self.configure(water_profile={'pings_per_ensemble': 4}))

        self.assertAlmostEqual(four.standard_deviation, one.standard_deviation / 2.0)

    def test_max_velocity(self):
        result = self.predictor.predict_continuous(self.config)
        sr = result.sampling.sample_rate
        expected = sr / (2.0 * 18) * 1490.0 / (2.0 * 311281.25) / np.sin(np.deg2rad(20.0))

        self.assertAlmostEqual(result.max_velocity, expected)

    def test_vertical_beam_uses_radial_values(self):
        result = self.predictor.predict_continuous(self.predictor.resolve('C'))

        self.assertGreater(result.standard_deviation, 0.0)
        self.assertGreater(result.max_velocity, 0.0)


class TestPower(PredictorTestCase):
    """Tests for the timing and energy budget."""

    def test_single_ping_has_no_time_between_pings(self):
        config = self.configure(water_profile={'pings_per_ensemble': 1, 'time_between_pings': 3.0})
        result = self.predictor.predict_continuous(config)

        self.assertEqual(result.time_between_pings, 0.0)

    def test_time_between_pings(self):
        config = self.configure(water_profile={'pings_per_ensemble': 2, 'time_between_pings': 3.0})
        self.assertEqual(self.predictor.predict_continuous(config).time_between_pings, 3.0)

        config = self.configure(water_profile={'pings_per_ensemble': 2, 'time_between_pings': 0.0})
        result = self.predictor.predict_continuous(config)
        self.assertAlmostEqual(result.time_between_pings, 30 * 148 / result.sampling.sample_rate)

    def test_breakdown_sums_to_total(self):
        result = self.predictor.predict_continuous(self.config)
        p = result.power
        parts = (p.bottom_track_transmit + p.bottom_track_receive + p.wakeup + p.init + p.transmit
                 + p.receive + p.save + p.sleep + p.capacitor_charge)

        self.assertAlmostEqual(parts, result.total_power)
        self.assertGreater(result.total_power, 0.0)

    def test_power_items(self):
        result = self.predictor.predict_continuous(self.config)
        p = result.power

        self.assertAlmostEqual(p.sleep, 0.00125 * 24.0)
        # CEI of 1 s keeps the system awake, a single wakeup
        self.assertAlmostEqual(p.wakeup, 0.4 * 1.8 / 3600.0)
        self.assertAlmostEqual(p.transmit, result.transmit_code_time * 50.0 * 17.0 / 18.0 * 4 * 86400 / 3600.0)
        self.assertAlmostEqual(result.transmit_code_time, 9 * result.sampling.lag_time)
        self.assertAlmostEqual(p.receive, result.profile_time * 4.8 * 86400 / 3600.0)

    def test_receive_doubles_at_high_frequency(self):
        result = self.predictor.predict_continuous(self.predictor.resolve('2'))

        self.assertAlmostEqual(result.power.receive, result.profile_time * 4.8 * 86400 / 3600.0 * 2.0)

    def test_battery(self):
        result = self.predictor.predict_continuous(self.config)
        actual = 440.0 * 0.85 - 0.05 * 1.0 / 365.0

        self.assertAlmostEqual(result.actual_battery_power, actual)
        self.assertAlmostEqual(result.number_of_battery_packs, result.total_power / actual)

    def test_zero_battery(self):
        config = self.configure(battery={'watt_hours': 0.0, 'self_discharge_per_year': 0.0})
        self.assertEqual(self.predictor.predict_continuous(config).number_of_battery_packs, 0.0)


class TestDataVolume(PredictorTestCase):
    """Tests for the ensemble size and data volume."""

    def test_reference_scenario(self):
        result = self.predictor.predict_continuous(self.config)

        self.assertEqual(result.number_of_ensembles, 86400)
        self.assertEqual(result.ensemble_size_bytes, 4396)
        self.assertEqual(result.data_size_bytes, 86400 * 4396)
        self.assertFalse(result.burst_mode)

    def test_ensemble_size_by_mode(self):
        sizes = {
            (True, False): 112 + 112 * 30 + 504 + 36,
            (False, True): 384 + 504 + 36,
            (False, False): 36 + 308,
        }
        for (wp, bt), expected in sizes.items():
            config = self.configure(water_profile={'enabled': wp}, bottom_track={'enabled': bt})
            self.assertEqual(self.predictor.predict_continuous(config).ensemble_size_bytes, expected)

    def test_more_bins_more_bytes(self):
        previous = 0
        for bins in (1, 2, 10, 30, 31, 100, 200):
            config = self.configure(water_profile={'num_bins': bins})
            size = self.predictor.predict_continuous(config).ensemble_size_bytes
            self.assertGreater(size, previous)
            previous = size

    def test_burst_mode_data_volume(self):
        config = self.configure(burst={'ensembles_per_burst': 10, 'burst_interval': 3600.0})
        result = self.predictor.predict_continuous(config)

        self.assertTrue(result.burst_mode)
        self.assertEqual(result.data_size_bytes, 24 * 10 * (616 + 4 + 32 + 30 * 112))

    def test_burst_mode_without_a_whole_burst(self):
        """Burst mode records bursts only, even when none fits in the deployment."""
        config = self.configure(burst={'ensembles_per_burst': 10, 'burst_interval': 200000.0})
        result = self.predictor.predict_continuous(config)

        self.assertTrue(result.burst_mode)
        self.assertEqual(result.data_size_bytes, 0)

    def test_burst_length_counts_towards_burst_spacing(self):
        config = self.configure(burst={'ensembles_per_burst': 1200, 'burst_interval': 3600.0})
        result = self.predictor.predict_continuous(config)

        # 86400 s / (1200 * 1 s + 3600 s)
        self.assertEqual(result.data_size_bytes, 18 * 1200 * (616 + 4 + 32 + 30 * 112))
        self.assertEqual(result.data_size_bytes, 86659200)

    def test_data_set_ensemble_size(self):
        config = self.configure(data_sets={'enabled': True})
        result = self.predictor.predict_continuous(config)

        self.assertEqual(result.ensemble_size_bytes, 4688)
        self.assertEqual(result.data_size_bytes, 86400 * 4688)

    def test_data_set_size_follows_beams(self):
        four_beam = DataVolumeModel.data_sets_size_bytes(30, 4, DataSetsDTO())
        vertical = DataVolumeModel.data_sets_size_bytes(30, 1, DataSetsDTO())

        self.assertEqual(four_beam, 4688)
        self.assertEqual(vertical, 1892)

    def test_data_set_selection(self):
        only_velocity = DataSetsDTO(**{name: name == 'beam_velocity' for name in DataSetsDTO.model_fields
                                       if name != 'enabled'})

        self.assertEqual(DataVolumeModel.data_sets_size_bytes(30, 4, only_velocity), 4 * (30 * 4 + 7) + 4 + 32)
        self.assertEqual(DataVolumeModel.data_sets_size_bytes(30, 4, DataSetsDTO(nmea=False)), 4688)

    def test_partial_burst_settings_use_ensembles(self):
        for burst in ({'ensembles_per_burst': 10, 'burst_interval': 0.0},
                      {'ensembles_per_burst': 0, 'burst_interval': 3600.0}):
            result = self.predictor.predict_continuous(self.configure(burst=burst))
            self.assertFalse(result.burst_mode)
            self.assertEqual(result.data_size_bytes, 86400 * 4396)


class TestDegenerateInputs(PredictorTestCase):
    """Zero denominators give zero results, never NaN, infinity or exceptions."""

    def test_zero_ensemble_interval(self):
        result = self.predictor.predict_continuous(self.configure(deployment={'ensemble_interval': 0.0}))

        self.assertEqual(result.number_of_ensembles, 0)
        self.assertEqual(result.data_size_bytes, 0)
        self.assertEqual(result.power.transmit, 0.0)
        self.assertAllFinite(result)

    def test_zero_sample_rate(self):
        result = self.predictor.predict_continuous(self.configure(transducer={'cycles_per_element': 0}))

        self.assertEqual(result.sampling.sample_rate, 0.0)
        self.assertEqual(result.sampling.meters_per_sample, 0.0)
        self.assertEqual(result.profile_time, 0.0)
        self.assertEqual(result.standard_deviation, 0.0)
        self.assertEqual(result.max_velocity, 0.0)
        self.assertEqual(result.percent_bandwidth, 0.0)
        self.assertAllFinite(result)

    def test_zero_lag_samples(self):
        result = self.predictor.predict_continuous(self.configure(water_profile={'lag_length': 0.0}))

        self.assertEqual(result.sampling.lag_samples, 0)
        self.assertEqual(result.sampling.code_repeats, 0)
        self.assertEqual(result.broadband_standard_deviation, 0.0)
        self.assertEqual(result.max_velocity, 0.0)
        self.assertAllFinite(result)

    def test_zero_bin_samples(self):
        result = self.predictor.predict_continuous(self.configure(water_profile={'bin_size': 0.0}))

        self.assertEqual(result.sampling.bin_samples, 0)
        self.assertEqual(result.broadband_standard_deviation, 0.0)
        self.assertAllFinite(result)

    def test_zero_pings(self):
        result = self.predictor.predict_continuous(self.configure(water_profile={'pings_per_ensemble': 0}))

        self.assertEqual(result.standard_deviation, 0.0)
        self.assertAllFinite(result)


class TestIdempotence(PredictorTestCase):

    def test_repeated_predictions_are_identical(self):
        first = self.predictor.predict_continuous(self.config)
        second = self.predictor.predict_continuous(self.config)

        self.assertEqual(first.model_dump(), second.model_dump())

    def test_module_functions(self):
        config = resolve_configuration('4')
        self.assertEqual(config.model_dump(), DeploymentConfiguration().model_dump())
        self.assertEqual(predict_continuous(config).model_dump(),
                         self.predictor.predict_continuous(config).model_dump())


if __name__ == '__main__':
    unittest.main()
