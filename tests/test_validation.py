"""
Tests for configuration plausibility checks.
"""

import unittest
import sys
from pathlib import Path

# Add root directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adcp_data import DataProvider
from adcp_core.config_resolver import ConfigurationResolver
from adcp_core.dto import DeploymentConfiguration
from adcp_core.predictor import AdcpPredictor
from adcp_core.validation import validate_configuration

class TestValidateConfiguration(unittest.TestCase):

    def setUp(self):
        """Initialize tests."""
        self.resolver = ConfigurationResolver(DataProvider())
        self.config = self.resolver.resolve('4')

    def override(self, overrides):
        return self.resolver.with_overrides(self.config, overrides)

    def test_default_is_plausible(self):
        self.assertEqual(validate_configuration(self.config), [])
        self.assertEqual(validate_configuration(DeploymentConfiguration()), [])

    def test_frequency_below_tables(self):
        warnings = validate_configuration(self.override({'transducer.frequency': 0.0}))

        self.assertEqual(len(warnings), 1)
        self.assertIn('below', warnings[0])

    def test_zero_ensemble_interval(self):
        warnings = validate_configuration(self.override({'deployment.ensemble_interval': 0.0}))

        self.assertTrue(any('CEI' in w for w in warnings))

    def test_absorption_needs_salinity(self):
        warnings = validate_configuration(self.override({'water': {'absorption_enabled': True, 'salinity': 0.0}}))

        self.assertEqual(len(warnings), 1)
        self.assertIn('Salinity', warnings[0])
        self.assertEqual(validate_configuration(self.override({'water.salinity': 0.0})), [])

    def test_lag_longer_than_bin(self):
        warnings = validate_configuration(self.override({'water_profile': {'bin_size': 0.25, 'lag_length': 0.5}}))

        self.assertTrue(any('Lag length' in w for w in warnings))

    def test_disabled_profile_skips_profile_checks(self):
        config = self.override({'water_profile': {'enabled': False, 'num_bins': 0}})

        self.assertEqual(validate_configuration(config), [])

    def test_burst_longer_than_interval(self):
        config = self.override({'burst': {'ensembles_per_burst': 100, 'burst_interval': 10.0}})
        warnings = validate_configuration(config)

        self.assertTrue(any('exceeds the burst interval' in w for w in warnings))

    def test_prediction_checks(self):
        result = AdcpPredictor(DataProvider()).predict_continuous(self.config)
        result = result.model_copy(update={'profile_range': 50.0, 'number_of_battery_packs': 2.5})
        warnings = validate_configuration(self.config, result)

        self.assertTrue(any(w.startswith('Configured bins reach') for w in warnings))
        self.assertTrue(any('battery packs' in w for w in warnings))

    def test_prediction_attaches_warnings(self):
        result = AdcpPredictor(DataProvider()).predict_continuous(self.override({'water_profile.num_bins': 100}))

        self.assertTrue(any(w.startswith('Configured bins reach') for w in result.warnings))


if __name__ == '__main__':
    unittest.main()
