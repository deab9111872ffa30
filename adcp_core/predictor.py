"""
AdcpPredictor - main deployment predictor class.
"""

import logging
from typing import Dict, Optional

from .burst_model import BurstModel
from .config_resolver import ConfigurationResolver
from .data_volume import DataVolumeModel
from .dto import (BurstPredictionResult, DeploymentConfiguration, PredictionResult,
                  ResolveScope, SamplingGeometry, TransmitPulseType)
from .frequency_table import FrequencyTableSet
from .power_model import PowerModel
from .precision_model import VelocityPrecisionModel
from .range_model import RangeModel
from .sonar_equation import SonarEquation
from .validation import validate_configuration
from .water_model import WaterModel


class AdcpPredictor:
    """
    ADCP deployment predictor.

    Coordinates the range, precision, power and data volume models for
    continuous deployments and the burst model for waves deployments.
    Holds no state between predictions.
    """

    def __init__(self, data_provider=None):
        """
        Initialize predictor.

        Args:
            data_provider: Data provider (DATA module), default tables if None
        """
        if data_provider is None:
            from adcp_data import DataProvider
            data_provider = DataProvider()

        self.data_provider = data_provider
        self.tables = FrequencyTableSet(data_provider.get_frequency_tables())
        self.resolver = ConfigurationResolver(data_provider)
        self.range_model = RangeModel(self.tables)
        self.precision_model = VelocityPrecisionModel()
        self.power_model = PowerModel(self.tables)
        self.burst_model = BurstModel(data_provider)

        self.logger = logging.getLogger(__name__)

    def resolve(self, variant_code: Optional[str] = None, overrides: Optional[Dict] = None,
                scope: ResolveScope = ResolveScope.FULL) -> DeploymentConfiguration:
        """Resolves a configuration, see ConfigurationResolver.resolve."""
        return self.resolver.resolve(variant_code, overrides, scope)

    def sampling_geometry(self, config: DeploymentConfiguration, flags=None) -> SamplingGeometry:
        """
        Receiver sampling of a configuration.

        Args:
            config: Deployment configuration
            flags: Table selection flags (computed if None)

        Returns:
            SamplingGeometry
        """
        xdcr = config.transducer
        wp = config.water_profile
        if flags is None:
            flags = self.tables.selection_flags(xdcr.frequency)

        sampling = self.tables.selected_sum(
            flags, [t.sampling_contribution(xdcr.cycles_per_element) for t in self.tables])
        sample_rate = xdcr.frequency * sampling
        mps = SonarEquation.meters_per_sample(xdcr.beam_angle, xdcr.speed_of_sound, sample_rate)
        bin_samples = SonarEquation.bin_samples(wp.bin_size, mps)
        lag_samples = SonarEquation.lag_samples(wp.lag_length, mps)

        return SamplingGeometry(
            sample_rate=sample_rate,
            meters_per_sample=mps,
            bin_samples=bin_samples,
            lag_samples=lag_samples,
            code_repeats=SonarEquation.code_repeats(bin_samples, lag_samples),
            bin_time=SonarEquation.samples_to_time(bin_samples, sample_rate),
            lag_time=SonarEquation.samples_to_time(lag_samples, sample_rate),
        )

    @staticmethod
    def first_bin_position(config: DeploymentConfiguration, sampling: SamplingGeometry) -> float:
        """Distance from the transducer to the center of the first bin, m."""
        wp = config.water_profile
        if wp.transmit_pulse_type == TransmitPulseType.NARROWBAND:
            return wp.blank + (2.0 * wp.bin_size + 0.05) / 2.0
        if wp.transmit_pulse_type > TransmitPulseType.BROADBAND:
            return wp.blank + wp.bin_size
        return wp.blank + (sampling.lag_samples * (sampling.code_repeats - 1.0) * sampling.meters_per_sample
                           + 2.0 * wp.bin_size + wp.lag_length) / 2.0

    def predict_continuous(self, config: DeploymentConfiguration) -> PredictionResult:
        """
        Predicts a continuous deployment.

        Args:
            config: Deployment configuration

        Returns:
            PredictionResult
        """
        xdcr = config.transducer
        self.logger.info(f"Starting prediction: code={config.hardware_code}, "
                         f"frequency={xdcr.frequency:.2f}Hz, {config.deployment.duration_days} days")

        flags = self.tables.selection_flags(xdcr.frequency)
        selected = self.tables.selected(xdcr.frequency)
        if selected is None:
            self.logger.warning(f"Frequency {xdcr.frequency}Hz is below every analysis table")

        wavelength = SonarEquation.wavelength(xdcr.speed_of_sound, xdcr.frequency)
        di = SonarEquation.directivity_index(xdcr.beam_diameter, wavelength)

        absorption = None
        if config.water.absorption_enabled:
            water = config.water
            absorption = WaterModel.calculate_absorption(xdcr.frequency, xdcr.speed_of_sound,
                                                         water.salinity, water.temperature, water.depth)
            self.logger.debug(f"Water absorption: {absorption:.4f}dB/m")

        sampling = self.sampling_geometry(config, flags)
        self.logger.debug(f"Sampling: {sampling.model_dump()}")

        xmt_scale = RangeModel.transmit_scale(config, sampling.lag_samples)
        beam_transmit_power_profile = xmt_scale * self.tables.selected_sum(
            flags, [t.transmit_watts for t in self.tables])

        ranges = self.range_model.calculate(config, flags, wavelength, di, beam_transmit_power_profile,
                                            absorption)
        precision = self.precision_model.calculate(config, sampling, wavelength)
        power = self.power_model.calculate(config, flags, sampling, beam_transmit_power_profile,
                                           ranges['bottom_track_ranges'])

        ensemble_size = DataVolumeModel.ensemble_size_bytes(config)
        data_size = DataVolumeModel.data_size_bytes(power['number_of_ensembles'], ensemble_size,
                                                    config.is_burst_mode,
                                                    BurstModel.recorded_bursts(config),
                                                    BurstModel.bytes_per_burst(config))

        wp = config.water_profile
        cpe = xdcr.cycles_per_element
        result = PredictionResult(
            profile_range=ranges['profile_range'],
            bottom_track_range=ranges['bottom_track_range'],
            range_reduction=ranges['range_reduction'],
            first_bin_position=self.first_bin_position(config, sampling),
            configured_profile_extent=wp.blank + wp.bin_size * wp.num_bins,
            standard_deviation=precision['standard_deviation'],
            broadband_standard_deviation=precision['broadband'],
            narrowband_standard_deviation=precision['narrowband'],
            max_velocity=precision['max_velocity'],
            number_of_ensembles=power['number_of_ensembles'],
            ensemble_size_bytes=ensemble_size,
            data_size_bytes=data_size,
            burst_mode=config.is_burst_mode,
            power=power['power'],
            total_power=power['power'].total,
            actual_battery_power=power['actual_battery_power'],
            number_of_battery_packs=power['number_of_battery_packs'],
            selected_table_frequency=selected.frequency if selected is not None else None,
            wavelength=wavelength,
            directivity_index=di,
            absorption=absorption if absorption is not None else 0.0,
            sampling=sampling,
            time_between_pings=power['time_between_pings'],
            profile_time=power['profile_time'],
            transmit_code_time=power['transmit_code_time'],
            bottom_track_time=power['bottom_track_time'],
            percent_bandwidth=100.0 / cpe if cpe else 0.0,
        )

        warnings = validate_configuration(config, result)
        for warning in warnings:
            self.logger.warning(warning)

        self.logger.info(f"Prediction: range={result.profile_range:.1f}m, "
                         f"sd={result.standard_deviation:.4f}m/s, energy={result.total_power:.2f}Wh, "
                         f"packs={result.number_of_battery_packs:.2f}")
        return result.model_copy(update={'warnings': warnings})

    def predict_burst(self, config: DeploymentConfiguration) -> BurstPredictionResult:
        """
        Predicts a burst (waves) deployment.

        Args:
            config: Deployment configuration with burst settings

        Returns:
            BurstPredictionResult
        """
        return self.burst_model.predict(config)


_default_predictor: Optional[AdcpPredictor] = None


def _get_default_predictor() -> AdcpPredictor:
    global _default_predictor
    if _default_predictor is None:
        _default_predictor = AdcpPredictor()
    return _default_predictor


def resolve_configuration(variant_code: Optional[str] = None, overrides: Optional[Dict] = None,
                          scope: ResolveScope = ResolveScope.FULL) -> DeploymentConfiguration:
    """Resolves a deployment configuration from a hardware variant code."""
    return _get_default_predictor().resolve(variant_code, overrides, scope)


def predict_continuous(config: DeploymentConfiguration) -> PredictionResult:
    """Predicts a continuous deployment with the default tables."""
    return _get_default_predictor().predict_continuous(config)


def predict_burst(config: DeploymentConfiguration) -> BurstPredictionResult:
    """Predicts a burst deployment with the default tables."""
    return _get_default_predictor().predict_burst(config)
