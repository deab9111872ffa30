"""
RangeModel - water profile and bottom track range prediction.
"""

import logging
from typing import Dict, List, Optional

from .dto import BottomTrackMode, DeploymentConfiguration, TransmitPulseType
from .frequency_table import FrequencyTableSet
from .sonar_equation import SonarEquation


class RangeModel:
    """
    Predicts profiling and bottom track range from the analysis tables.

    Narrowband water profiling gains 20 reference bins, long range
    narrowband bottom tracking gains 15. Bottom track range is two way.
    With a water absorption given, the reference ranges are corrected
    for it first.
    """

    NARROWBAND_BONUS_BINS = 20.0
    LONG_RANGE_BONUS_BINS = 15.0

    def __init__(self, tables: FrequencyTableSet):
        self.tables = tables
        self.logger = logging.getLogger(__name__)

    def water_profile_ranges(self, config: DeploymentConfiguration, flags: List[int],
                             wavelength: float, directivity_index: float,
                             absorption: Optional[float] = None) -> List[float]:
        """
        Per-table water profile range, already weighted by the selection flags.

        Args:
            config: Deployment configuration
            flags: Table selection flags
            wavelength: Wavelength, m
            directivity_index: DI of the configured transducer, dB
            absorption: Water absorption, dB/m (None for the uncorrected reference range)

        Returns:
            Range contribution of every table, m
        """
        wp = config.water_profile
        xdcr = config.transducer
        bonus = self.NARROWBAND_BONUS_BINS if wp.transmit_pulse_type == TransmitPulseType.NARROWBAND else 0.0

        ranges = []
        for flag, table in zip(flags, self.tables):
            value = 0.0
            if wp.enabled:
                gain = table.range_gain(wp.bin_size, xdcr.cycles_per_element, directivity_index, wavelength)
                value = table.profile_range(gain, xdcr.beam_angle, bonus, absorption)
            ranges.append(flag * value)
        return ranges

    def bottom_track_ranges(self, config: DeploymentConfiguration, flags: List[int],
                            wavelength: float, directivity_index: float,
                            absorption: Optional[float] = None) -> List[float]:
        """Per-table bottom track range, weighted by the selection flags, m."""
        bt = config.bottom_track
        xdcr = config.transducer
        bonus = self.LONG_RANGE_BONUS_BINS if bt.mode == BottomTrackMode.NARROWBAND_LONG_RANGE else 0.0

        ranges = []
        for flag, table in zip(flags, self.tables):
            value = 0.0
            if bt.enabled:
                gain = table.range_gain(config.water_profile.bin_size, xdcr.cycles_per_element,
                                        directivity_index, wavelength)
                value = 2.0 * table.profile_range(gain, xdcr.beam_angle, bonus, absorption)
            ranges.append(flag * value)
        return ranges

    @staticmethod
    def transmit_scale(config: DeploymentConfiguration, lag_samples: int) -> float:
        """
        Fraction of the full transmit power used by water profile pings.

        Returns:
            1 for narrowband, (lag-1)/lag with broadband power, else 1/lag
        """
        if config.water_profile.transmit_pulse_type == TransmitPulseType.NARROWBAND:
            return 1.0
        if lag_samples == 0:
            return 0.0
        if config.transducer.broadband_power:
            return (lag_samples - 1.0) / lag_samples
        return 1.0 / lag_samples

    def range_reduction(self, flags: List[int], beam_transmit_power_profile: float) -> float:
        """
        Range lost by transmitting less than the full table wattage, m.

        Args:
            flags: Table selection flags
            beam_transmit_power_profile: Scaled water profile transmit power, W

        Returns:
            10*log10(profile power / table wattage) * reference bins + 1 (0 without a table)
        """
        transmit_watts = self.tables.selected_sum(flags, [t.transmit_watts for t in self.tables])
        reference_bins = self.tables.selected_sum(flags, [t.reference_bin for t in self.tables])
        if transmit_watts == 0:
            return 0.0
        return SonarEquation.decibel_ratio(beam_transmit_power_profile, transmit_watts) * reference_bins + 1.0

    def calculate(self, config: DeploymentConfiguration, flags: List[int], wavelength: float,
                  directivity_index: float, beam_transmit_power_profile: float,
                  absorption: Optional[float] = None) -> Dict:
        """
        Calculates the aggregate ranges.

        Returns:
            Dictionary with profile_range, bottom_track_range and range_reduction, m
        """
        wp_ranges = self.water_profile_ranges(config, flags, wavelength, directivity_index, absorption)
        bt_ranges = self.bottom_track_ranges(config, flags, wavelength, directivity_index, absorption)
        reduction = self.range_reduction(flags, beam_transmit_power_profile)

        profile_range = 0.0
        for value in wp_ranges:
            profile_range += value
        profile_range += reduction

        bottom_track_range = 0.0
        for value in bt_ranges:
            bottom_track_range += value

        self.logger.debug(f"Range: profile={profile_range:.2f}m (reduction {reduction:.2f}m), "
                          f"bottom track={bottom_track_range:.2f}m")

        return {
            'profile_range': profile_range,
            'bottom_track_range': bottom_track_range,
            'range_reduction': reduction,
            'bottom_track_ranges': bt_ranges,
        }
