"""
VelocityPrecisionModel - broadband and narrowband velocity standard deviation.
"""

import numpy as np
from typing import Dict

from .dto import DeploymentConfiguration, SamplingGeometry, TransmitPulseType
from .sonar_equation import SonarEquation


class VelocityPrecisionModel:
    """
    Velocity precision of a single ensemble.

    Broadband precision follows the coded pulse correlation model,
    narrowband precision follows the pulse length model. Both return
    horizontal (system) values for slanted beams and radial values for
    vertical beams.
    """

    @staticmethod
    def ambiguity_frequency(sampling: SamplingGeometry) -> float:
        """Broadband ambiguity frequency UaHz = sample rate / (2 * lag samples), Hz."""
        if sampling.lag_samples == 0:
            return 0.0
        return sampling.sample_rate / (2.0 * sampling.lag_samples)

    @staticmethod
    def ambiguity_radial_velocity(sampling: SamplingGeometry, speed_of_sound: float, frequency: float) -> float:
        """Broadband ambiguity velocity along the beam, m/s."""
        if frequency == 0:
            return 0.0
        return VelocityPrecisionModel.ambiguity_frequency(sampling) * speed_of_sound / (2.0 * frequency)

    @staticmethod
    def max_velocity(ua_radial: float, beam_angle: float) -> float:
        """Maximum unambiguous horizontal velocity, m/s."""
        if beam_angle == 0:
            return ua_radial
        return float(ua_radial / np.sin(SonarEquation.beam_angle_radian(beam_angle)))

    @staticmethod
    def correlation(config: DeploymentConfiguration, code_repeats: int) -> float:
        """
        Expected correlation (rho).

        Coded modes lose correlation to the code repeats and the SNR,
        pulse-to-pulse modes only to the environment.

        Args:
            config: Deployment configuration
            code_repeats: Code repeats in a bin

        Returns:
            Correlation, 0..1
        """
        xdcr = config.transducer
        if config.water_profile.transmit_pulse_type < TransmitPulseType.BROADBAND_PULSE_TO_PULSE:
            if code_repeats == 0 or xdcr.snr == 0:
                return 0.0
            snr_linear = 10.0 ** (-xdcr.snr / 10.0)
            return xdcr.beta * ((code_repeats - 1.0) / code_repeats) / (1.0 + snr_linear)
        return xdcr.beta

    @staticmethod
    def broadband_radial_std_dev(sampling: SamplingGeometry, rho: float) -> float:
        """Broadband radial standard deviation, m/s."""
        if sampling.lag_samples == 0 or sampling.bin_samples == 0 or rho == 0:
            return 0.0
        return float(0.034 * (118.0 / sampling.lag_samples)
                     * np.sqrt(14.0 / sampling.bin_samples)
                     * (rho / 0.5) ** -2.0)

    @staticmethod
    def broadband_system_std_dev(radial: float, beam_angle: float, pings: int) -> float:
        """Broadband horizontal standard deviation averaged over the pings, m/s."""
        if pings == 0:
            return 0.0
        if beam_angle == 0:
            return radial
        angle = SonarEquation.beam_angle_radian(beam_angle)
        return float(radial / np.sqrt(pings) / np.sqrt(2.0) / np.sin(angle))

    @staticmethod
    def narrowband_pulse_time(bin_size: float, speed_of_sound: float, beam_angle: float) -> float:
        """Narrowband transmit time Ta, s."""
        angle = SonarEquation.beam_angle_radian(beam_angle)
        if speed_of_sound == 0 or angle == 0:
            return 0.0
        return float(2.0 * bin_size / speed_of_sound / np.cos(angle))

    @staticmethod
    def narrowband_radial_std_dev(config: DeploymentConfiguration, wavelength: float) -> float:
        """
        Narrowband radial standard deviation.

        Args:
            config: Deployment configuration
            wavelength: Wavelength, m

        Returns:
            Standard deviation, m/s
        """
        xdcr = config.transducer
        ta = VelocityPrecisionModel.narrowband_pulse_time(config.water_profile.bin_size,
                                                          xdcr.speed_of_sound, xdcr.beam_angle)
        pulse_length = 0.5 * xdcr.speed_of_sound * ta
        if pulse_length == 0 or xdcr.snr == 0:
            return 0.0
        snr_linear = 10.0 ** (xdcr.snr / 10.0)
        return float(xdcr.nb_fudge
                     * (xdcr.speed_of_sound * wavelength / (8.0 * np.pi * pulse_length))
                     * np.sqrt(1.0 + 36.0 / snr_linear + 30.0 / snr_linear ** 2))

    @staticmethod
    def narrowband_system_std_dev(radial: float, beam_angle: float, pings: int) -> float:
        """Narrowband horizontal standard deviation averaged over the pings, m/s."""
        if pings == 0 or beam_angle == 0:
            return 0.0
        angle = SonarEquation.beam_angle_radian(beam_angle)
        return float(radial / np.sin(angle) / np.sqrt(2.0) / np.sqrt(pings))

    def calculate(self, config: DeploymentConfiguration, sampling: SamplingGeometry, wavelength: float) -> Dict:
        """
        Calculates both precision models and picks the one of the pulse type.

        Returns:
            Dictionary with broadband, narrowband, standard_deviation,
            rho and max_velocity
        """
        xdcr = config.transducer
        pings = config.water_profile.pings_per_ensemble

        rho = self.correlation(config, sampling.code_repeats)
        bb_radial = self.broadband_radial_std_dev(sampling, rho)
        broadband = self.broadband_system_std_dev(bb_radial, xdcr.beam_angle, pings)

        nb_radial = self.narrowband_radial_std_dev(config, wavelength)
        narrowband = self.narrowband_system_std_dev(nb_radial, xdcr.beam_angle, pings)

        if config.water_profile.transmit_pulse_type > TransmitPulseType.NARROWBAND:
            selected = broadband
        else:
            selected = narrowband

        ua_radial = self.ambiguity_radial_velocity(sampling, xdcr.speed_of_sound, xdcr.frequency)

        return {
            'rho': rho,
            'broadband': broadband,
            'narrowband': narrowband,
            'standard_deviation': selected,
            'max_velocity': self.max_velocity(ua_radial, xdcr.beam_angle),
        }
