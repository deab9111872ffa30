"""
SonarEquation - shared sonar equation and receiver sampling helpers.
"""

import numpy as np


class SonarEquation:
    """
    Closed-form helpers shared by the range, precision and power models.

    Every helper returns 0 instead of raising when a denominator is zero.
    """

    @staticmethod
    def wavelength(speed_of_sound: float, frequency: float) -> float:
        """
        Calculates the acoustic wavelength.

        Args:
            speed_of_sound: Speed of sound, m/s
            frequency: Frequency, Hz

        Returns:
            Wavelength, m (0 when frequency is 0)
        """
        if frequency == 0:
            return 0.0
        return speed_of_sound / frequency

    @staticmethod
    def beam_angle_radian(beam_angle: float) -> float:
        """Converts a beam angle in degrees to radians."""
        return beam_angle / 180.0 * np.pi

    @staticmethod
    def directivity_index(beam_diameter: float, wavelength: float) -> float:
        """
        Calculates the directivity index of a circular piston.

        DI = 20*log10(pi * D / lambda)

        Args:
            beam_diameter: Beam diameter, m
            wavelength: Wavelength, m

        Returns:
            Directivity index, dB (0 when the wavelength is 0)
        """
        if wavelength == 0:
            return 0.0
        ratio = np.pi * beam_diameter / wavelength
        if ratio <= 0:
            return 0.0
        return float(20.0 * np.log10(ratio))

    @staticmethod
    def decibel_ratio(numerator: float, denominator: float) -> float:
        """10*log10(numerator/denominator), 0 for a zero or negative ratio."""
        if denominator == 0:
            return 0.0
        ratio = numerator / denominator
        if ratio <= 0:
            return 0.0
        return float(10.0 * np.log10(ratio))

    @staticmethod
    def meters_per_sample(beam_angle: float, speed_of_sound: float, sample_rate: float) -> float:
        """
        Vertical distance covered by one receiver sample.

        Args:
            beam_angle: Beam angle, degrees
            speed_of_sound: Speed of sound, m/s
            sample_rate: Sample rate, Hz

        Returns:
            Meters per sample (0 when the sample rate is 0)
        """
        if sample_rate == 0:
            return 0.0
        return float(np.cos(SonarEquation.beam_angle_radian(beam_angle)) * speed_of_sound / 2.0 / sample_rate)

    @staticmethod
    def bin_samples(bin_size: float, meters_per_sample: float) -> int:
        """Number of samples in one bin, truncated."""
        if meters_per_sample == 0:
            return 0
        return int(bin_size / meters_per_sample)

    @staticmethod
    def lag_samples(lag_length: float, meters_per_sample: float) -> int:
        """Number of samples in the broadband lag, rounded to an even count."""
        if meters_per_sample == 0:
            return 0
        return 2 * int(int(lag_length / meters_per_sample + 1.0) / 2.0)

    @staticmethod
    def code_repeats(bin_samples: int, lag_samples: int) -> int:
        """Number of code repeats in a bin, at least 2."""
        if lag_samples == 0:
            return 0
        repeats = int(bin_samples / lag_samples) + 1
        if repeats < 2:
            return 2
        return repeats

    @staticmethod
    def samples_to_time(samples: float, sample_rate: float) -> float:
        """Duration of a number of samples, s."""
        if sample_rate == 0:
            return 0.0
        return samples / sample_rate
