"""
FrequencyTable - the six fixed analysis tables of the deployment predictor.
"""

import numpy as np
from typing import Dict, List, Optional

from .sonar_equation import SonarEquation


class FrequencyTable:
    """
    One analysis frequency table.

    Holds the reference performance of a frequency band:
    - Reference range for a reference bin size
    - Reference beam angle and beam diameter
    - Transmit wattage, voltage and capacitor bank
    - Receiver sampling fraction at a reference cycles-per-element
    - Water absorption the reference range was measured in
    """

    def __init__(self, params: Dict):
        """
        Initialize frequency table.

        Args:
            params: Dictionary with table parameters
        """
        self.name = params.get('name', 'Unknown')
        self.frequency = float(params.get('frequency', 0.0))  # Hz
        self.capacitance_uf = float(params.get('capacitance_uf', 0.0))  # µF
        self.transmit_voltage = float(params.get('transmit_voltage', 0.0))  # V
        self.reference_bin = float(params.get('reference_bin', 0.0))  # m
        self.reference_range = float(params.get('reference_range', 0.0))  # m
        self.transmit_watts = float(params.get('transmit_watts', 0.0))  # W
        self.reference_beam_angle = float(params.get('reference_beam_angle', 0.0))  # degrees
        self.reference_beam_diameter = float(params.get('reference_beam_diameter', 0.0))  # m
        self.sampling = float(params.get('sampling', 0.0))
        self.reference_cpe = float(params.get('reference_cpe', 0.0))
        self.absorption_scale = float(params.get('absorption_scale', 0.0))  # dB/m

    def __repr__(self) -> str:
        return f"FrequencyTable({self.name}, {self.frequency:.0f} Hz)"

    def is_selected(self, frequency: float, upper_frequency: Optional[float] = None) -> bool:
        """
        Checks whether this table applies to a configured frequency.

        Args:
            frequency: Configured frequency, Hz
            upper_frequency: Frequency of the next higher table, Hz (None for the top table)

        Returns:
            True if frequency lies in [self.frequency, upper_frequency)
        """
        if upper_frequency is None:
            return frequency >= self.frequency
        return self.frequency <= frequency < upper_frequency

    def directivity_index(self, wavelength: float) -> float:
        """Directivity index of the reference transducer at the configured wavelength, dB."""
        return SonarEquation.directivity_index(self.reference_beam_diameter, wavelength)

    def sampling_contribution(self, cycles_per_element: float) -> float:
        """Sampling fraction scaled from the reference to the configured cycles-per-element."""
        if cycles_per_element == 0:
            return 0.0
        return self.sampling * self.reference_cpe / cycles_per_element

    def leakage_current(self) -> float:
        """Capacitor bank leakage current, µA."""
        return float(3.0 * np.sqrt(2.0 * 1e-6 * self.capacitance_uf * self.transmit_voltage))

    def range_scale(self, beam_angle: float) -> float:
        """Ratio of vertical range at the configured beam angle to the reference angle."""
        reference = np.cos(SonarEquation.beam_angle_radian(self.reference_beam_angle))
        return float(np.cos(SonarEquation.beam_angle_radian(beam_angle)) / reference)

    def range_gain(self, bin_size: float, cycles_per_element: float,
                   directivity_index: float, wavelength: float) -> float:
        """
        Gain relative to the reference configuration, dB.

        Args:
            bin_size: Configured bin size, m
            cycles_per_element: Configured cycles per element
            directivity_index: DI of the configured transducer, dB
            wavelength: Wavelength, m

        Returns:
            Bin size gain + DI difference - bandwidth penalty (0 when undefined)
        """
        if self.reference_bin == 0 or cycles_per_element == 0:
            return 0.0
        bin_gain = SonarEquation.decibel_ratio(bin_size, self.reference_bin)
        bandwidth = SonarEquation.decibel_ratio(self.reference_cpe, cycles_per_element)
        return bin_gain + directivity_index - self.directivity_index(wavelength) - bandwidth

    def absorption_range(self, absorption: float) -> float:
        """
        Reference range corrected for the water absorption, m.

        Args:
            absorption: Water absorption at the configured frequency, dB/m

        Returns:
            Reference range grown by the absorption below the table's, shrunk above it
        """
        return self.reference_range + (self.absorption_scale - absorption) * self.reference_range

    def profile_range(self, gain: float, beam_angle: float, bonus_bins: float = 0.0,
                      absorption: Optional[float] = None) -> float:
        """
        Range of one beam, m.

        Args:
            gain: Range gain, dB
            beam_angle: Configured beam angle, degrees
            bonus_bins: Extra reference bins (narrowband or long range modes)
            absorption: Water absorption, dB/m (None keeps the reference range)
        """
        reference_range = self.reference_range
        if absorption is not None:
            reference_range = self.absorption_range(absorption)
        return self.range_scale(beam_angle) * (reference_range
                                               + self.reference_bin * gain
                                               + bonus_bins * self.reference_bin)


class FrequencyTableSet:
    """
    The analysis tables ordered from highest to lowest frequency.

    Per-table quantities are always evaluated for every table, multiplied
    by the table's 0/1 selection flag and summed in table order.
    """

    def __init__(self, tables: List[Dict]):
        """
        Args:
            tables: Table parameter dictionaries (any order)
        """
        self.tables = [FrequencyTable(p) for p in sorted(tables, key=lambda t: t['frequency'], reverse=True)]

    def __len__(self) -> int:
        return len(self.tables)

    def __iter__(self):
        return iter(self.tables)

    def selection_flags(self, frequency: float) -> List[int]:
        """
        Selection flags for a configured frequency.

        Returns:
            One 0/1 flag per table; at most one flag is 1
        """
        flags = []
        upper = None
        for table in self.tables:
            flags.append(1 if table.is_selected(frequency, upper) else 0)
            upper = table.frequency
        return flags

    def selected(self, frequency: float) -> Optional[FrequencyTable]:
        """Returns the selected table, None below the lowest table."""
        for flag, table in zip(self.selection_flags(frequency), self.tables):
            if flag:
                return table
        return None

    @staticmethod
    def selected_sum(flags: List[int], values: List[float]) -> float:
        """Sums per-table values weighted by their selection flags."""
        total = 0.0
        for flag, value in zip(flags, values):
            total += flag * value
        return total
