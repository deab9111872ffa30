"""
PowerModel - ping timing and deployment energy budget.
"""

import logging
import numpy as np
from typing import Dict, List

from .dto import DeploymentConfiguration, PowerBreakdownDTO, SamplingGeometry, TransmitPulseType
from .frequency_table import FrequencyTableSet


class PowerModel:
    """
    Energy budget of a continuous deployment.

    Timing:
    - Time between pings, profile (receive) time, transmit code time
    - Bottom track time from the predicted bottom track range

    Energy (Wh):
    - Water profile and bottom track transmit/receive
    - Wakeup, init, save and sleep
    - Capacitor charge replenishment
    """

    SECONDS_PER_HOUR = 3600.0
    BOTTOM_TRACK_SECONDS_PER_METER = 0.0015
    BOTTOM_TRACK_TRANSMIT_DUTY = 0.2
    CAPACITOR_CHARGE_FRACTION = 0.03
    CAPACITOR_LEAKAGE_FACTOR = 1.3
    # Receive draw doubles above these frequencies
    RECEIVE_DOUBLE_FREQUENCY = 700000.0
    BOTTOM_TRACK_RECEIVE_DOUBLE_FREQUENCY = 600000.0

    def __init__(self, tables: FrequencyTableSet):
        self.tables = tables
        self.logger = logging.getLogger(__name__)

    # ---- Counts ----

    @staticmethod
    def number_of_ensembles(config: DeploymentConfiguration) -> int:
        """Ensembles in the deployment, round(duration / CEI)."""
        interval = config.deployment.ensemble_interval
        if interval == 0:
            return 0
        return int(round(config.deployment.duration_days * 24.0 * 3600.0 / interval))

    @staticmethod
    def number_of_wakeups(config: DeploymentConfiguration, ensembles: int) -> int:
        """The system only sleeps between ensembles (or pings) longer than a second."""
        if config.deployment.ensemble_interval > 1.0:
            if config.water_profile.time_between_pings > 1.0:
                return ensembles * config.water_profile.pings_per_ensemble
            return ensembles
        return 1

    @staticmethod
    def bottom_track_pings(config: DeploymentConfiguration, ensembles: int) -> int:
        """Bottom track pings in the deployment."""
        if not config.bottom_track.enabled:
            return 0
        value = int(round(config.water_profile.pings_per_ensemble / 10.0))
        if value < 1:
            return ensembles
        return value * ensembles

    # ---- Timing ----

    @staticmethod
    def time_between_pings(config: DeploymentConfiguration, sampling: SamplingGeometry) -> float:
        """Water profile time between pings, s (0 for a single ping)."""
        wp = config.water_profile
        if sampling.sample_rate == 0 or wp.pings_per_ensemble == 1:
            return 0.0
        profile = wp.num_bins * sampling.bin_samples / sampling.sample_rate
        if profile > wp.time_between_pings:
            return profile
        return wp.time_between_pings

    @staticmethod
    def profile_time(config: DeploymentConfiguration, sampling: SamplingGeometry, time_between_pings: float) -> float:
        """Receive time of one ping, s."""
        wp = config.water_profile
        if sampling.sample_rate == 0:
            return 0.0
        if wp.pings_per_ensemble == 1 or time_between_pings > 1.0:
            return wp.num_bins * sampling.bin_samples / sampling.sample_rate
        return time_between_pings

    @staticmethod
    def transmit_code_time(config: DeploymentConfiguration, sampling: SamplingGeometry) -> float:
        """Transmit duration of one ping, s."""
        pulse_type = config.water_profile.transmit_pulse_type
        if pulse_type == TransmitPulseType.BROADBAND:
            if sampling.code_repeats < 3:
                return 2.0 * sampling.bin_time
            return sampling.code_repeats * sampling.lag_time
        if pulse_type == TransmitPulseType.NARROWBAND:
            return sampling.bin_time
        return 2.0 * sampling.bin_time

    def bottom_track_time(self, bottom_track_ranges: List[float]) -> float:
        """Bottom track ping duration from the two way range, s."""
        total = 0.0
        for value in bottom_track_ranges:
            total += value
        return self.BOTTOM_TRACK_SECONDS_PER_METER * total

    # ---- Battery ----

    @staticmethod
    def actual_battery_power(config: DeploymentConfiguration) -> float:
        """Usable energy of one battery pack over the deployment, Wh."""
        battery = config.battery
        return (battery.watt_hours * battery.derate
                - battery.self_discharge_per_year * config.deployment.duration_days / 365.0)

    @staticmethod
    def number_of_battery_packs(total_power: float, actual_battery_power: float) -> float:
        if actual_battery_power == 0:
            return 0.0
        return total_power / actual_battery_power

    # ---- Energy ----

    def calculate(self, config: DeploymentConfiguration, flags: List[int], sampling: SamplingGeometry,
                  beam_transmit_power_profile: float, bottom_track_ranges: List[float]) -> Dict:
        """
        Calculates the timing and the energy budget.

        Args:
            config: Deployment configuration
            flags: Table selection flags
            sampling: Receiver sampling geometry
            beam_transmit_power_profile: Scaled water profile transmit power, W
            bottom_track_ranges: Per-table bottom track range, m

        Returns:
            Dictionary with timing values, counts and a PowerBreakdownDTO
        """
        xdcr = config.transducer
        elec = config.electronics
        hour = self.SECONDS_PER_HOUR

        ensembles = self.number_of_ensembles(config)
        wakeups = self.number_of_wakeups(config, ensembles)
        bt_pings = self.bottom_track_pings(config, ensembles)
        pings = config.water_profile.pings_per_ensemble

        tbp = self.time_between_pings(config, sampling)
        receive_time = self.profile_time(config, sampling, tbp)
        xmt_code_time = self.transmit_code_time(config, sampling)
        bt_time = self.bottom_track_time(bottom_track_ranges)

        beam_transmit_power_bt = self.tables.selected_sum(flags, [t.transmit_watts for t in self.tables])
        transmit_voltage = self.tables.selected_sum(flags, [t.transmit_voltage for t in self.tables])
        leakage = self.tables.selected_sum(flags, [t.leakage_current() for t in self.tables])

        bt_transmit = bt_pings * self.BOTTOM_TRACK_TRANSMIT_DUTY * (bt_time * beam_transmit_power_bt * xdcr.beams) / hour
        bt_receive = bt_pings * (bt_time * elec.boot_power) / hour
        if xdcr.frequency > self.BOTTOM_TRACK_RECEIVE_DOUBLE_FREQUENCY:
            bt_receive *= 2.0

        wakeup = wakeups * elec.wakeup_time * elec.boot_power / hour
        init = wakeups * elec.init_power * elec.init_time / hour
        transmit = xmt_code_time * beam_transmit_power_profile * xdcr.beams * ensembles * pings / hour
        receive = receive_time * elec.receive_power * ensembles * pings / hour
        if xdcr.frequency > self.RECEIVE_DOUBLE_FREQUENCY:
            receive *= 2.0
        save = wakeups * elec.save_power * elec.save_time / hour
        hours = config.deployment.duration_days * 24.0
        sleep = elec.sleep_power * hours
        cap_charge = (self.CAPACITOR_CHARGE_FRACTION * (bt_transmit + transmit)
                      + self.CAPACITOR_LEAKAGE_FACTOR * hours * transmit_voltage * 1e-6 * leakage)

        total = bt_transmit + bt_receive + wakeup + init + transmit + receive + save + sleep + cap_charge
        if not np.isfinite(total):
            self.logger.warning(f"Non finite energy budget ({total}), check the configuration")

        breakdown = PowerBreakdownDTO(
            bottom_track_transmit=bt_transmit,
            bottom_track_receive=bt_receive,
            wakeup=wakeup,
            init=init,
            transmit=transmit,
            receive=receive,
            save=save,
            sleep=sleep,
            capacitor_charge=cap_charge,
            total=total,
        )

        actual = self.actual_battery_power(config)
        self.logger.debug(f"Power: total={total:.3f}Wh over {ensembles} ensembles, {wakeups} wakeups, "
                          f"{bt_pings} bottom track pings")

        return {
            'number_of_ensembles': ensembles,
            'number_of_wakeups': wakeups,
            'bottom_track_pings': bt_pings,
            'time_between_pings': tbp,
            'profile_time': receive_time,
            'transmit_code_time': xmt_code_time,
            'bottom_track_time': bt_time,
            'power': breakdown,
            'actual_battery_power': actual,
            'number_of_battery_packs': self.number_of_battery_packs(total, actual),
        }
