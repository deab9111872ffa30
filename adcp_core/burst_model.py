"""
BurstModel - burst (waves) data volume and energy.
"""

import logging
import numpy as np
from typing import Dict, List, Optional, Tuple

from .dto import (BurstPredictionResult, DeploymentConfiguration, SubsystemRole,
                  WavesDefaultsDTO, WavesPuvDTO)
from .power_model import PowerModel
from .sonar_equation import SonarEquation


class BurstModel:
    """
    Waves burst model.

    Uses a lookup on the hardware code character instead of the analysis
    tables:
    - Transmit wattage class of the primary subsystem
    - Receive wattage by the number of receive channels (4, 5, 7 or 8 beams)
    - Sleep wattage between bursts
    """

    BURST_OVERHEAD_BYTES = 616
    CHECKSUM_BYTES = 4
    WRAPPER_BYTES = 32
    BYTES_PER_BIN = 112
    TRANSMIT_SECONDS_PER_SAMPLE = 0.00155
    WAKEUP_SECONDS = 2.0
    PUV_SPEED_OF_SOUND = 1490.0

    def __init__(self, data_provider):
        """
        Initialize burst model.

        Args:
            data_provider: Data provider (DATA module)
        """
        self.data_provider = data_provider
        self.tables = data_provider.get_waves_tables()
        self.logger = logging.getLogger(__name__)

        self._transmit_by_code = {}
        for wattage_class in self.tables['transmit_watts'].values():
            for code in wattage_class['codes']:
                self._transmit_by_code[code] = float(wattage_class['watts'])

    # ---- Data volume ----

    @classmethod
    def bytes_per_burst(cls, config: DeploymentConfiguration) -> int:
        """Bytes recorded in one burst."""
        ensemble = (cls.BURST_OVERHEAD_BYTES + cls.CHECKSUM_BYTES + cls.WRAPPER_BYTES
                    + config.water_profile.num_bins * cls.BYTES_PER_BIN)
        return config.burst.ensembles_per_burst * ensemble

    @staticmethod
    def number_of_bursts(config: DeploymentConfiguration) -> int:
        """Bursts in the deployment, round(duration / burst interval)."""
        interval = config.burst.burst_interval
        if interval == 0:
            return 0
        return int(round(config.deployment.duration_days * 24.0 * 3600.0 / interval))

    @staticmethod
    def recorded_bursts(config: DeploymentConfiguration) -> int:
        """
        Bursts recorded by a continuous deployment.

        Each burst takes its ensembles at the CEI followed by the burst
        interval, round(duration / (ensembles * CEI + interval)).
        """
        if not config.is_burst_mode:
            return 0
        seconds_per_burst = (config.burst.ensembles_per_burst * config.deployment.ensemble_interval
                             + config.burst.burst_interval)
        return int(round(config.deployment.duration_days * 24.0 * 3600.0 / seconds_per_burst))

    # ---- Energy ----

    def _receive_watts(self, beams: int) -> float:
        return float(self.tables['receive_watts'][str(beams)])

    def wattage(self, primary_code: str, secondary_code: Optional[str], role: SubsystemRole,
                primary_beams: int = 4, secondary_beams: int = 4) -> Tuple[float, float, float]:
        """
        Transmit, receive and sleep wattage of the pinging subsystem.

        Args:
            primary_code: Code of the primary subsystem
            secondary_code: Code of the vertical beam or second frequency subsystem, or None
            role: Subsystem pinging
            primary_beams: Beams in the primary subsystem
            secondary_beams: Beams in the secondary subsystem

        Returns:
            (transmit W, receive W, sleep W)
        """
        receive = self._receive_watts(4)
        sleep = float(self.tables['sleep_watts'])
        secondary_transmit = 0.0

        if secondary_code is not None:
            secondary = self.tables['secondary'].get(secondary_code)
            if secondary is not None:
                # 3 beam primary plus a 4 beam secondary is a 7 beam system
                receive = self._receive_watts(secondary['receive_beams'])
                if primary_beams == 3:
                    receive = self._receive_watts(7)
                secondary_transmit = float(self.tables['transmit_watts'][secondary['transmit_class']]['watts'])

        transmit = self._transmit_by_code.get(primary_code)
        if transmit is None:
            self.logger.warning(f"No waves wattage for subsystem code '{primary_code}'")
            return 0.0, 0.0, 0.0

        if secondary_code is not None:
            if role == SubsystemRole.VERTICAL:
                transmit = transmit / primary_beams if primary_beams else 0.0
            elif role == SubsystemRole.SECONDARY:
                if secondary_beams != 4:
                    transmit = (transmit / 4.0) * secondary_beams
                else:
                    transmit = secondary_transmit
            elif primary_beams != 4:
                transmit = (transmit / 4.0) * primary_beams

        return transmit, receive, sleep

    def watt_hours_per_burst(self, samples: int, sample_period: float,
                             transmit: float, receive: float, sleep: float) -> float:
        """
        Energy of one burst plus a day of sleep.

        Args:
            samples: Ensembles in the burst
            sample_period: Time between ensembles in the burst, s
            transmit: Transmit wattage, W
            receive: Receive wattage, W
            sleep: Sleep wattage, W

        Returns:
            Energy, Wh
        """
        awake = self.WAKEUP_SECONDS + samples * (self.TRANSMIT_SECONDS_PER_SAMPLE * transmit
                                                 + sample_period * receive)
        return awake / 3600.0 + 24.0 * sleep

    def predict(self, config: DeploymentConfiguration) -> BurstPredictionResult:
        """
        Predicts a burst deployment.

        Args:
            config: Deployment configuration with burst settings

        Returns:
            BurstPredictionResult
        """
        burst = config.burst
        primary_code = burst.primary_code or config.hardware_code
        transmit, receive, sleep = self.wattage(primary_code, burst.secondary_code, burst.role,
                                                burst.primary_beams, burst.secondary_beams)

        per_burst = self.watt_hours_per_burst(burst.ensembles_per_burst, config.deployment.ensemble_interval,
                                              transmit, receive, sleep)
        bursts = self.number_of_bursts(config)
        bytes_per_burst = self.bytes_per_burst(config)
        per_deployment = per_burst * bursts

        actual = PowerModel.actual_battery_power(config)
        self.logger.info(f"Burst prediction: code={primary_code}, bursts={bursts}, "
                         f"{per_burst:.4f}Wh per burst, {per_deployment:.2f}Wh per deployment")

        return BurstPredictionResult(
            bytes_per_burst=bytes_per_burst,
            number_of_bursts=bursts,
            bytes_per_deployment=bytes_per_burst * bursts,
            watt_hours_per_burst=per_burst,
            watt_hours_per_deployment=per_deployment,
            transmit_watts=transmit,
            receive_watts=receive,
            sleep_watts=sleep,
            number_of_battery_packs=PowerModel.number_of_battery_packs(per_deployment, actual),
        )

    # ---- Multi subsystem systems ----

    def layout_for_system(self, system_codes: List[str], pinging_code: str) -> Dict:
        """
        Works out the burst layout of one subsystem of a multi-subsystem ADCP.

        The primary subsystem is the last slanted beam subsystem without a
        45 degree offset. A vertical beam takes precedence over a second
        frequency.

        Args:
            system_codes: Codes of every subsystem in the ADCP
            pinging_code: Code of the subsystem to predict

        Returns:
            Dictionary of BurstDTO fields (primary_code, secondary_code,
            role, primary_beams, secondary_beams)
        """
        primary = vertical = dual = None
        for code in system_codes:
            record = self.data_provider.get_hardware_variant(code)
            if record is None:
                continue
            if record['beam_angle'] == 0:
                vertical = record
            elif record.get('offset_angle', 0) == 45:
                dual = record
            else:
                primary = record

        info = self.data_provider.get_hardware_variant(pinging_code) or {}
        is_vertical = info.get('beam_angle', -1) == 0
        beams = info.get('beams', 4)

        if vertical is not None and primary is not None:
            return {
                'primary_code': primary['code'],
                'secondary_code': vertical['code'],
                'role': SubsystemRole.VERTICAL if is_vertical else SubsystemRole.PRIMARY,
                'primary_beams': primary['beams'],
                'secondary_beams': 1,
            }

        if dual is not None and primary is not None:
            if info.get('offset_angle', 0) == 45:
                return {
                    'primary_code': primary['code'],
                    'secondary_code': pinging_code,
                    'role': SubsystemRole.VERTICAL if is_vertical else SubsystemRole.SECONDARY,
                    'primary_beams': beams,
                    'secondary_beams': dual['beams'],
                }
            return {
                'primary_code': pinging_code,
                'secondary_code': dual['code'],
                'role': SubsystemRole.VERTICAL if is_vertical else SubsystemRole.PRIMARY,
                'primary_beams': beams,
                'secondary_beams': dual['beams'],
            }

        return {
            'primary_code': pinging_code,
            'secondary_code': None,
            'role': SubsystemRole.VERTICAL if is_vertical else SubsystemRole.PRIMARY,
            'primary_beams': beams,
            'secondary_beams': 0,
        }

    # ---- Waves planning ----

    def waves_defaults(self, code: str) -> WavesDefaultsDTO:
        """Recommended blank, bin size and lag for a waves deployment."""
        values = self.tables['defaults'].get(code)
        if values is None:
            return WavesDefaultsDTO()
        return WavesDefaultsDTO(**values)

    def waves_puv(self, code: str, bin_size: float, blank: float, lag: float) -> WavesPuvDTO:
        """
        Waves PUV model.

        Assumes a high SNR first bin, a transmit as long as the bin and
        1490 m/s speed of sound.

        Args:
            code: Subsystem code
            bin_size: Bin size, m
            blank: Blank, m
            lag: Lag, m

        Returns:
            WavesPuvDTO with range, standard deviation, ambiguity velocity and first bin location
        """
        model = self.tables['puv'].get(code)
        if model is None:
            self.logger.warning(f"No waves PUV model for subsystem code '{code}'")
            return WavesPuvDTO()

        c = self.PUV_SPEED_OF_SOUND
        freq = float(self.tables['puv_base_frequency']) / model['divider']
        standard_bin = float(model['divider'])
        beam_angle = SonarEquation.beam_angle_radian(model['beam_angle'])

        sample_rate = freq * 4.0 / 3.0 / 16.0
        mps = SonarEquation.meters_per_sample(model['beam_angle'], c, sample_rate)
        bin_samples = SonarEquation.bin_samples(bin_size, mps)
        lag_samples = SonarEquation.lag_samples(lag, mps)
        repeats = SonarEquation.code_repeats(bin_samples, lag_samples)

        first_bin = blank + ((repeats - 1.0) * lag + 2.0 * bin_size + lag) / 2.0
        rho = (repeats - 1.0) / repeats if repeats else 0.0

        if lag_samples == 0:
            ua = 0.0
        else:
            ua = sample_rate / (2.0 * lag_samples) * c / (2.0 * freq)
        if lag_samples == 0 or bin_samples == 0 or rho == 0:
            sd = 0.0
        else:
            sd = 0.034 * (118.0 / lag_samples) * np.sqrt(14.0 / bin_samples) * (rho / 0.5) ** -2.0
        if beam_angle > 0:
            ua /= np.sin(beam_angle)
            sd /= np.sin(beam_angle)
            sd /= np.sqrt(2.0)

        profile_range = model['standard_range'] + SonarEquation.decibel_ratio(bin_size, standard_bin) * standard_bin

        return WavesPuvDTO(
            range=float(profile_range),
            standard_deviation=float(sd),
            max_velocity=float(ua),
            first_bin_location=float(first_bin),
        )
