"""
Plausibility checks of a deployment configuration.
"""

from typing import List, Optional

from .dto import DeploymentConfiguration, PredictionResult, TransmitPulseType

LOWEST_TABLE_FREQUENCY = 34375.0


def validate_configuration(config: DeploymentConfiguration,
                           result: Optional[PredictionResult] = None) -> List[str]:
    """
    Checks a configuration for values that give degenerate predictions.

    Nothing is raised and nothing is corrected; the predictions stay
    defined for any input.

    Args:
        config: Deployment configuration
        result: Prediction of the configuration, enables range and battery checks

    Returns:
        List of warnings (empty if the configuration is plausible)
    """
    warnings = []
    xdcr = config.transducer
    wp = config.water_profile

    if xdcr.frequency < LOWEST_TABLE_FREQUENCY:
        warnings.append(f"Frequency {xdcr.frequency:.0f} Hz is below the lowest analysis table "
                        f"({LOWEST_TABLE_FREQUENCY:.0f} Hz), range and power will be zero")
    if xdcr.cycles_per_element <= 0:
        warnings.append("Cycles per element must be greater than 0")
    if xdcr.speed_of_sound <= 0:
        warnings.append("Speed of sound must be greater than 0")
    if xdcr.beams not in (1, 3, 4):
        warnings.append(f"Unusual number of beams: {xdcr.beams}")
    if xdcr.beams == 1 and xdcr.beam_angle != 0:
        warnings.append("A single beam system is expected to be vertical (beam angle 0)")
    if not 0 <= xdcr.beam_angle < 90:
        warnings.append(f"Beam angle {xdcr.beam_angle} degrees is outside 0-90")

    if config.water.absorption_enabled and config.water.salinity <= 0:
        warnings.append("Salinity must be greater than 0 for the absorption correction, absorption will be 0")

    if config.deployment.ensemble_interval <= 0:
        warnings.append("Ensemble interval (CEI) must be greater than 0, no ensembles will be recorded")
    if config.deployment.duration_days <= 0:
        warnings.append("Deployment duration must be greater than 0")

    if wp.enabled:
        if wp.bin_size <= 0:
            warnings.append("Bin size (CWPBS) must be greater than 0")
        if wp.num_bins <= 0:
            warnings.append("Number of bins (CWPBN) must be greater than 0")
        if wp.pings_per_ensemble <= 0:
            warnings.append("Pings per ensemble (CWPP) must be greater than 0")
        if wp.transmit_pulse_type == TransmitPulseType.BROADBAND and wp.lag_length > wp.bin_size:
            warnings.append(f"Lag length {wp.lag_length} m is longer than the bin size {wp.bin_size} m")

    if config.burst.ensembles_per_burst > 0 and config.burst.burst_interval <= 0:
        warnings.append("Burst ensembles are set but the burst interval is 0, burst mode is disabled")
    if config.is_burst_mode:
        burst_length = config.burst.ensembles_per_burst * config.deployment.ensemble_interval
        if burst_length > config.burst.burst_interval:
            warnings.append(f"Burst length {burst_length:.1f} s exceeds the burst interval "
                            f"{config.burst.burst_interval:.1f} s")

    if result is not None:
        extent = wp.blank + wp.bin_size * wp.num_bins
        if wp.enabled and result.profile_range > 0 and extent > result.profile_range:
            warnings.append(f"Configured bins reach {extent:.1f} m, beyond the predicted range "
                            f"{result.profile_range:.1f} m")
        if result.number_of_battery_packs > 1.0:
            warnings.append(f"Deployment needs {result.number_of_battery_packs:.2f} battery packs")

    return warnings
