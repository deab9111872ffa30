"""
CORE module - ADCP deployment predictor.
"""

from .dto import (
    BatteryType,
    BottomTrackMode,
    BurstPredictionResult,
    DataSetsDTO,
    DeploymentConfiguration,
    PredictionResult,
    ResolveScope,
    SubsystemRole,
    TransmitPulseType,
    WaterDTO,
)
from .sonar_equation import SonarEquation
from .water_model import WaterModel
from .frequency_table import FrequencyTable, FrequencyTableSet
from .config_resolver import ConfigurationResolver
from .range_model import RangeModel
from .precision_model import VelocityPrecisionModel
from .power_model import PowerModel
from .data_volume import DataVolumeModel
from .burst_model import BurstModel
from .predictor import AdcpPredictor, predict_burst, predict_continuous, resolve_configuration
from .validation import validate_configuration

__all__ = [
    'BatteryType',
    'BottomTrackMode',
    'BurstPredictionResult',
    'DataSetsDTO',
    'DeploymentConfiguration',
    'PredictionResult',
    'ResolveScope',
    'SubsystemRole',
    'TransmitPulseType',
    'WaterDTO',
    'SonarEquation',
    'WaterModel',
    'FrequencyTable',
    'FrequencyTableSet',
    'ConfigurationResolver',
    'RangeModel',
    'VelocityPrecisionModel',
    'PowerModel',
    'DataVolumeModel',
    'BurstModel',
    'AdcpPredictor',
    'predict_burst',
    'predict_continuous',
    'resolve_configuration',
    'validate_configuration',
]
