"""
DTO (Data Transfer Objects) for data transfer between modules.
"""

from enum import Enum, IntEnum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransmitPulseType(IntEnum):
    """Water profile transmit pulse type (CWPBB)."""
    NARROWBAND = 0
    BROADBAND = 1
    BROADBAND_PULSE_TO_PULSE = 2
    NONCODED_BROADBAND_PULSE_TO_PULSE = 3


class BottomTrackMode(IntEnum):
    """Bottom track transmit mode (CBTBB)."""
    NARROWBAND_LONG_RANGE = 0
    BROADBAND_CODED = 1
    BROADBAND_NON_CODED = 2


class BatteryType(str, Enum):
    """Battery pack types, rated capacity is looked up in the data tables."""
    ALKALINE_38C = "Alkaline_38C"
    ALKALINE_21D = "Alkaline_21D"
    LITHIUM_7DD = "Lithium_7DD"


class SubsystemRole(str, Enum):
    """Which subsystem of a multi-subsystem ADCP is pinging during a burst."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    VERTICAL = "vertical"


class ResolveScope(str, Enum):
    """How many fields the configuration resolver derives from the variant."""
    FULL = "full"
    GEOMETRY = "geometry"


class TransducerDTO(BaseModel):
    """Transducer and acoustic parameters."""
    model_config = ConfigDict(frozen=True)

    frequency: float = Field(default=311281.25, description="System operating frequency, Hz")
    beams: int = Field(default=4, description="Number of beams (1, 3 or 4)")
    beam_angle: float = Field(default=20.0, description="Beam angle from vertical, degrees (0 for vertical beams)")
    beam_diameter: float = Field(default=0.0762, description="Ceramic diameter of one beam, m")
    cycles_per_element: int = Field(default=12, description="Cycles per code element (bandwidth control)")
    broadband_power: bool = Field(default=True, description="Broadband transmit power mode")
    speed_of_sound: float = Field(default=1490.0, description="Speed of sound, m/s")
    snr: float = Field(default=30.0, description="Signal to noise ratio, dB")
    beta: float = Field(default=1.0, description="Environmental decorrelation")
    nb_fudge: float = Field(default=1.4, description="Narrowband standard deviation fudge factor")


class WaterProfileDTO(BaseModel):
    """Water profile (CWP*) commands."""
    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="CWPON")
    bin_size: float = Field(default=4.0, description="CWPBS, bin size, m")
    num_bins: int = Field(default=30, description="CWPBN, number of bins")
    blank: float = Field(default=0.4, description="CWPBL, blank distance, m")
    lag_length: float = Field(default=0.5, description="Broadband lag length, m")
    transmit_pulse_type: TransmitPulseType = Field(default=TransmitPulseType.BROADBAND, description="CWPBB pulse type")
    pings_per_ensemble: int = Field(default=1, description="CWPP")
    time_between_pings: float = Field(default=0.5, description="CWPTBP, s")


class BottomTrackDTO(BaseModel):
    """Bottom track (CBT*) commands."""
    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="CBTON")
    mode: BottomTrackMode = Field(default=BottomTrackMode.BROADBAND_CODED, description="CBTBB mode")
    time_between_pings: float = Field(default=0.25, description="CBTTBP, s")


class DeploymentDTO(BaseModel):
    """Deployment timing."""
    model_config = ConfigDict(frozen=True)

    duration_days: float = Field(default=1.0, description="Deployment duration, days")
    ensemble_interval: float = Field(default=1.0, description="CEI, time between ensembles, s")


class BatteryDTO(BaseModel):
    """Battery pack selection."""
    model_config = ConfigDict(frozen=True)

    battery_type: BatteryType = Field(default=BatteryType.ALKALINE_38C, description="Battery pack type")
    watt_hours: float = Field(default=440.0, description="Rated capacity of one pack, Wh")
    derate: float = Field(default=0.85, description="Usable fraction of the rated capacity")
    self_discharge_per_year: float = Field(default=0.05, description="Self discharge per year, Wh")


class ElectronicsDTO(BaseModel):
    """Electronics power draw and timing per wakeup."""
    model_config = ConfigDict(frozen=True)

    boot_power: float = Field(default=1.80, description="System boot power, W")
    init_power: float = Field(default=2.80, description="System init power, W")
    receive_power: float = Field(default=4.80, description="Receive power, W")
    save_power: float = Field(default=1.80, description="Save power, W")
    sleep_power: float = Field(default=0.00125, description="Sleep power, W")
    wakeup_time: float = Field(default=0.4, description="Wakeup time, s")
    init_time: float = Field(default=0.25, description="Init time, s")
    save_time: float = Field(default=0.15, description="Save time, s")


class WaterDTO(BaseModel):
    """Water mass used for the absorption corrected range."""
    model_config = ConfigDict(frozen=True)

    absorption_enabled: bool = Field(default=False, description="Correct the reference ranges for water absorption")
    temperature: float = Field(default=10.0, description="Temperature, °C")
    salinity: float = Field(default=35.0, description="Salinity, ppt")
    depth: float = Field(default=0.0, description="Transducer depth, m")


class DataSetsDTO(BaseModel):
    """
    Data sets recorded in each ensemble (CED).

    When enabled the ensemble size is the sum of the selected data sets,
    sized by the number of bins and beams. When disabled the fixed
    water profile and bottom track sizes are used.
    """
    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Size ensembles from the selected data sets")
    beam_velocity: bool = Field(default=True, description="E0000001")
    instrument_velocity: bool = Field(default=True, description="E0000002")
    earth_velocity: bool = Field(default=True, description="E0000003")
    amplitude: bool = Field(default=True, description="E0000004")
    correlation: bool = Field(default=True, description="E0000005")
    good_beam: bool = Field(default=True, description="E0000006")
    good_earth: bool = Field(default=True, description="E0000007")
    ensemble: bool = Field(default=True, description="E0000008")
    ancillary: bool = Field(default=True, description="E0000009")
    bottom_track: bool = Field(default=True, description="E0000010")
    nmea: bool = Field(default=True, description="E0000011")
    profile_engineering: bool = Field(default=True, description="E0000012")
    bottom_track_engineering: bool = Field(default=True, description="E0000013")
    system_setup: bool = Field(default=True, description="E0000014")
    range_tracking: bool = Field(default=True, description="E0000015")


class BurstDTO(BaseModel):
    """Burst (waves) sampling. Zero ensembles or interval disables burst mode."""
    model_config = ConfigDict(frozen=True)

    ensembles_per_burst: int = Field(default=0, ge=0, description="CBI number of ensembles in a burst")
    burst_interval: float = Field(default=0.0, description="CBI burst interval, s")
    primary_code: Optional[str] = Field(default=None, description="Primary subsystem code (defaults to the configured hardware code)")
    secondary_code: Optional[str] = Field(default=None, description="Secondary subsystem code (vertical beam or second frequency)")
    role: SubsystemRole = Field(default=SubsystemRole.PRIMARY, description="Subsystem pinging in this configuration")
    primary_beams: int = Field(default=4, description="Number of beams in the primary subsystem")
    secondary_beams: int = Field(default=4, description="Number of beams in the secondary subsystem")

    @field_validator('primary_code', 'secondary_code')
    @classmethod
    def validate_code(cls, v):
        if v is not None and len(v) > 1:
            raise ValueError("Subsystem code must be a single character")
        return v or None


class DeploymentConfiguration(BaseModel):
    """Complete input of a prediction."""
    model_config = ConfigDict(frozen=True)

    hardware_code: str = Field(default="4", description="Hardware variant (subsystem code character)")
    transducer: TransducerDTO = Field(default_factory=TransducerDTO)
    water_profile: WaterProfileDTO = Field(default_factory=WaterProfileDTO)
    bottom_track: BottomTrackDTO = Field(default_factory=BottomTrackDTO)
    deployment: DeploymentDTO = Field(default_factory=DeploymentDTO)
    battery: BatteryDTO = Field(default_factory=BatteryDTO)
    electronics: ElectronicsDTO = Field(default_factory=ElectronicsDTO)
    burst: BurstDTO = Field(default_factory=BurstDTO)
    water: WaterDTO = Field(default_factory=WaterDTO)
    data_sets: DataSetsDTO = Field(default_factory=DataSetsDTO)

    @property
    def is_burst_mode(self) -> bool:
        return self.burst.ensembles_per_burst > 0 and self.burst.burst_interval > 0


class HardwareVariantDTO(BaseModel):
    """Defaults derived from one hardware variant."""
    model_config = ConfigDict(frozen=True)

    code: str
    description: str = ""
    frequency: float = Field(..., description="Operating frequency, Hz")
    beams: int
    beam_angle: float = Field(..., description="Beam angle, degrees")
    beam_diameter: float = Field(..., description="Beam diameter, m")
    offset_angle: float = Field(default=0.0, description="Beam offset angle, degrees")
    bin_size: float = Field(..., description="Default bin size, m")
    num_bins: int
    blank: float = Field(..., description="Default blank, m")
    pings_per_ensemble: int
    wp_time_between_pings: float = Field(..., description="Default CWPTBP, s")
    bt_time_between_pings: float = Field(..., description="Default CBTTBP, s")


class SamplingGeometry(BaseModel):
    """Receiver sampling derived from a configuration."""
    model_config = ConfigDict(frozen=True)

    sample_rate: float = Field(..., description="Receiver sample rate, Hz")
    meters_per_sample: float = Field(..., description="Vertical distance per sample, m")
    bin_samples: int
    lag_samples: int
    code_repeats: int
    bin_time: float = Field(..., description="Bin duration, s")
    lag_time: float = Field(..., description="Lag duration, s")


class PowerBreakdownDTO(BaseModel):
    """Energy per item over the whole deployment, Wh."""
    model_config = ConfigDict(frozen=True)

    bottom_track_transmit: float = 0.0
    bottom_track_receive: float = 0.0
    wakeup: float = 0.0
    init: float = 0.0
    transmit: float = 0.0
    receive: float = 0.0
    save: float = 0.0
    sleep: float = 0.0
    capacitor_charge: float = 0.0
    total: float = 0.0


class PredictionResult(BaseModel):
    """Output of a continuous mode prediction."""
    model_config = ConfigDict(frozen=True)

    # Range
    profile_range: float = Field(..., description="Predicted water profile range, m")
    bottom_track_range: float = Field(..., description="Predicted bottom track range, m")
    range_reduction: float = Field(..., description="Range correction for the transmit duty cycle, m")
    first_bin_position: float = Field(..., description="Center of the first bin, m")
    configured_profile_extent: float = Field(..., description="Blank plus configured bins, m")

    # Precision
    standard_deviation: float = Field(..., description="Horizontal velocity standard deviation, m/s")
    broadband_standard_deviation: float = Field(..., description="m/s")
    narrowband_standard_deviation: float = Field(..., description="m/s")
    max_velocity: float = Field(..., description="Maximum unambiguous velocity, m/s")

    # Data
    number_of_ensembles: int
    ensemble_size_bytes: int
    data_size_bytes: int
    burst_mode: bool = False

    # Power
    power: PowerBreakdownDTO
    total_power: float = Field(..., description="Energy for the deployment, Wh")
    actual_battery_power: float = Field(..., description="Usable energy of one pack, Wh")
    number_of_battery_packs: float

    # Intermediate values
    selected_table_frequency: Optional[float] = Field(default=None, description="Analysis table in use, Hz")
    wavelength: float = Field(..., description="m")
    directivity_index: float = Field(..., description="dB")
    absorption: float = Field(default=0.0, description="Water absorption used for the range, dB/m")
    sampling: SamplingGeometry
    time_between_pings: float = Field(..., description="s")
    profile_time: float = Field(..., description="s")
    transmit_code_time: float = Field(..., description="s")
    bottom_track_time: float = Field(..., description="s")
    percent_bandwidth: float = Field(..., description="%")
    warnings: List[str] = Field(default_factory=list, description="Plausibility warnings")


class BurstPredictionResult(BaseModel):
    """Output of a burst (waves) prediction."""
    model_config = ConfigDict(frozen=True)

    bytes_per_burst: int
    number_of_bursts: int
    bytes_per_deployment: int
    watt_hours_per_burst: float
    watt_hours_per_deployment: float
    transmit_watts: float
    receive_watts: float
    sleep_watts: float
    number_of_battery_packs: float


class WavesDefaultsDTO(BaseModel):
    """Recommended waves settings of a subsystem."""
    model_config = ConfigDict(frozen=True)

    blank: float = Field(default=0.0, description="m")
    bin_size: float = Field(default=0.0, description="m")
    lag: float = Field(default=0.0, description="m")


class WavesPuvDTO(BaseModel):
    """Waves PUV model output."""
    model_config = ConfigDict(frozen=True)

    range: float = Field(default=0.0, description="Profile range, m")
    standard_deviation: float = Field(default=0.0, description="Horizontal standard deviation, m/s")
    max_velocity: float = Field(default=0.0, description="Ambiguity velocity, m/s")
    first_bin_location: float = Field(default=0.0, description="m")
