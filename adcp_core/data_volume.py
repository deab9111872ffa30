"""
DataVolumeModel - ensemble size and deployment data volume.
"""

from .dto import DataSetsDTO, DeploymentConfiguration


class DataVolumeModel:
    """
    Byte accounting of the recorded ensembles.

    An ensemble holds the profile data sets (when water profile is on),
    the bottom track data set (when bottom track is on), the general
    overhead, a checksum and a wrapper. With both off a fixed minimum
    ensemble is still recorded.

    With data set sizing enabled, every selected data set is sized from
    the number of bins and beams instead.
    """

    PROFILE_OVERHEAD_BYTES = 112
    BYTES_PER_BIN = 112
    BOTTOM_TRACK_BYTES = 384
    OVERHEAD_BYTES = 504
    CHECKSUM_BYTES = 4
    WRAPPER_BYTES = 32
    NO_PING_BYTES = 308

    BYTES_PER_VALUE = 4
    DATA_SET_HEADER_VALUES = 7

    @classmethod
    def bytes_per_bins(cls, config: DeploymentConfiguration) -> int:
        """Bytes of all the bins of one ensemble."""
        if not config.water_profile.enabled:
            return 0
        return cls.BYTES_PER_BIN * config.water_profile.num_bins

    @classmethod
    def data_set_bytes(cls, values: int) -> int:
        """Bytes of one data set holding `values` floats."""
        return cls.BYTES_PER_VALUE * (values + cls.DATA_SET_HEADER_VALUES)

    @classmethod
    def data_sets_size_bytes(cls, num_bins: int, beams: int, data_sets: DataSetsDTO) -> int:
        """
        Size of one ensemble from the selected data sets.

        Args:
            num_bins: Number of bins (CWPBN)
            beams: Number of beams
            data_sets: Data sets recorded (CED)

        Returns:
            Ensemble size, bytes
        """
        profile = cls.data_set_bytes(num_bins * beams)
        sizes = [
            (data_sets.beam_velocity, profile),
            (data_sets.instrument_velocity, profile),
            (data_sets.earth_velocity, profile),
            (data_sets.amplitude, profile),
            (data_sets.correlation, profile),
            (data_sets.good_beam, profile),
            (data_sets.good_earth, profile),
            (data_sets.ensemble, cls.data_set_bytes(23)),
            (data_sets.ancillary, cls.data_set_bytes(19)),
            (data_sets.bottom_track, cls.data_set_bytes(14 + 15 * beams)),
            (data_sets.nmea, 0),
            (data_sets.profile_engineering, cls.data_set_bytes(23)),
            (data_sets.bottom_track_engineering, cls.data_set_bytes(30)),
            (data_sets.system_setup, cls.data_set_bytes(23)),
            (data_sets.range_tracking, cls.data_set_bytes(8 * beams + 1)),
        ]

        size = 0
        for selected, value in sizes:
            if selected:
                size += value
        return size + cls.CHECKSUM_BYTES + cls.WRAPPER_BYTES

    @classmethod
    def ensemble_size_bytes(cls, config: DeploymentConfiguration) -> int:
        """
        Size of one ensemble.

        Args:
            config: Deployment configuration

        Returns:
            Ensemble size, bytes
        """
        if config.data_sets.enabled:
            return cls.data_sets_size_bytes(config.water_profile.num_bins, config.transducer.beams,
                                            config.data_sets)

        wp_on = config.water_profile.enabled
        bt_on = config.bottom_track.enabled

        size = 0
        if wp_on:
            size += cls.PROFILE_OVERHEAD_BYTES
        size += cls.bytes_per_bins(config)
        if bt_on:
            size += cls.BOTTOM_TRACK_BYTES
        if wp_on or bt_on:
            size += cls.OVERHEAD_BYTES
        size += cls.CHECKSUM_BYTES
        size += cls.WRAPPER_BYTES
        if not wp_on and not bt_on:
            size += cls.NO_PING_BYTES
        return size

    @staticmethod
    def data_size_bytes(number_of_ensembles: int, ensemble_size: int, burst_mode: bool = False,
                        number_of_bursts: int = 0, bytes_per_burst: int = 0) -> int:
        """Deployment data volume, bursts whenever burst mode is active."""
        if burst_mode:
            return number_of_bursts * bytes_per_burst
        return number_of_ensembles * ensemble_size
