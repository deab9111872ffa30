"""
ConfigurationResolver - hardware variant defaults for a deployment configuration.
"""

import logging
from typing import Any, Dict, List, Optional

from .dto import BatteryType, DeploymentConfiguration, HardwareVariantDTO, ResolveScope


class ConfigurationResolver:
    """
    Builds deployment configurations from a hardware variant code.

    The FULL scope sets every frequency dependent default, the GEOMETRY
    scope only the transducer geometry. Both read the same variant record.
    Unknown codes leave the configuration unchanged.
    """

    DEFAULT_VARIANT = '4'

    def __init__(self, data_provider):
        """
        Initialize resolver.

        Args:
            data_provider: Data provider (DATA module)
        """
        self.data_provider = data_provider
        self.logger = logging.getLogger(__name__)
        self._variant_cache: Dict[str, HardwareVariantDTO] = {}

    def get_variant(self, code: str) -> Optional[HardwareVariantDTO]:
        """
        Gets the defaults of a hardware variant.

        Args:
            code: Subsystem code character

        Returns:
            HardwareVariantDTO, or None for an unknown code
        """
        if code in self._variant_cache:
            return self._variant_cache[code]

        record = self.data_provider.get_hardware_variant(code)
        if record is None:
            return None

        variant = HardwareVariantDTO(
            code=code,
            description=record.get('description', ''),
            frequency=self.data_provider.get_base_frequency() / record['divider'],
            beams=record['beams'],
            beam_angle=record['beam_angle'],
            beam_diameter=record['beam_diameter'],
            offset_angle=record.get('offset_angle', 0.0),
            bin_size=record['bin_size'],
            num_bins=record['num_bins'],
            blank=record['blank'],
            pings_per_ensemble=record['pings'],
            wp_time_between_pings=record['wp_time_between_pings'],
            bt_time_between_pings=record['bt_time_between_pings'],
        )
        self._variant_cache[code] = variant
        return variant

    def list_variants(self) -> List[HardwareVariantDTO]:
        """Returns the defaults of every known hardware variant."""
        return [self.get_variant(code) for code in self.data_provider.list_hardware_variants()]

    def variant_updates(self, variant: HardwareVariantDTO, scope: ResolveScope = ResolveScope.FULL) -> Dict:
        """
        Nested field updates a variant applies to a configuration.

        Args:
            variant: Hardware variant defaults
            scope: FULL or GEOMETRY

        Returns:
            Dictionary shaped like DeploymentConfiguration
        """
        updates: Dict[str, Any] = {
            'hardware_code': variant.code,
            'transducer': {
                'frequency': variant.frequency,
                'beam_angle': variant.beam_angle,
                'beams': variant.beams,
                'beam_diameter': variant.beam_diameter,
            },
        }
        if scope == ResolveScope.FULL:
            updates['water_profile'] = {
                'bin_size': variant.bin_size,
                'num_bins': variant.num_bins,
                'blank': variant.blank,
                'pings_per_ensemble': variant.pings_per_ensemble,
                'time_between_pings': variant.wp_time_between_pings,
            }
            updates['bottom_track'] = {
                'time_between_pings': variant.bt_time_between_pings,
            }
        return updates

    def resolve(self, variant_code: Optional[str] = None, overrides: Optional[Dict] = None,
                scope: ResolveScope = ResolveScope.FULL,
                base: Optional[DeploymentConfiguration] = None) -> DeploymentConfiguration:
        """
        Resolves a deployment configuration.

        Args:
            variant_code: Subsystem code character (None or '' for the 300 kHz 4 beam default)
            overrides: Nested or dotted field overrides applied after the variant defaults
            scope: FULL or GEOMETRY
            base: Configuration to start from (default: DeploymentConfiguration())

        Returns:
            New DeploymentConfiguration
        """
        config = base if base is not None else DeploymentConfiguration()
        code = variant_code or self.DEFAULT_VARIANT

        variant = self.get_variant(code)
        if variant is None:
            self.logger.warning(f"Unknown hardware variant '{code}', configuration left unchanged")
        else:
            config = self.with_overrides(config, self.variant_updates(variant, scope))
            self.logger.debug(f"Resolved variant {code} ({variant.description}), scope={scope.value}")

        return self.with_overrides(config, overrides)

    def with_battery_type(self, config: DeploymentConfiguration, battery_type: BatteryType) -> DeploymentConfiguration:
        """
        Selects a battery pack together with its rated capacity.

        Args:
            config: Deployment configuration
            battery_type: Battery pack type

        Returns:
            New DeploymentConfiguration
        """
        battery_type = BatteryType(battery_type)
        rating = self.data_provider.get_battery(battery_type.value)
        battery = config.battery.model_copy(update={
            'battery_type': battery_type,
            'watt_hours': float(rating['watt_hours']),
        })
        return config.model_copy(update={'battery': battery})

    @staticmethod
    def with_overrides(config: DeploymentConfiguration, overrides: Optional[Dict]) -> DeploymentConfiguration:
        """
        Applies field overrides to a configuration.

        Args:
            config: Deployment configuration
            overrides: {'water_profile': {'bin_size': 2.0}} or {'water_profile.bin_size': 2.0}

        Returns:
            New validated DeploymentConfiguration

        Raises:
            ValueError: Unknown field name
        """
        if not overrides:
            return config

        data = config.model_dump()
        for key, value in overrides.items():
            path = key.split('.')
            if isinstance(value, dict) and len(path) == 1:
                for field, field_value in value.items():
                    _set_field(data, path + field.split('.'), field_value)
            else:
                _set_field(data, path, value)

        return DeploymentConfiguration.model_validate(data)


def _set_field(data: Dict, path: List[str], value) -> None:
    """Sets a nested configuration field, rejecting unknown names."""
    node = data
    for name in path[:-1]:
        if not isinstance(node.get(name), dict):
            raise ValueError(f"Unknown configuration section: {'.'.join(path)}")
        node = node[name]
    if path[-1] not in node:
        raise ValueError(f"Unknown configuration field: {'.'.join(path)}")
    node[path[-1]] = value
