"""
DataProvider - access to the fixed ADCP prediction tables.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional
import logging


class DataProvider:
    """
    Provider of the compiled-in prediction constants.

    Gives access to:
    - The six analysis frequency tables
    - Hardware variant records and per-band command defaults
    - Battery pack ratings
    - Waves (burst) wattage classes and defaults
    """

    def __init__(self, data_dir: Optional[str] = None):
        """
        Initialize data provider.

        Args:
            data_dir: Path to data directory (default: directory of this module)
        """
        if data_dir is None:
            data_dir = Path(__file__).parent
        else:
            data_dir = Path(data_dir)

        self.data_dir = data_dir
        self.logger = logging.getLogger(__name__)

        self.metadata = self._load_metadata()

        # Cache for loaded files
        self._cache: Dict[str, object] = {}

    def _load_metadata(self) -> Dict:
        """Loads metadata."""
        metadata_path = self.data_dir / 'metadata.json'
        if metadata_path.exists():
            try:
                with open(metadata_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.warning(f"Failed to load metadata: {e}")
        return {'version': '1.0', 'last_updated': '', 'base_frequency_hz': 9961000.0}

    def _load_json(self, name: str):
        """Loads (and caches) a JSON file from the data directory."""
        if name in self._cache:
            return self._cache[name]

        file_path = self.data_dir / f'{name}.json'
        if not file_path.exists():
            raise ValueError(f"Data file {name}.json not found in {self.data_dir}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Error loading {file_path}: {e}")
            raise

        self._cache[name] = data
        return data

    def get_frequency_tables(self) -> List[Dict]:
        """
        Gets the analysis frequency tables.

        Returns:
            List of table parameter dictionaries, highest frequency first
        """
        tables = self._load_json('frequency_tables')
        return sorted(tables, key=lambda t: t['frequency'], reverse=True)

    def get_hardware_variant(self, code: str) -> Optional[Dict]:
        """
        Gets a hardware variant record merged with its band defaults.

        Args:
            code: Single character subsystem code

        Returns:
            Dictionary with parameters, or None for an unknown code
        """
        variants = self._load_json('hardware_variants')
        variant = variants.get(code)
        if variant is None:
            return None

        record = dict(self.get_band_defaults(variant['band']))
        record.update(variant)
        record['code'] = code
        return record

    def get_band_defaults(self, band: str) -> Dict:
        """
        Gets the command defaults of a frequency band.

        Args:
            band: Nominal band in kHz ('1200', '600', '300', '150', '75', '38')

        Returns:
            Dictionary with parameters
        """
        bands = self._load_json('band_defaults')
        if band not in bands:
            raise ValueError(f"Frequency band {band} not found")
        return bands[band]

    def get_base_frequency(self) -> float:
        """Returns the oscillator frequency the band dividers apply to, Hz."""
        return float(self.metadata.get('base_frequency_hz', 9961000.0))

    def get_battery(self, battery_type: str) -> Dict:
        """
        Gets battery pack parameters.

        Args:
            battery_type: Battery type name

        Returns:
            Dictionary with parameters
        """
        batteries = self._load_json('batteries')
        if battery_type not in batteries:
            raise ValueError(f"Battery {battery_type} not found")
        return batteries[battery_type]

    def get_waves_tables(self) -> Dict:
        """Returns the waves wattage classes, defaults and PUV model constants."""
        return self._load_json('waves')

    def list_hardware_variants(self) -> List[str]:
        """Returns list of known hardware variant codes."""
        return list(self._load_json('hardware_variants').keys())

    def list_batteries(self) -> List[str]:
        """Returns list of available battery types."""
        return list(self._load_json('batteries').keys())

    def get_metadata(self) -> Dict:
        """Returns metadata."""
        return self.metadata.copy()
