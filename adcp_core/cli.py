"""
Command line deployment planner.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .dto import BatteryType, BurstPredictionResult, DeploymentConfiguration, PredictionResult, ResolveScope
from .predictor import AdcpPredictor
from .water_model import WaterModel

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: int = 0, log_file: Optional[str] = None) -> None:
    """Configures root logging for the command line."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def _parse_value(text: str) -> Any:
    """Parses a --set value as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def parse_overrides(items: Optional[List[str]]) -> Dict[str, Any]:
    """
    Parses section.field=value pairs.

    Raises:
        ValueError: Malformed pair
    """
    overrides: Dict[str, Any] = {}
    for item in items or []:
        key, sep, value = item.partition('=')
        if not sep or not key:
            raise ValueError(f"Expected section.field=value, got '{item}'")
        overrides[key.strip()] = _parse_value(value.strip())
    return overrides


def build_configuration(predictor: AdcpPredictor, args: argparse.Namespace) -> DeploymentConfiguration:
    """Resolves the configuration described by the command line arguments."""
    overrides = parse_overrides(getattr(args, 'set', None))

    if args.temperature is not None:
        c = WaterModel.calculate_sound_speed(args.temperature, args.salinity, args.depth)
        overrides.setdefault('transducer.speed_of_sound', round(c, 2))

    if args.absorption:
        overrides.setdefault('water.absorption_enabled', True)
        overrides.setdefault('water.salinity', args.salinity)
        overrides.setdefault('water.depth', args.depth)
        if args.temperature is not None:
            overrides.setdefault('water.temperature', args.temperature)
    if args.data_sets:
        overrides.setdefault('data_sets.enabled', True)

    scope = ResolveScope(args.scope)
    config = predictor.resolver.resolve(args.variant, overrides, scope)
    if args.battery:
        config = predictor.resolver.with_battery_type(config, BatteryType(args.battery))
    return config


def format_prediction(config: DeploymentConfiguration, result: PredictionResult) -> str:
    wp = config.water_profile
    lines = [
        f"Hardware code:          {config.hardware_code}",
        f"Frequency:              {config.transducer.frequency:.2f} Hz",
        f"Bins:                   {wp.num_bins} x {wp.bin_size} m, blank {wp.blank} m",
        "",
        f"Profile range:          {result.profile_range:.2f} m",
        f"Bottom track range:     {result.bottom_track_range:.2f} m",
        f"First bin position:     {result.first_bin_position:.2f} m",
        f"Water absorption:       {result.absorption:.4f} dB/m" if config.water.absorption_enabled else None,
        f"Standard deviation:     {result.standard_deviation:.4f} m/s",
        f"Maximum velocity:       {result.max_velocity:.3f} m/s",
        "",
        f"Ensembles:              {result.number_of_ensembles}",
        f"Ensemble size:          {result.ensemble_size_bytes} bytes",
        f"Data size:              {result.data_size_bytes} bytes ({result.data_size_bytes / 1e6:.2f} MB)",
        "",
        f"Energy:                 {result.total_power:.2f} Wh",
        f"Usable energy per pack: {result.actual_battery_power:.2f} Wh",
        f"Battery packs:          {result.number_of_battery_packs:.2f}",
    ]
    lines = [line for line in lines if line is not None]
    if result.warnings:
        lines.append("")
        lines.extend(f"WARNING: {w}" for w in result.warnings)
    return "\n".join(lines)


def format_burst(config: DeploymentConfiguration, result: BurstPredictionResult) -> str:
    lines = [
        f"Hardware code:          {config.burst.primary_code or config.hardware_code}",
        f"Ensembles per burst:    {config.burst.ensembles_per_burst}",
        f"Burst interval:         {config.burst.burst_interval} s",
        "",
        f"Bytes per burst:        {result.bytes_per_burst}",
        f"Bursts:                 {result.number_of_bursts}",
        f"Bytes per deployment:   {result.bytes_per_deployment}",
        f"Transmit / receive:     {result.transmit_watts:.2f} W / {result.receive_watts:.2f} W",
        f"Energy per burst:       {result.watt_hours_per_burst:.4f} Wh",
        f"Energy per deployment:  {result.watt_hours_per_deployment:.2f} Wh",
        f"Battery packs:          {result.number_of_battery_packs:.2f}",
    ]
    return "\n".join(lines)


def cmd_predict(predictor: AdcpPredictor, args: argparse.Namespace) -> int:
    config = build_configuration(predictor, args)
    result = predictor.predict_continuous(config)
    if args.json:
        print(json.dumps({
            'configuration': config.model_dump(mode='json'),
            'prediction': result.model_dump(mode='json'),
        }, indent=2))
    else:
        print(format_prediction(config, result))
    return 0


def cmd_burst(predictor: AdcpPredictor, args: argparse.Namespace) -> int:
    config = build_configuration(predictor, args)
    burst_updates: Dict[str, Any] = {
        'ensembles_per_burst': args.ensembles,
        'burst_interval': args.interval,
    }
    if args.system:
        burst_updates.update(predictor.burst_model.layout_for_system(list(args.system), config.hardware_code))
    config = predictor.resolver.with_overrides(config, {'burst': burst_updates})

    result = predictor.predict_burst(config)
    if args.json:
        print(json.dumps({
            'configuration': config.model_dump(mode='json'),
            'prediction': result.model_dump(mode='json'),
        }, indent=2))
    else:
        print(format_burst(config, result))
    return 0


def cmd_variants(predictor: AdcpPredictor, args: argparse.Namespace) -> int:
    variants = predictor.resolver.list_variants()
    if args.json:
        print(json.dumps([v.model_dump() for v in variants], indent=2))
        return 0
    for v in variants:
        print(f"{v.code}  {v.frequency:>12.2f} Hz  {v.beams} beam(s)  {v.beam_angle:>4.0f} deg  {v.description}")
    return 0


def cmd_waves(predictor: AdcpPredictor, args: argparse.Namespace) -> int:
    defaults = predictor.burst_model.waves_defaults(args.code)
    bin_size = args.bin_size if args.bin_size is not None else defaults.bin_size
    blank = args.blank if args.blank is not None else defaults.blank
    lag = args.lag if args.lag is not None else defaults.lag
    puv = predictor.burst_model.waves_puv(args.code, bin_size, blank, lag)

    if args.json:
        print(json.dumps({'defaults': defaults.model_dump(), 'puv': puv.model_dump()}, indent=2))
        return 0
    print(f"Defaults:               blank {defaults.blank} m, bin {defaults.bin_size} m, lag {defaults.lag} m")
    print(f"Range:                  {puv.range:.2f} m")
    print(f"Standard deviation:     {puv.standard_deviation:.4f} m/s")
    print(f"Ambiguity velocity:     {puv.max_velocity:.3f} m/s")
    print(f"First bin location:     {puv.first_bin_location:.2f} m")
    return 0


def _add_configuration_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--variant", "-c", default=None, help="Hardware variant code (default 4: 300 kHz 4 beam 20 deg)")
    p.add_argument("--scope", choices=[s.value for s in ResolveScope], default=ResolveScope.FULL.value,
                   help="Variant defaults to apply (default full)")
    p.add_argument("--set", action="append", metavar="SECTION.FIELD=VALUE",
                   help="Override a configuration field, e.g. water_profile.num_bins=50 (repeatable)")
    p.add_argument("--battery", choices=[b.value for b in BatteryType], help="Battery pack type")
    p.add_argument("--temperature", type=float, default=None, help="Water temperature [degC], derives the speed of sound")
    p.add_argument("--salinity", type=float, default=35.0, help="Salinity [PSU] (default 35)")
    p.add_argument("--depth", type=float, default=0.0, help="Transducer depth [m] (default 0)")
    p.add_argument("--absorption", action="store_true",
                   help="Correct the range for water absorption from temperature, salinity and depth")
    p.add_argument("--data-sets", dest="data_sets", action="store_true",
                   help="Size ensembles from the recorded data sets (select them with --set data_sets.NAME=false)")
    p.add_argument("--json", action="store_true", help="Print JSON instead of text")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(description="ADCP deployment planner: range, precision, data volume and battery budget")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    p.add_argument("--log-file", type=str, default=None, help="Also write the log to this file")
    sub = p.add_subparsers(dest="command", required=True)

    predict = sub.add_parser("predict", help="Predict a continuous deployment")
    _add_configuration_args(predict)

    burst = sub.add_parser("burst", help="Predict a burst (waves) deployment")
    _add_configuration_args(burst)
    burst.add_argument("--ensembles", type=int, required=True, help="Ensembles per burst")
    burst.add_argument("--interval", type=float, required=True, help="Burst interval [s]")
    burst.add_argument("--system", type=str, default=None,
                       help="Codes of every subsystem in the ADCP, e.g. 4C for a 300 kHz with vertical beam")

    variants = sub.add_parser("variants", help="List hardware variant codes")
    variants.add_argument("--json", action="store_true", help="Print JSON instead of text")

    waves = sub.add_parser("waves", help="Waves defaults and PUV model of a subsystem")
    waves.add_argument("code", help="Subsystem code")
    waves.add_argument("--bin-size", dest="bin_size", type=float, default=None, help="Bin size [m]")
    waves.add_argument("--blank", type=float, default=None, help="Blank [m]")
    waves.add_argument("--lag", type=float, default=None, help="Lag [m]")
    waves.add_argument("--json", action="store_true", help="Print JSON instead of text")

    return p.parse_args(argv)


COMMANDS = {
    'predict': cmd_predict,
    'burst': cmd_burst,
    'variants': cmd_variants,
    'waves': cmd_waves,
}


def run(args: argparse.Namespace, predictor: Optional[AdcpPredictor] = None) -> int:
    """Dispatches a parsed command line."""
    predictor = predictor or AdcpPredictor()
    try:
        return COMMANDS[args.command](predictor, args)
    except (ValueError, ValidationError) as e:
        logging.getLogger(__name__).debug("Invalid configuration", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
