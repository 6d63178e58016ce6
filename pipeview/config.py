import argparse
import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from .errors import ConfigError
from .program import load_program, parse_program

CONFIG_DIR = "configs"
PROGRAM_DIR = "programs"


@dataclass
class SimConfig:
    forwarding: bool = True
    interval: float = 0.0
    program: List[int] = field(default_factory=list)
    csv_path: Optional[str] = None
    vcd_path: Optional[str] = None
    config_path: Optional[str] = None


def _is_yaml(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in {".yml", ".yaml"}


def resolve_config_path(name):
    """Find a config by path, then under configs/, adding .json when there is no extension."""
    config_input = name
    if not os.path.splitext(config_input)[1]:
        config_input += ".json"

    possible_paths = [
        config_input,
        os.path.join(CONFIG_DIR, config_input),
        os.path.join(CONFIG_DIR, os.path.basename(config_input)),
    ]
    for p in possible_paths:
        if os.path.exists(p):
            return p
    raise ConfigError(f"Config file not found: {name} (checked {possible_paths})")


def resolve_program_path(name):
    possible_paths = [
        name,
        os.path.join(PROGRAM_DIR, name),
        name + ".hex",
        os.path.join(PROGRAM_DIR, name + ".hex"),
    ]
    for p in possible_paths:
        if os.path.exists(p):
            return p
    raise ConfigError(f"Could not find '{name}' in the current directory or inside '{PROGRAM_DIR}/'.")


def load_config(path) -> SimConfig:
    """Load a JSON or YAML config into a SimConfig. Unknown keys are ignored."""
    config_file = resolve_config_path(path)
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) if _is_yaml(config_file) else json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config {config_file}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file}: config must be an object/dict at the top level.")

    forwarding = data.get("forwarding", True)
    if not isinstance(forwarding, bool):
        raise ConfigError(f"{config_file}: 'forwarding' must be true or false, got {forwarding!r}.")

    try:
        interval = float(data.get("interval", 0.0))
    except (TypeError, ValueError):
        raise ConfigError(f"{config_file}: 'interval' must be a number of seconds, got {data.get('interval')!r}.") from None

    output = data.get("output") or {}
    if not isinstance(output, dict):
        raise ConfigError(f"{config_file}: 'output' must be an object with csv/vcd paths.")

    program = data.get("program") or []
    if isinstance(program, str):
        program = program.splitlines()
    elif not isinstance(program, list):
        raise ConfigError(f"{config_file}: 'program' must be a list of hex words.")
    # YAML reads an all-digit word such as 20080005 as an int
    program = [str(word) for word in program]

    return SimConfig(
        forwarding=forwarding,
        interval=interval,
        program=parse_program("\n".join(program)) if program else [],
        csv_path=output.get("csv"),
        vcd_path=output.get("vcd"),
        config_path=config_file,
    )


def build_parser():
    parser = argparse.ArgumentParser(description="Simulate hazards, stalls and forwarding of MIPS instructions in a 5-stage pipeline.")
    parser.add_argument("program", nargs='?', default=None, help="Optional: Hex program file (one instruction word per line).")
    parser.add_argument("-c", "--config", default=None, help="Optional: Name of the JSON/YAML config file (e.g. pipeline).")
    parser.add_argument("--forwarding", dest="forwarding", action="store_true", default=None, help="Resolve RAW hazards by forwarding.")
    parser.add_argument("--no-forwarding", dest="forwarding", action="store_false", help="Resolve RAW hazards by stalling.")
    parser.add_argument("--interval", type=float, default=None, help="Seconds per clock cycle (0 = run at once).")
    parser.add_argument("--csv", default=None, help="Write the pipeline table to this CSV file.")
    parser.add_argument("--vcd", default=None, help="Write the run as a VCD waveform.")
    parser.add_argument("--replay", default=None, help="Print the table of a VCD written with --vcd and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def load_settings(argv=None):
    """Merge command line arguments over the config file."""
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config) if args.config else SimConfig()

    if args.program:
        cfg.program = load_program(resolve_program_path(args.program))
    if args.forwarding is not None:
        cfg.forwarding = args.forwarding
    if args.interval is not None:
        cfg.interval = args.interval
    if args.csv:
        cfg.csv_path = args.csv
    if args.vcd:
        cfg.vcd_path = args.vcd
    return args, cfg
