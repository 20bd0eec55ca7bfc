#!/usr/bin/env python3
"""
Plant runner - step the plant from the command line.

Loads config/plant.yml, config/topology.yml and config/simulation.yml,
applies the requested setpoints, advances the plant and prints telemetry.

Usage:
  python tools/run_plant.py --steps 20 --rods 40 --pump-rpm pump_1=600
  python tools/run_plant.py --steps 5 --close-valve steam_valve_2 --json
  python tools/run_plant.py --steps 50 --rods 0 --quench-at 30

Exit codes:
  0  all steps completed
  1  invalid configuration or setpoint
  2  the reactor or condenser failed
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.config_loader import ConfigLoader, parameters_from_config
from plant.errors import CriticalComponentFailure
from plant.model.factory import build_plant
from plant.monitoring.logging_system import configure_logging

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_PLANT_FAILURE = 2


def parse_assignment(text):
    """Parse NAME=VALUE into (name, int value)."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=RPM, got {text!r}")
    try:
        return name, int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"rpm must be an integer, got {value!r}") from None


def create_parser():
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Reactor plant runner",
        epilog="""
Examples:
  # Raise the rods part way and run two feedwater pumps
  python tools/run_plant.py --steps 20 --rods 40 \\
    --pump-rpm pump_1=600 --pump-rpm pump_2=600 --coolant-rpm 800

  # Close the bypass valve so all steam drives the turbine
  python tools/run_plant.py --steps 10 --rods 20 --close-valve steam_valve_2
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--config-dir", default="config", help="Configuration directory")
    parser.add_argument("--steps", type=int, help="Steps to run (default from simulation.yml)")
    parser.add_argument("--rods", type=int, help="Control rod position, percent lowered")
    parser.add_argument(
        "--pump-rpm",
        type=parse_assignment,
        action="append",
        default=[],
        metavar="NAME=RPM",
        help="Pump rpm setpoint (repeatable)",
    )
    parser.add_argument("--coolant-rpm", type=int, help="Condenser coolant pump rpm")
    parser.add_argument(
        "--close-valve",
        action="append",
        default=[],
        metavar="NAME",
        help="Close a valve (repeatable)",
    )
    parser.add_argument(
        "--quench-at",
        type=int,
        metavar="STEP",
        help="Quench the reactor after this many steps",
    )
    parser.add_argument("--json", action="store_true", help="Print final telemetry as JSON")
    parser.add_argument("--log-level", help="Override the logging level")

    return parser


def print_summary(plant):
    """Print a one-screen plant summary."""
    telemetry = plant.get_telemetry()
    components = telemetry["components"]
    reactor = components[plant.reactor.name]
    condenser = components[plant.condenser.name]

    print(f"Step {telemetry['step']}  score {telemetry['score']}")
    print(
        f"  reactor:   T={reactor['temperature']:5d}  P={reactor['pressure']:5d}  "
        f"water={reactor['water_volume']:6d}  steam={reactor['steam_volume']:6d}  "
        f"health={reactor['health']}"
    )
    print(
        f"  condenser: T={condenser['temperature']:5d}  P={condenser['pressure']:5d}  "
        f"water={condenser['water_volume']:6d}  steam={condenser['steam_volume']:6d}  "
        f"health={condenser['health']}"
    )
    for turbine in plant.turbines:
        print(f"  {turbine.name}: {turbine.rpm} rpm")
    if "generator" in telemetry:
        print(f"  generator: {telemetry['generator']['power_output']} power")
    if telemetry["failed_components"]:
        print(f"  failed: {', '.join(telemetry['failed_components'])}")


def run(plant, steps, quench_at=None):
    """Advance the plant, quenching once after quench_at steps if given."""
    if quench_at is not None and 0 <= quench_at < steps:
        plant.advance(quench_at)
        plant.quench_reactor()
        plant.advance(steps - quench_at)
    else:
        plant.advance(steps)


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    loader = ConfigLoader(config_dir=args.config_dir)
    config = loader.load_all()
    simulation = config["simulation"]

    try:
        configure_logging(
            log_dir=simulation.get("log_dir"),
            level=args.log_level or simulation.get("log_level", "INFO"),
        )
        plant = build_plant(config["topology"], parameters_from_config(config["plant"]))

        if args.rods is not None:
            plant.set_control_rods(args.rods)
        for name, rpm in args.pump_rpm:
            plant.set_pump_rpm(name, rpm)
        if args.coolant_rpm is not None:
            plant.set_pump_rpm(plant.coolant_pump.name, args.coolant_rpm)
        for name in args.close_valve:
            plant.set_valve(name, False)

        steps = args.steps if args.steps is not None else int(simulation.get("steps", 10))
        if steps < 0:
            raise ValueError(f"steps cannot be negative, got {steps}")
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_INVALID

    exit_code = EXIT_OK
    try:
        run(plant, steps, args.quench_at)
    except CriticalComponentFailure as failure:
        print(f"[FAILURE] {failure}", file=sys.stderr)
        exit_code = EXIT_PLANT_FAILURE

    if args.json:
        print(json.dumps(plant.get_telemetry(), indent=2))
    else:
        print_summary(plant)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
