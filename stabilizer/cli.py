#!/usr/bin/env python3
"""
Stabilizer Simulation CLI

Fly the altitude/roll stabilizer against the planar quadrotor plant.

Usage:
    quad-stabilizer --preset reference --duration 10 --vertical 0.5
    quad-stabilizer --config configs/reference.yaml --script configs/climb_and_roll.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from stabilizer.control.command_sources import ConstantCommandSource, ScriptedCommandSource
from stabilizer.control.control_loop import ControlLoop
from stabilizer.control.errors import StabilizerError
from stabilizer.physics.planar_quadrotor import PlanarQuadrotor
from stabilizer.platforms.stabilizer_configs import get_config, list_configs
from stabilizer.runner import run_simulation
from stabilizer.specs.config_loader import StabilizerConfigLoader, load_command_script
from stabilizer.telemetry.reporter import TelemetryReporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Quadrotor altitude/roll stabilizer simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--config', type=str, help='Stabilizer config YAML')
    source.add_argument('--preset', type=str, default='reference',
                        help=f"Built-in preset ({', '.join(list_configs())})")

    parser.add_argument('--duration', type=float, default=10.0, help='Simulated seconds')
    parser.add_argument('--dt', type=float, default=0.02, help='Physics timestep (s)')
    parser.add_argument('--vertical', type=float, default=0.0,
                        help='Constant climb stick in [-1, 1]')
    parser.add_argument('--roll', type=float, default=0.0,
                        help='Constant roll stick in [-1, 1]')
    parser.add_argument('--script', type=str, help='Stick script YAML (overrides --vertical/--roll)')
    parser.add_argument('--start-altitude', type=float, default=None,
                        help='Plant starting altitude (default: initial target altitude)')
    parser.add_argument('--output', '-o', type=str, help='Write telemetry JSON here')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.config:
            config = StabilizerConfigLoader().load_from_yaml(args.config)
        else:
            config = get_config(args.preset).validate()

        start_altitude = args.start_altitude
        if start_altitude is None:
            start_altitude = config.initial_target_altitude
        plant = PlanarQuadrotor.from_config(config, initial_altitude=start_altitude)

        commands = ConstantCommandSource(args.vertical, args.roll)
        loop = ControlLoop.from_config(config, commands, plant, plant)

        if args.script:
            segments = load_command_script(args.script)
            loop.command_source = ScriptedCommandSource.from_list(
                segments, clock=lambda: loop.elapsed_time
            )

        reporter = TelemetryReporter(interval=config.telemetry_interval)
        result = run_simulation(loop, plant, args.duration, args.dt, reporter)
    except (StabilizerError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    if result.num_steps:
        print(f"\nFinal altitude: {result.altitude[-1]:.3f} "
              f"(target {result.target_altitude[-1]:.3f})")
        print(f"Final roll: {np.degrees(result.roll_angle[-1]):.2f} deg "
              f"(target {np.degrees(result.target_roll_angle[-1]):.2f} deg)")

    if args.output:
        reporter.save_json(args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
