#!/usr/bin/env python3
"""
Command-line branch predictor simulator.

Usage:
    bpsim bimodal <M2> <tracefile>
    bpsim gshare <M1> <N> <tracefile>
    bpsim hybrid <K> <M1> <N> <M2> <tracefile>
    bpsim --config predictor.yaml <tracefile>
"""

import argparse
import logging
import sys
from dataclasses import fields
from typing import List, Optional, Tuple

import yaml

from .predictors.base import ConfigurationError, DivisionUndefinedError
from .predictors.config import PredictorConfig
from .simulation.metrics import ReportFormatter
from .simulation.simulator import BranchSimulator, SimulationConfig
from .trace.formats import TraceFormatError
from .utils.helpers import load_config, parse_trace_path, save_results, setup_logging


logger = logging.getLogger(__name__)

PROG = 'bpsim'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Replay a branch trace through a bimodal, gshare or hybrid predictor',
        epilog='Predictor parameters: bimodal M2 | gshare M1 N | hybrid K M1 N M2'
    )
    parser.add_argument('arguments', nargs='+', metavar='ARG',
                       help='<predictor> <parameters...> <tracefile>, or only '
                            '<tracefile> with --config')
    parser.add_argument('--config', '-c', type=str, default=None,
                       help='YAML file with predictor and simulation settings')
    parser.add_argument('--strict', action='store_true',
                       help='Reject trace records with unrecognized outcomes')
    parser.add_argument('--max-branches', type=int, default=None,
                       help='Stop after this many branches')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Show progress while simulating')
    parser.add_argument('--log-level', type=str, default='WARNING',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Logging level')
    parser.add_argument('--log-file', type=str, default=None,
                       help='Also write log messages to this file')
    parser.add_argument('--output-dir', '-o', type=str, default=None,
                       help='Save results to this directory')
    parser.add_argument('--format', '-f', action='append',
                       choices=['json', 'yaml', 'csv'], dest='formats',
                       help='Result file format (repeatable, default: json)')
    return parser


def resolve_configuration(args: argparse.Namespace) -> Tuple[PredictorConfig, SimulationConfig, str]:
    """
    Turn parsed arguments into predictor and simulation configuration.

    Raises:
        ConfigurationError: The arguments do not describe a valid predictor
    """
    sim_options = {}

    if args.config:
        config = load_config(args.config)
        if len(args.arguments) != 1:
            raise ConfigurationError(
                f"Wrong number of inputs:{len(args.arguments)} "
                f"(expected only a trace file with --config)"
            )
        predictor_config = PredictorConfig.from_dict(config)
        simulation = config.get('simulation') or {}
        if not isinstance(simulation, dict):
            raise ConfigurationError(
                f"simulation options must be a mapping, got {type(simulation).__name__}"
            )
        sim_options = dict(simulation)
        trace_file = args.arguments[0]
    else:
        if len(args.arguments) < 2:
            raise ConfigurationError(f"Wrong number of inputs:{len(args.arguments)}")
        name, *params, trace_file = args.arguments
        predictor_config = PredictorConfig.from_args(name, params)

    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(map(str, sim_options)) - known)
    if unknown:
        raise ConfigurationError(f"Unknown simulation options: {', '.join(unknown)}")

    if args.strict:
        sim_options['strict_outcomes'] = True
    if args.verbose:
        sim_options['verbose'] = True
    if args.max_branches is not None:
        sim_options['max_branches'] = args.max_branches

    return predictor_config, SimulationConfig(**sim_options), trace_file


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        predictor_config, sim_config, trace_file = resolve_configuration(args)
    except (ConfigurationError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1

    print(ReportFormatter.format_command(PROG, predictor_config.to_dict(), trace_file))

    try:
        trace_path = parse_trace_path(trace_file)
        simulator = BranchSimulator(predictor_config, sim_config)
        results = simulator.run(trace_path)
        print(ReportFormatter.format(results))
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except TraceFormatError as e:
        print(f"Error: malformed trace {trace_file}: {e}")
        return 1
    except DivisionUndefinedError:
        print(f"Error: trace {trace_file} contains no branches")
        return 1

    if args.output_dir:
        paths = save_results(results.to_dict(), args.output_dir,
                             name=f"{predictor_config.name}_results",
                             formats=tuple(args.formats or ('json',)))
        for fmt, path in paths.items():
            logger.info("Saved %s results to %s", fmt, path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
