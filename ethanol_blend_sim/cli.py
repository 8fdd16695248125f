"""
Command-line interface for the ethanol blend engine performance simulation.

Runs the E10/E20 comparison, prints the headline metrics and writes the
comparison figure (PNG and PDF), data table and summary.
"""

import argparse
import logging
import sys
from typing import List, Optional

import matplotlib
import yaml

from .core.config import SimulationConfig
from .core.simulator import BlendSimulator
from .utils.validation import InvalidParameterError

logger = logging.getLogger("CLI")

EXIT_OK = 0
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ethanol-blend-sim",
        description="Compare spark-ignition engine performance on E10 and E20 fuel blends."
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--compression-ratio", type=float, dest="compression_ratio")
    parser.add_argument("--bore", type=float, help="cylinder bore (m)")
    parser.add_argument("--stroke", type=float, help="piston stroke (m)")
    parser.add_argument("--rpm-start", type=float, dest="rpm_start")
    parser.add_argument("--rpm-stop", type=float, dest="rpm_stop")
    parser.add_argument("--rpm-step", type=float, dest="rpm_step")
    parser.add_argument("--noise", type=float, dest="noise_fraction",
                        help="relative noise standard deviation (0.02 = 2%%)")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--no-noise", action="store_true", default=False,
                        help="export the clean model output")
    parser.add_argument("--output-dir", dest="output_dir")
    parser.add_argument("--no-plots", action="store_true", default=False)
    parser.add_argument("--no-data", action="store_true", default=False)
    parser.add_argument("--verbose", action="store_true", default=False)
    return parser


def load_config(args: argparse.Namespace) -> SimulationConfig:
    """
    Build the run configuration: defaults, then the YAML file, then flags.

    Args:
        args: Parsed command-line arguments

    Returns:
        Validated SimulationConfig
    """
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()

    overrides = {
        'compression_ratio': args.compression_ratio,
        'bore': args.bore,
        'stroke': args.stroke,
        'rpm_start': args.rpm_start,
        'rpm_stop': args.rpm_stop,
        'rpm_step': args.rpm_step,
        'noise_fraction': args.noise_fraction,
        'seed': args.seed,
        'output_dir': args.output_dir,
    }
    if args.no_noise:
        overrides['add_noise'] = False
    if args.no_plots:
        overrides['save_plots'] = False
    if args.no_data:
        overrides['save_data'] = False

    return config.update(overrides)


def print_summary(result) -> None:
    """Print the headline metrics of every blend and the differences to the baseline."""
    summary = result.comparison.summary()

    print("\n=== Blend Comparison ===")
    print(result.comparison.to_dataframe().round(2).to_string())

    for name, differences in summary['relative_to_baseline_pct'].items():
        print(f"\n{name} vs {summary['baseline']}:")
        for metric, value in differences.items():
            print(f"  {metric}: {value:+.2f}%")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the simulation from the command line.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Files only, no window
    matplotlib.use("Agg")

    try:
        config = load_config(args)
        outcome = BlendSimulator(config).run_and_export()
    except (InvalidParameterError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error(str(e))
        return EXIT_INVALID

    print_summary(outcome['result'])

    if outcome['files']:
        print("\nExported files:")
        for path in outcome['files']:
            print(f"  {path}")

    print("\nSimulation complete.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
