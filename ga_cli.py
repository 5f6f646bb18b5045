#!/usr/bin/env python3
"""
GA Refinement CLI

Runs genetic refinement of an order wave from a YAML run configuration
naming the instance, an optional GA parameter file, the random seed and
the output directory (see examples/ga_run.yaml).

Examples:
    python3 ga_cli.py examples/ga_run.yaml
    python3 ga_cli.py examples/ga_run.yaml --plot
    python3 ga_cli.py --config examples/ga_run.yaml --validate-only
"""

import sys
import argparse
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def main():
    """Main entry point for GA CLI."""
    parser = argparse.ArgumentParser(
        description="Genetic refinement of order waves",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('run_config', nargs='?', metavar='RUN_CONFIG',
                        help='Run configuration YAML file')
    parser.add_argument('--config', dest='config_option', metavar='RUN_CONFIG',
                        help='Run configuration YAML file (alternative to the positional argument)')
    parser.add_argument('--validate-only', action='store_true',
                        help='Check the run configuration and exit')
    parser.add_argument('--plot', action='store_true',
                        help='Save a convergence plot next to the outputs')

    args = parser.parse_args()
    config_path = args.config_option or args.run_config
    if not config_path:
        parser.print_help()
        sys.exit(1)

    try:
        from ga_ext.cli import run_from_config
        result = run_from_config(config_path, validate_only=args.validate_only, plot=args.plot)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)

    if result is not None and not result.feasible:
        sys.exit(2)


if __name__ == '__main__':
    main()
