#!/usr/bin/env python3
"""
Wave Order Picking - Solver Entry Point

Main entry point for selecting an order wave from an instance file.
Runs the configured strategy, prints a quality report and writes the
solution (plus optional GA history and summary plot).
"""

import sys
import argparse
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from waveopt.config_loader import load_config, print_config_summary, validate_config, ConfigurationError
from waveopt.instance_io import read_instance, write_solution
from waveopt.solver import WaveSolver
from waveopt.wave_metrics import WaveMetrics, print_wave_report


def build_config(args) -> dict:
    """Load the YAML config (if any) and apply command-line overrides"""
    config = {}
    if args.config:
        config = load_config(args.config)
    elif Path("config.yaml").exists():
        config = load_config("config.yaml")

    solver_config = dict(config.get("solver") or {})
    if args.strategy:
        solver_config["strategy"] = args.strategy
    if args.time_limit is not None:
        solver_config["time_limit_seconds"] = args.time_limit
    if args.seed is not None:
        solver_config["random_seed"] = args.seed
    config["solver"] = solver_config

    issues = validate_config(config)
    if issues:
        raise ConfigurationError("; ".join(issues))
    return config


def run_solver(args):
    """Solve one instance and report"""
    config = build_config(args)

    if not args.no_summary:
        print("=" * 60)
        print("WAVE ORDER PICKING")
        print("=" * 60)
        if args.config:
            print_config_summary(args.config)

    print(f"\nLoading instance: {args.instance}")
    instance = read_instance(args.instance)
    print(f"  Orders: {instance.n_orders}, items: {instance.n_items}, aisles: {instance.n_aisles}")
    print(f"  Wave window: [{instance.wave_size_lb}, {instance.wave_size_ub}]")

    solver = WaveSolver(instance, config)
    print(f"\nRunning '{solver.strategy}' strategy...")
    result = solver.run(verbose=True)
    print(f"Solve completed in {result.elapsed_seconds:.3f} seconds")

    for note in result.notes:
        print(f"  - {note}")

    metrics = WaveMetrics(instance).analyze(result.candidate)
    print("\n" + print_wave_report(metrics, detailed=not args.no_summary))

    output_config = config.get("output") or {}
    output_dir = Path(args.output or output_config.get("directory", "output"))
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(args.instance).stem

    solution_path = write_solution(result.candidate, output_dir / f"{stem}_solution.txt")
    print(f"\n  Solution: {solution_path}")

    if result.history and output_config.get("write_history", True):
        from ga_ext.io_utils import save_generation_history
        history_path = save_generation_history(result.history, output_dir / f"{stem}_history.csv")
        print(f"  History: {history_path}")

    vis_config = config.get("visualization") or {}
    if args.plot or vis_config.get("save_plots", False):
        print(f"\nGenerating summary plot...")
        try:
            # Set matplotlib to non-interactive backend to avoid display issues
            import matplotlib
            matplotlib.use('Agg')
            import matplotlib.pyplot as plt

            from waveopt.visualization import WaveVisualizer
            from waveopt.wave_selection import build_item_aisle_index, score_orders

            scores = score_orders(instance, build_item_aisle_index(instance.aisles))
            plot_path = output_dir / f"{stem}_summary.png"
            fig = WaveVisualizer(instance).plot_summary(
                result.candidate,
                metrics,
                history=result.history,
                scores=scores,
                figsize=tuple(vis_config.get('figure_size', [12, 8])),
                save_path=str(plot_path)
            )
            plt.close(fig)
            print(f"  Plot: {plot_path}")
        except Exception as e:
            print(f"  Plot failed: {e}")

    return result


def main():
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="Wave Order Picking - select orders and aisles for one wave",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 main.py instances/example_small.txt                     # Config defaults (hybrid)
  python3 main.py instances/example_small.txt --strategy greedy   # Greedy only
  python3 main.py instances/example_small.txt --time-limit 60 --seed 7
  python3 main.py instances/example_small.txt --plot              # Also save a summary PNG
  python3 main.py instances/example_small.txt -c custom.yaml -o results
        """
    )

    parser.add_argument('instance', metavar='INSTANCE', help='Instance file path')

    parser.add_argument(
        '--config', '-c',
        default=None,
        help='Configuration file path (default: config.yaml if present)'
    )

    parser.add_argument(
        '--output', '-o',
        metavar='DIR',
        help='Output directory (default: output.directory from config)'
    )

    parser.add_argument(
        '--strategy', '-s',
        choices=['greedy', 'genetic', 'hybrid'],
        help='Override the configured strategy'
    )

    parser.add_argument(
        '--time-limit', '-t',
        type=float,
        metavar='SECONDS',
        help='Override the time budget'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Override the random seed'
    )

    parser.add_argument(
        '--plot', '-p',
        action='store_true',
        help='Save a summary plot'
    )

    parser.add_argument(
        '--no-summary',
        action='store_true',
        help='Skip the configuration summary and per-aisle details'
    )

    args = parser.parse_args()

    try:
        result = run_solver(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    sys.exit(0 if result.feasible else 2)


if __name__ == "__main__":
    main()
